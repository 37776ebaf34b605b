"""Per-program client plugin: helper types and the registration function."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Dict, List, Optional, Union

from kitgen.casing import camel_case
from kitgen.exceptions import DuplicateArgumentNamesError
from kitgen.nodes.model import (
    InstructionAccountNode,
    InstructionArgumentNode,
    InstructionNode,
    PayerValueNode,
    ProgramNode,
)
from kitgen.rendering.async_defaults import get_async_instructions
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.scope import RenderScope

MAKE_OPTIONAL_HELPER = "type MakeOptional<T, K extends keyof T> = Omit<T, K> & Partial<Pick<T, K>>;"


@dataclass(frozen=True)
class PayerField:
    name: str
    signer: bool


def renamed_args_map(instruction: InstructionNode) -> Dict[str, str]:
    """Argument names that collide with an account name, mapped to their field name."""
    names = [a.name for a in [*instruction.arguments, *instruction.extra_arguments]]
    duplicates = {name for name in names if names.count(name) > 1}
    if duplicates:
        raise DuplicateArgumentNamesError(instruction.name, duplicates)
    account_names = {account.name for account in instruction.accounts}
    return {name: camel_case(f"{name}Arg") for name in names if name in account_names}


def payer_default_inputs(
    instruction: InstructionNode,
) -> List[Union[InstructionAccountNode, InstructionArgumentNode]]:
    return [
        *[
            account
            for account in instruction.accounts
            if not account.is_optional and isinstance(account.default_value, PayerValueNode)
        ],
        *[
            argument
            for argument in instruction.arguments
            if isinstance(argument.default_value, PayerValueNode)
        ],
    ]


def payer_fields(instruction: InstructionNode) -> List[PayerField]:
    inputs = payer_default_inputs(instruction)
    if not inputs:
        return []
    renamed = renamed_args_map(instruction)
    fields = []
    for item in inputs:
        if isinstance(item, InstructionAccountNode):
            fields.append(PayerField(item.name, item.is_signer is not False))
        else:
            fields.append(PayerField(renamed.get(item.name, item.name), False))
    return fields


def has_payer_default_inputs(program: ProgramNode) -> bool:
    return any(payer_default_inputs(instruction) for instruction in program.instructions)


def _join(separator: str):
    return lambda contents: separator.join(contents)


def _plugin_type(program: ProgramNode, scope: RenderScope) -> Fragment:
    names = scope.name_api
    fields = merge_fragments(
        [
            Fragment(f"accounts: {names.program_plugin_accounts_type(program.name)};")
            if program.accounts
            else None,
            Fragment(f"instructions: {names.program_plugin_instructions_type(program.name)};")
            if program.instructions
            else None,
        ],
        _join(" "),
    )
    return fragment(f"export type {names.program_plugin_type(program.name)} = {{ ", fields, " };")


def _plugin_accounts_type(program: ProgramNode, scope: RenderScope) -> Optional[Fragment]:
    if not program.accounts:
        return None
    names = scope.name_api
    self_fetch = use("type SelfFetchFunctions", "solanaProgramClientCore")
    fields = merge_fragments(
        [
            fragment(
                f"{names.program_plugin_account_key(account.name)}: ReturnType<typeof ",
                use(f"type {names.codec_function(account.name)}", scope.import_from(account)),
                "> & ",
                self_fetch,
                "<",
                use(f"type {names.data_args_type(account.name)}", scope.import_from(account)),
                ", ",
                use(f"type {names.data_type(account.name)}", scope.import_from(account)),
                ">;",
            )
            for account in program.accounts
        ],
        _join(" "),
    )
    return fragment(f"export type {names.program_plugin_accounts_type(program.name)} = {{ ", fields, " };")


def _input_type(instruction: InstructionNode, is_async: bool, scope: RenderScope) -> Fragment:
    names = scope.name_api
    if is_async:
        type_name = names.instruction_async_input_type(instruction.name)
    else:
        type_name = names.instruction_sync_input_type(instruction.name)
    return use(f"type {type_name}", scope.import_from(instruction))


def _builder_name(instruction: InstructionNode, is_async: bool, scope: RenderScope) -> str:
    if is_async:
        return scope.name_api.instruction_async_function(instruction.name)
    return scope.name_api.instruction_sync_function(instruction.name)


def _plugin_instructions_type(
    program: ProgramNode, async_instructions: Collection[str], scope: RenderScope
) -> Optional[Fragment]:
    if not program.instructions:
        return None
    names = scope.name_api
    self_plan_and_send = use("type SelfPlanAndSendFunctions", "solanaProgramClientCore")
    fields = []
    for instruction in program.instructions:
        is_async = instruction.name in async_instructions
        builder = use(f"type {_builder_name(instruction, is_async, scope)}", scope.import_from(instruction))
        fields.append(
            fragment(
                f"{names.program_plugin_instruction_key(instruction.name)}: (input: ",
                _input_type(instruction, is_async, scope),
                ") => ReturnType<typeof ",
                builder,
                "> & ",
                self_plan_and_send,
                ";",
            )
        )
    return fragment(
        f"export type {names.program_plugin_instructions_type(program.name)} = {{ ",
        merge_fragments(fields, _join(" ")),
        " };",
    )


def _plugin_requirements_type(program: ProgramNode, scope: RenderScope) -> Fragment:
    client_with_rpc = fragment(
        use("type ClientWithRpc", "solanaPluginInterfaces"),
        "<",
        use("type GetAccountInfoApi", "solanaRpcApi"),
        " & ",
        use("type GetMultipleAccountsApi", "solanaRpcApi"),
        ">",
    )
    requirements = merge_fragments(
        [
            client_with_rpc if program.accounts else None,
            use("type ClientWithPayer", "solanaPluginInterfaces")
            if has_payer_default_inputs(program)
            else None,
            use("type ClientWithTransactionPlanning", "solanaPluginInterfaces")
            if program.instructions
            else None,
            use("type ClientWithTransactionSending", "solanaPluginInterfaces")
            if program.instructions
            else None,
        ],
        _join(" & "),
    )
    return fragment(
        f"export type {scope.name_api.program_plugin_requirements_type(program.name)} = ",
        requirements,
        ";",
    )


def _plugin_accounts_object(program: ProgramNode, scope: RenderScope) -> Optional[Fragment]:
    if not program.accounts:
        return None
    names = scope.name_api
    add_self_fetch = use("addSelfFetchFunctions", "solanaProgramClientCore")
    fields = merge_fragments(
        [
            fragment(
                f"{names.program_plugin_account_key(account.name)}: ",
                add_self_fetch,
                "(client, ",
                use(names.codec_function(account.name), scope.import_from(account)),
                "())",
            )
            for account in program.accounts
        ],
        _join(", "),
    )
    return fragment("accounts: { ", fields, " }")


def _plugin_instruction_entry(
    instruction: InstructionNode, is_async: bool, scope: RenderScope
) -> Fragment:
    key = scope.name_api.program_plugin_instruction_key(instruction.name)
    input_type = _input_type(instruction, is_async, scope)
    builder = use(_builder_name(instruction, is_async, scope), scope.import_from(instruction))
    add_self_plan_and_send = use("addSelfPlanAndSendFunctions", "solanaProgramClientCore")

    fields = payer_fields(instruction)
    if not fields:
        return fragment(
            f"{key}: (input: ", input_type, ") => ", add_self_plan_and_send, "(client, ", builder, "(input))"
        )

    optional_union = " | ".join(f"'{f.name}'" for f in fields)
    overrides = ", ".join(
        f"{f.name}: input.{f.name} ?? {'client.payer' if f.signer else 'client.payer.address'}"
        for f in fields
    )
    return fragment(
        f"{key}: (input: MakeOptional<",
        input_type,
        f", {optional_union}>) => ",
        add_self_plan_and_send,
        "(client, ",
        builder,
        f"({{ ...input, {overrides} }}))",
    )


def _plugin_instructions_object(
    program: ProgramNode, async_instructions: Collection[str], scope: RenderScope
) -> Optional[Fragment]:
    if not program.instructions:
        return None
    fields = merge_fragments(
        [
            _plugin_instruction_entry(instruction, instruction.name in async_instructions, scope)
            for instruction in program.instructions
        ],
        _join(", "),
    )
    return fragment("instructions: { ", fields, " }")


def _plugin_function(
    program: ProgramNode, async_instructions: Collection[str], scope: RenderScope
) -> Fragment:
    names = scope.name_api
    fields = merge_fragments(
        [
            _plugin_accounts_object(program, scope),
            _plugin_instructions_object(program, async_instructions, scope),
        ],
        _join(", "),
    )
    return fragment(
        f"export function {names.program_plugin_function(program.name)}() {{\n",
        f"    return <T extends {names.program_plugin_requirements_type(program.name)}>(client: T) => {{\n",
        f"        return {{ ...client, {names.program_plugin_key(program.name)}: {{ ",
        fields,
        f" }} as {names.program_plugin_type(program.name)} }};\n",
        "    };\n",
        "}",
    )


def get_program_plugin_fragment(program: ProgramNode, scope: RenderScope) -> Optional[Fragment]:
    """Assemble the plugin exposing a program's account and instruction helpers.

    Inputs defaulting to the payer become optional and fall back to the
    client's payer; returns ``None`` for a program with nothing to expose.
    """
    if not program.accounts and not program.instructions:
        return None
    async_instructions = get_async_instructions(program, scope.async_resolvers)
    return merge_fragments(
        [
            _plugin_type(program, scope),
            _plugin_accounts_type(program, scope),
            _plugin_instructions_type(program, async_instructions, scope),
            _plugin_requirements_type(program, scope),
            _plugin_function(program, async_instructions, scope),
            Fragment(MAKE_OPTIONAL_HELPER) if has_payer_default_inputs(program) else None,
        ],
        _join("\n\n"),
    )
