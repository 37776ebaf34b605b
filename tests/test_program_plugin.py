from __future__ import annotations

import pytest

from kitgen.exceptions import DuplicateArgumentNamesError
from kitgen.nodes.model import (
    AccountNode,
    InstructionAccountNode,
    InstructionArgumentNode,
    InstructionNode,
    NumberTypeNode,
    PayerValueNode,
    PdaLinkNode,
    PdaValueNode,
    ProgramNode,
    PublicKeyTypeNode,
)
from kitgen.rendering.program_plugin import (
    MAKE_OPTIONAL_HELPER,
    PayerField,
    get_program_plugin_fragment,
    has_payer_default_inputs,
    payer_fields,
    renamed_args_map,
)
from kitgen.rendering.scope import RenderScope
from tests.code_helpers import code_contains, resolved_imports

TOKEN = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


def _program(**kwargs) -> ProgramNode:
    return ProgramNode("token", TOKEN, **kwargs)


def test_plugin_with_accounts_only(scope) -> None:
    plugin = get_program_plugin_fragment(_program(accounts=[AccountNode("mint")]), scope)
    assert code_contains(
        plugin,
        "export type TokenPlugin = { accounts: TokenPluginAccounts; };",
        "export type TokenPluginAccounts = { mint: ReturnType<typeof getMintCodec> & SelfFetchFunctions<MintArgs, Mint>; };",
        "export type TokenPluginRequirements = ClientWithRpc<GetAccountInfoApi & GetMultipleAccountsApi>;",
        "export function tokenProgram() {",
        "return <T extends TokenPluginRequirements>(client: T) => {",
        "return { ...client, token: { accounts: { mint: addSelfFetchFunctions(client, getMintCodec()) } } as TokenPlugin };",
    )
    assert "instructions" not in plugin.content
    assert MAKE_OPTIONAL_HELPER not in plugin.content
    assert resolved_imports(plugin) == {
        "../accounts": {"getMintCodec", "type Mint", "type MintArgs"},
        "@solana/kit": {"type ClientWithRpc", "type GetAccountInfoApi", "type GetMultipleAccountsApi"},
        "@solana/program-client-core": {"addSelfFetchFunctions", "type SelfFetchFunctions"},
    }


def test_plugin_with_instructions_only(scope) -> None:
    plugin = get_program_plugin_fragment(_program(instructions=[InstructionNode("approve")]), scope)
    assert code_contains(
        plugin,
        "export type TokenPlugin = { instructions: TokenPluginInstructions; };",
        "export type TokenPluginInstructions = { approve: (input: ApproveInput) => ReturnType<typeof getApproveInstruction> & SelfPlanAndSendFunctions; };",
        "export type TokenPluginRequirements = ClientWithTransactionPlanning & ClientWithTransactionSending;",
        "instructions: { approve: (input: ApproveInput) => addSelfPlanAndSendFunctions(client, getApproveInstruction(input)) }",
    )
    assert "accounts" not in plugin.content
    # The value import of the builder absorbs its type-only use.
    assert resolved_imports(plugin)["../instructions"] == {"getApproveInstruction", "type ApproveInput"}


def test_plugin_makes_payer_inputs_optional(scope) -> None:
    transfer = InstructionNode(
        "transfer",
        accounts=[
            InstructionAccountNode("source", is_writable=True),
            InstructionAccountNode("payer", is_signer=True, default_value=PayerValueNode()),
        ],
    )
    plugin = get_program_plugin_fragment(_program(instructions=[transfer]), scope)
    assert code_contains(
        plugin,
        "ClientWithPayer & ClientWithTransactionPlanning & ClientWithTransactionSending;",
        "transfer: (input: MakeOptional<TransferInput, 'payer'>) => addSelfPlanAndSendFunctions(client, getTransferInstruction({ ...input, payer: input.payer ?? client.payer }))",
    )
    assert plugin.content.endswith(MAKE_OPTIONAL_HELPER)


def test_plugin_uses_payer_address_for_non_signers(scope) -> None:
    create = InstructionNode(
        "create",
        accounts=[
            InstructionAccountNode("funder", is_signer=True, default_value=PayerValueNode()),
            InstructionAccountNode("owner", default_value=PayerValueNode()),
        ],
        arguments=[
            InstructionArgumentNode("authority", PublicKeyTypeNode(), default_value=PayerValueNode()),
        ],
    )
    plugin = get_program_plugin_fragment(_program(instructions=[create]), scope)
    assert code_contains(
        plugin,
        "MakeOptional<CreateInput, 'funder' | 'owner' | 'authority'>",
        "{ ...input, funder: input.funder ?? client.payer, owner: input.owner ?? client.payer.address, authority: input.authority ?? client.payer.address }",
    )


def test_plugin_skips_optional_payer_accounts(scope) -> None:
    create = InstructionNode(
        "create",
        accounts=[
            InstructionAccountNode("payer", is_signer=True, is_optional=True, default_value=PayerValueNode()),
        ],
    )
    program = _program(instructions=[create])
    assert not has_payer_default_inputs(program)
    plugin = get_program_plugin_fragment(program, scope)
    assert "MakeOptional" not in plugin.content
    assert "ClientWithPayer" not in plugin.content


def test_plugin_uses_async_builders() -> None:
    create = InstructionNode(
        "createAta",
        accounts=[
            InstructionAccountNode("ata", default_value=PdaValueNode(PdaLinkNode("associatedToken"))),
        ],
    )
    plugin = get_program_plugin_fragment(_program(instructions=[create]), RenderScope())
    assert code_contains(
        plugin,
        "createAta: (input: CreateAtaAsyncInput) => ReturnType<typeof getCreateAtaInstructionAsync>",
        "addSelfPlanAndSendFunctions(client, getCreateAtaInstructionAsync(input))",
    )


def test_plugin_for_empty_program(scope) -> None:
    assert get_program_plugin_fragment(_program(), scope) is None


def test_renamed_args_map() -> None:
    instruction = InstructionNode(
        "transfer",
        accounts=[InstructionAccountNode("authority")],
        arguments=[
            InstructionArgumentNode("authority", PublicKeyTypeNode()),
            InstructionArgumentNode("amount", NumberTypeNode("u64")),
        ],
    )
    assert renamed_args_map(instruction) == {"authority": "authorityArg"}


def test_duplicate_argument_names_are_rejected() -> None:
    instruction = InstructionNode(
        "transfer",
        arguments=[InstructionArgumentNode("amount", NumberTypeNode())],
        extra_arguments=[InstructionArgumentNode("amount", NumberTypeNode())],
    )
    with pytest.raises(DuplicateArgumentNamesError) as excinfo:
        renamed_args_map(instruction)
    assert excinfo.value.names == ["amount"]
    assert "[transfer]" in str(excinfo.value)


def test_payer_fields_follow_renamed_arguments() -> None:
    instruction = InstructionNode(
        "create",
        accounts=[InstructionAccountNode("payer", is_signer="either", default_value=PayerValueNode())],
        arguments=[InstructionArgumentNode("payer", PublicKeyTypeNode(), default_value=PayerValueNode())],
    )
    assert payer_fields(instruction) == [PayerField("payer", True), PayerField("payerArg", False)]
