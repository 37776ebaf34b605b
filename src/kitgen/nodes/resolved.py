"""Instruction inputs in the order their default values must be computed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Set, Union

from kitgen.exceptions import CyclicDependencyError
from kitgen.nodes.model import (
    AccountBumpValueNode,
    AccountValueNode,
    ArgumentValueNode,
    ConditionalValueNode,
    IdentityValueNode,
    InstructionAccountNode,
    InstructionArgumentNode,
    InstructionInputValueNode,
    InstructionNode,
    IsSigner,
    PayerValueNode,
    PdaValueNode,
    ProgramIdValueNode,
    ProgramLinkNode,
    PublicKeyValueNode,
    ResolverValueNode,
)
from kitgen.nodes.schedule import declaration_schedule

InputKind = Literal["instructionAccountNode", "instructionArgumentNode"]


@dataclass(frozen=True)
class ResolvedInstructionInput:
    kind: InputKind
    name: str
    default_value: Optional[InstructionInputValueNode] = None
    is_signer: IsSigner = False
    is_optional: bool = False
    resolved_is_signer: IsSigner = False
    resolved_is_optional: bool = False
    node: Union[InstructionAccountNode, InstructionArgumentNode, None] = None

    @property
    def is_account(self) -> bool:
        return self.kind == "instructionAccountNode"


def _key(kind: str, name: str) -> str:
    prefix = "account" if kind in ("instructionAccountNode", "account") else "argument"
    return f"{prefix}:{name}"


def default_value_dependencies(value: Optional[InstructionInputValueNode]) -> Set[str]:
    """Keys (``account:<name>`` / ``argument:<name>``) a default value reads."""
    deps: Set[str] = set()
    if value is None:
        return deps
    if isinstance(value, (AccountValueNode, AccountBumpValueNode)):
        deps.add(_key("account", value.name))
    elif isinstance(value, ArgumentValueNode):
        deps.add(_key("argument", value.name))
    elif isinstance(value, PdaValueNode):
        for seed in value.seeds:
            deps |= default_value_dependencies(seed.value)
        deps |= default_value_dependencies(value.program_id)
    elif isinstance(value, ResolverValueNode):
        for dependency in value.depends_on:
            deps |= default_value_dependencies(dependency)
    elif isinstance(value, ConditionalValueNode):
        deps |= default_value_dependencies(value.condition)
        deps |= default_value_dependencies(value.if_true)
        deps |= default_value_dependencies(value.if_false)
    return deps


def _resolve_account(
    account: InstructionAccountNode, accounts: Dict[str, InstructionAccountNode]
) -> ResolvedInstructionInput:
    resolved_is_signer: IsSigner = account.is_signer
    resolved_is_optional = account.is_optional
    value = account.default_value
    if isinstance(value, AccountValueNode):
        target = accounts.get(value.name)
        if target is not None and target.is_signer != account.is_signer:
            resolved_is_signer = "either"
        if target is not None:
            resolved_is_optional = target.is_optional
    elif isinstance(value, (PublicKeyValueNode, ProgramLinkNode, ProgramIdValueNode)):
        resolved_is_signer = False if account.is_signer is False else "either"
        resolved_is_optional = False
    elif isinstance(value, (PdaValueNode, IdentityValueNode, PayerValueNode, ResolverValueNode)):
        resolved_is_optional = False
    return ResolvedInstructionInput(
        kind="instructionAccountNode",
        name=account.name,
        default_value=value,
        is_signer=account.is_signer,
        is_optional=account.is_optional,
        resolved_is_signer=resolved_is_signer,
        resolved_is_optional=resolved_is_optional,
        node=account,
    )


def resolved_instruction_inputs(instruction: InstructionNode) -> List[ResolvedInstructionInput]:
    accounts = {account.name: account for account in instruction.accounts}
    inputs: Dict[str, ResolvedInstructionInput] = {}
    for account in instruction.accounts:
        inputs[_key("account", account.name)] = _resolve_account(account, accounts)
    for argument in [*instruction.arguments, *instruction.extra_arguments]:
        inputs[_key("argument", argument.name)] = ResolvedInstructionInput(
            kind="instructionArgumentNode",
            name=argument.name,
            default_value=argument.default_value,
            node=argument,
        )

    keys = list(inputs)
    graph = {key: default_value_dependencies(item.default_value) for key, item in inputs.items()}
    result = declaration_schedule(keys, graph)
    if result.cycles:
        cycle = result.cycles[0]
        raise CyclicDependencyError(instruction.name, [*cycle, cycle[0]])
    return [inputs[key] for key in result.order]
