"""Logical module of the generated code that exports a linked node."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Union

from kitgen.nodes.model import (
    AccountNode,
    DefinedTypeLinkNode,
    InstructionNode,
    PdaLinkNode,
    ProgramLinkNode,
    ResolverValueNode,
)

LinkedNode = Union[
    AccountNode,
    DefinedTypeLinkNode,
    InstructionNode,
    PdaLinkNode,
    ProgramLinkNode,
    ResolverValueNode,
]


@dataclass(frozen=True)
class LinkOverrides:
    accounts: Dict[str, str] = field(default_factory=dict)
    defined_types: Dict[str, str] = field(default_factory=dict)
    instructions: Dict[str, str] = field(default_factory=dict)
    pdas: Dict[str, str] = field(default_factory=dict)
    programs: Dict[str, str] = field(default_factory=dict)
    resolvers: Dict[str, str] = field(default_factory=dict)


def get_import_from(node: LinkedNode, overrides: LinkOverrides | None = None) -> str:
    overrides = overrides or LinkOverrides()
    if isinstance(node, ResolverValueNode):
        return overrides.resolvers.get(node.name, "hooked")
    if isinstance(node, PdaLinkNode):
        return overrides.pdas.get(node.name, "generatedPdas")
    if isinstance(node, ProgramLinkNode):
        return overrides.programs.get(node.name, "generatedPrograms")
    if isinstance(node, DefinedTypeLinkNode):
        return overrides.defined_types.get(node.name, "generatedTypes")
    if isinstance(node, AccountNode):
        return overrides.accounts.get(node.name, "generatedAccounts")
    if isinstance(node, InstructionNode):
        return overrides.instructions.get(node.name, "generatedInstructions")
    raise TypeError(f"Cannot locate the module of {type(node).__name__}")
