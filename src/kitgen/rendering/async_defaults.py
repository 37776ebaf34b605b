"""Decide which default values make an instruction builder asynchronous."""

from __future__ import annotations

from typing import Collection, List, Optional

from kitgen.nodes.model import (
    ConditionalValueNode,
    InstructionInputValueNode,
    InstructionNode,
    PdaValueNode,
    ProgramNode,
    ResolverValueNode,
)
from kitgen.nodes.resolved import ResolvedInstructionInput, resolved_instruction_inputs


def is_async_default_value(
    value: Optional[InstructionInputValueNode], async_resolvers: Collection[str]
) -> bool:
    if value is None:
        return False
    if isinstance(value, PdaValueNode):
        return True
    if isinstance(value, ResolverValueNode):
        return value.name in async_resolvers
    if isinstance(value, ConditionalValueNode):
        return (
            is_async_default_value(value.condition, async_resolvers)
            or is_async_default_value(value.if_true, async_resolvers)
            or is_async_default_value(value.if_false, async_resolvers)
        )
    return False


def _is_async_resolver(value: object, async_resolvers: Collection[str]) -> bool:
    return isinstance(value, ResolverValueNode) and value.name in async_resolvers


def has_async_function(
    instruction: InstructionNode,
    resolved_inputs: List[ResolvedInstructionInput],
    async_resolvers: Collection[str],
) -> bool:
    if any(is_async_default_value(i.default_value, async_resolvers) for i in resolved_inputs):
        return True
    if any(_is_async_resolver(r.value, async_resolvers) for r in instruction.remaining_accounts):
        return True
    return any(_is_async_resolver(d.value, async_resolvers) for d in instruction.byte_deltas)


def get_async_instructions(program: ProgramNode, async_resolvers: Collection[str]) -> List[str]:
    return [
        instruction.name
        for instruction in program.instructions
        if has_async_function(
            instruction, resolved_instruction_inputs(instruction), async_resolvers
        )
    ]
