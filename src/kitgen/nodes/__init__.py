"""Node model consumed by the renderers."""

from kitgen.nodes.model import ProgramNode, RootNode
from kitgen.nodes.parse import load_root, node_from_json
from kitgen.nodes.resolved import ResolvedInstructionInput, resolved_instruction_inputs

__all__ = [
    "ProgramNode",
    "ResolvedInstructionInput",
    "RootNode",
    "load_root",
    "node_from_json",
    "resolved_instruction_inputs",
]
