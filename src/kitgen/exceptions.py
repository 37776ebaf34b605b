"""Generator-time errors raised by kitgen.

Failures that belong to the *generated* code (unidentified account data,
unrecognized instruction types) are emitted as code and never raised here.
"""

from __future__ import annotations

from typing import Iterable


class KitgenError(RuntimeError):
    """Base class for every failure that aborts rendering."""


class MissingDependencyVersionsError(KitgenError):
    """Raised when used external packages have no configured version range."""

    def __init__(self, dependencies: Iterable[str]) -> None:
        self.dependencies = sorted(set(dependencies))
        super().__init__(
            "Missing dependency versions for: "
            + ", ".join(self.dependencies)
            + ". Please add these dependencies to the `dependency_versions` option."
        )


class DuplicateArgumentNamesError(KitgenError):
    def __init__(self, instruction: str, names: Iterable[str]) -> None:
        self.instruction = instruction
        self.names = sorted(set(names))
        super().__init__(
            f"Duplicate args found: [{', '.join(self.names)}] in instruction [{instruction}]."
        )


class CyclicDependencyError(KitgenError):
    """Instruction inputs whose default values depend on each other."""

    def __init__(self, instruction: str, inputs: Iterable[str]) -> None:
        self.instruction = instruction
        self.inputs = list(inputs)
        super().__init__(
            f"Circular dependency detected in instruction [{instruction}]: "
            + " -> ".join(self.inputs)
        )


class DiscriminatorFieldError(KitgenError):
    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"Field discriminator [{field_name}] does not match a struct field with a default value."
        )


class UnknownNodeKindError(KitgenError):
    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown node kind: {kind!r}")
