"""Composable units of generated code.

A :class:`Fragment` couples code text with the imports that text relies on
and a set of opaque feature tags. Fragments are immutable; every helper
returns a new one. ``None`` stands for "no fragment" and is skipped by every
composition helper.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, FrozenSet, Iterable, List, Optional, Union

from kitgen.rendering.import_map import ImportMap, merge_import_maps, parse_import_input

FragmentPart = Union[str, int, "Fragment", None]


@dataclass(frozen=True)
class Fragment:
    content: str
    imports: ImportMap = field(default_factory=ImportMap)
    features: FrozenSet[str] = frozenset()

    def __str__(self) -> str:
        return self.content

    def with_content(self, content: str) -> "Fragment":
        return replace(self, content=content)

    def map_content(self, fn: Callable[[str], str]) -> "Fragment":
        return replace(self, content=fn(self.content))

    def add_imports(self, module: str, imports: Union[str, Iterable[str]]) -> "Fragment":
        if isinstance(imports, str):
            imports = [imports]
        return replace(self, imports=self.imports.add(module, imports))

    def remove_imports(self, module: str, used_identifiers: Iterable[str]) -> "Fragment":
        return replace(self, imports=self.imports.remove(module, used_identifiers))

    def add_features(self, features: Iterable[str]) -> "Fragment":
        return replace(self, features=self.features | frozenset(features))


def fragment(*parts: FragmentPart) -> Fragment:
    """Splice literal text with nested fragments.

    Text pieces never carry imports; the result's imports and features are
    the union of the nested fragments'.
    """
    contents: List[str] = []
    nested: List[Fragment] = []
    for part in parts:
        if part is None:
            continue
        if isinstance(part, Fragment):
            contents.append(part.content)
            nested.append(part)
        else:
            contents.append(str(part))
    return Fragment(
        "".join(contents),
        merge_import_maps([f.imports for f in nested]),
        frozenset().union(*(f.features for f in nested)),
    )


def merge_fragments(
    fragments: Iterable[Optional[Fragment]],
    combine: Callable[[List[str]], str],
) -> Optional[Fragment]:
    """Combine present fragments' contents with ``combine``.

    Imports and features are always unioned. Returns ``None`` when no
    fragment is present.
    """
    present = [f for f in fragments if f is not None]
    if not present:
        return None
    return Fragment(
        combine([f.content for f in present]),
        merge_import_maps([f.imports for f in present]),
        frozenset().union(*(f.features for f in present)),
    )


def use(import_input: str, module: str) -> Fragment:
    """Reference an imported symbol; the content is its local identifier."""
    info = parse_import_input(import_input)
    return Fragment(info.used_identifier, ImportMap().add(module, [import_input]))
