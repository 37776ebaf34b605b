from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, FrozenSet

from kitgen.rendering.import_map import (
    DEFAULT_KIT_IMPORT_STRATEGY,
    KitImportStrategy,
    module_alias_table,
)
from kitgen.rendering.links import LinkedNode, LinkOverrides, get_import_from
from kitgen.rendering.naming import NameApi

if TYPE_CHECKING:
    from kitgen.config import RenderOptions


@dataclass(frozen=True)
class RenderScope:
    """Everything a fragment builder may consult besides the node itself."""

    async_resolvers: FrozenSet[str] = frozenset()
    dependency_map: Dict[str, str] = field(default_factory=dict)
    dependency_versions: Dict[str, str] = field(default_factory=dict)
    kit_import_strategy: KitImportStrategy = DEFAULT_KIT_IMPORT_STRATEGY
    link_overrides: LinkOverrides = field(default_factory=LinkOverrides)
    name_api: NameApi = field(default_factory=NameApi)
    render_parent_instructions: bool = False

    @classmethod
    def from_options(cls, options: "RenderOptions", name_api: NameApi | None = None) -> "RenderScope":
        return cls(
            async_resolvers=frozenset(options.async_resolvers),
            dependency_map=dict(options.dependency_map),
            dependency_versions=dict(options.dependency_versions),
            kit_import_strategy=options.kit_import_strategy,
            link_overrides=options.link_overrides,
            name_api=name_api or NameApi(),
            render_parent_instructions=options.render_parent_instructions,
        )

    def import_from(self, node: LinkedNode) -> str:
        return get_import_from(node, self.link_overrides)

    def module_alias_table(self) -> Dict[str, str]:
        return module_alias_table(self.dependency_map, self.kit_import_strategy)
