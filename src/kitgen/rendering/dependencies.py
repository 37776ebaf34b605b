"""External packages used by generated code and their version ranges."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Set

from kitgen.exceptions import MissingDependencyVersionsError
from kitgen.rendering.fragment import Fragment, merge_fragments
from kitgen.rendering.import_map import (
    DEFAULT_KIT_IMPORT_STRATEGY,
    ImportMap,
    KitImportStrategy,
    module_alias_table,
)

DEFAULT_DEPENDENCY_VERSIONS: Mapping[str, str] = MappingProxyType(
    {
        "@solana/accounts": "^5.0.0",
        "@solana/addresses": "^5.0.0",
        "@solana/codecs": "^5.0.0",
        "@solana/errors": "^5.0.0",
        "@solana/instruction-plans": "^5.0.0",
        "@solana/instructions": "^5.0.0",
        "@solana/kit": "^5.0.0",
        "@solana/plugin-core": "^5.0.0",
        "@solana/plugin-interfaces": "^5.0.0",
        "@solana/program-client-core": "^5.0.0",
        "@solana/programs": "^5.0.0",
        "@solana/rpc-api": "^5.0.0",
        "@solana/rpc-types": "^5.0.0",
        "@solana/signers": "^5.0.0",
    }
)


def package_root(module: str) -> str:
    """``@scope/pkg/sub`` -> ``@scope/pkg``; ``pkg/sub`` -> ``pkg``."""
    parts = module.split("/")
    if module.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def external_dependencies(
    import_map: ImportMap,
    dependency_map: Optional[Mapping[str, str]] = None,
    strategy: KitImportStrategy = DEFAULT_KIT_IMPORT_STRATEGY,
) -> Set[str]:
    resolved = import_map.resolve_modules(module_alias_table(dependency_map, strategy))
    return {package_root(module) for module in resolved if not module.startswith(".")}


def used_dependency_versions(
    render_map: Mapping[str, Fragment],
    dependency_map: Optional[Mapping[str, str]] = None,
    dependency_versions: Optional[Mapping[str, str]] = None,
    strategy: KitImportStrategy = DEFAULT_KIT_IMPORT_STRATEGY,
) -> Dict[str, str]:
    """Version range of every external package the rendered pages import.

    Raises :class:`MissingDependencyVersionsError` listing every package that
    has no configured range.
    """
    versions = {**DEFAULT_DEPENDENCY_VERSIONS, **(dependency_versions or {})}
    merged = merge_fragments(render_map.values(), lambda c: "")
    if merged is None:
        return {}
    used = external_dependencies(merged.imports, dependency_map, strategy)
    missing = sorted(dependency for dependency in used if not versions.get(dependency))
    if missing:
        raise MissingDependencyVersionsError(missing)
    return {dependency: versions[dependency] for dependency in sorted(used)}
