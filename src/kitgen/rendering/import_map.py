"""Per-module symbol requirements of a piece of generated code.

An :class:`ImportMap` is immutable: every operation returns a new map and
never touches its inputs, so fragments can share maps freely.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Literal, Mapping, Optional

KitImportStrategy = Literal["granular", "preferRoot", "rootOnly"]
DEFAULT_KIT_IMPORT_STRATEGY: KitImportStrategy = "preferRoot"

_KIT_MODULE_TAGS = (
    "solanaAccounts",
    "solanaAddresses",
    "solanaCodecsCore",
    "solanaCodecsDataStructures",
    "solanaCodecsNumbers",
    "solanaCodecsStrings",
    "solanaErrors",
    "solanaInstructionPlans",
    "solanaInstructions",
    "solanaOptions",
    "solanaPluginCore",
    "solanaPluginInterfaces",
    "solanaPrograms",
    "solanaRpcApi",
    "solanaRpcTypes",
    "solanaSigners",
)

ROOT_EXTERNAL_MODULE_MAP: Mapping[str, str] = MappingProxyType(
    {
        **{tag: "@solana/kit" for tag in _KIT_MODULE_TAGS},
        "solanaProgramClientCore": "@solana/kit/program-client-core",
    }
)

PREFER_ROOT_EXTERNAL_MODULE_MAP: Mapping[str, str] = MappingProxyType(
    {
        **ROOT_EXTERNAL_MODULE_MAP,
        "solanaProgramClientCore": "@solana/program-client-core",
    }
)

GRANULAR_EXTERNAL_MODULE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "solanaAccounts": "@solana/accounts",
        "solanaAddresses": "@solana/addresses",
        "solanaCodecsCore": "@solana/codecs",
        "solanaCodecsDataStructures": "@solana/codecs",
        "solanaCodecsNumbers": "@solana/codecs",
        "solanaCodecsStrings": "@solana/codecs",
        "solanaErrors": "@solana/errors",
        "solanaInstructionPlans": "@solana/instruction-plans",
        "solanaInstructions": "@solana/instructions",
        "solanaOptions": "@solana/codecs",
        "solanaPluginCore": "@solana/plugin-core",
        "solanaPluginInterfaces": "@solana/plugin-interfaces",
        "solanaProgramClientCore": "@solana/program-client-core",
        "solanaPrograms": "@solana/programs",
        "solanaRpcApi": "@solana/rpc-api",
        "solanaRpcTypes": "@solana/rpc-types",
        "solanaSigners": "@solana/signers",
    }
)

INTERNAL_MODULE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "errors": "../errors",
        "generated": "..",
        "generatedAccounts": "../accounts",
        "generatedErrors": "../errors",
        "generatedInstructions": "../instructions",
        "generatedPdas": "../pdas",
        "generatedPrograms": "../programs",
        "generatedTypes": "../types",
        "hooked": "../../hooked",
        "shared": "../shared",
        "types": "../types",
    }
)

_EXTERNAL_MODULE_MAPS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "granular": GRANULAR_EXTERNAL_MODULE_MAP,
        "preferRoot": PREFER_ROOT_EXTERNAL_MODULE_MAP,
        "rootOnly": ROOT_EXTERNAL_MODULE_MAP,
    }
)

_IMPORT_INPUT_RE = re.compile(r"^(type )?([^ ]+)(?: as (.+))?$")


@dataclass(frozen=True)
class ImportInfo:
    imported_identifier: str
    is_type: bool
    used_identifier: str

    def render(self) -> str:
        alias = ""
        if self.imported_identifier != self.used_identifier:
            alias = f" as {self.used_identifier}"
        prefix = "type " if self.is_type else ""
        return f"{prefix}{self.imported_identifier}{alias}"


def parse_import_input(value: str) -> ImportInfo:
    """Parse ``"[type ]Name[ as Alias]"`` into an :class:`ImportInfo`."""
    match = _IMPORT_INPUT_RE.match(value)
    if match is None:
        return ImportInfo(value, False, value)
    is_type, name, alias = match.groups()
    return ImportInfo(name, bool(is_type), alias or name)


def module_alias_table(
    dependency_map: Optional[Mapping[str, str]] = None,
    strategy: KitImportStrategy = DEFAULT_KIT_IMPORT_STRATEGY,
) -> Dict[str, str]:
    """Logical module tag -> physical module, user entries winning."""
    return {
        **_EXTERNAL_MODULE_MAPS[strategy],
        **INTERNAL_MODULE_MAP,
        **(dependency_map or {}),
    }


class ImportMap:
    __slots__ = ("_modules",)

    def __init__(self, modules: Optional[Mapping[str, Mapping[str, ImportInfo]]] = None) -> None:
        self._modules: Mapping[str, Mapping[str, ImportInfo]] = MappingProxyType(
            {
                module: MappingProxyType(dict(imports))
                for module, imports in (modules or {}).items()
                if imports
            }
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module: object) -> bool:
        return module in self._modules

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImportMap):
            return NotImplemented
        return {m: dict(i) for m, i in self._modules.items()} == {
            m: dict(i) for m, i in other._modules.items()
        }

    def __hash__(self) -> int:
        return hash(frozenset((m, frozenset(i.values())) for m, i in self._modules.items()))

    def __repr__(self) -> str:
        modules = {m: sorted(i) for m, i in self._modules.items()}
        return f"ImportMap({modules!r})"

    def get(self, module: str) -> Mapping[str, ImportInfo]:
        return self._modules.get(module, MappingProxyType({}))

    def used_identifiers(self) -> set[str]:
        return {used for imports in self._modules.values() for used in imports}

    def add(self, module: str, imports: Iterable[str]) -> "ImportMap":
        parsed = {info.used_identifier: info for info in map(parse_import_input, imports)}
        return merge_import_maps([self, ImportMap({module: parsed})])

    def remove(self, module: str, used_identifiers: Iterable[str]) -> "ImportMap":
        modules = {m: dict(i) for m, i in self._modules.items()}
        remaining = modules.get(module, {})
        for used_identifier in used_identifiers:
            remaining.pop(used_identifier, None)
        if not remaining:
            modules.pop(module, None)
        return ImportMap(modules)

    def merge(self, *others: "ImportMap") -> "ImportMap":
        return merge_import_maps([self, *others])

    def resolve_modules(self, alias_table: Mapping[str, str]) -> "ImportMap":
        return merge_import_maps(
            [
                ImportMap({alias_table.get(module, module): imports})
                for module, imports in self._modules.items()
            ]
        )

    def render(self, alias_table: Optional[Mapping[str, str]] = None) -> str:
        """Render a deterministic import block.

        Package imports come before relative ones; modules and symbols are
        each sorted alphabetically.
        """
        resolved = self.resolve_modules(alias_table) if alias_table is not None else self
        lines = []
        for module in sorted(resolved, key=lambda m: (m.startswith("."), m)):
            symbols = sorted(
                (info.render() for info in resolved.get(module).values()),
                key=lambda s: (s.casefold(), s),
            )
            lines.append(f"import {{ {', '.join(symbols)} }} from '{module}';")
        return "\n".join(lines)


def merge_import_maps(maps: Iterable[ImportMap]) -> ImportMap:
    """Union import maps; a value import replaces a type-only one."""
    maps = list(maps)
    if not maps:
        return ImportMap()
    if len(maps) == 1:
        return maps[0]
    merged: Dict[str, Dict[str, ImportInfo]] = {}
    for import_map in maps:
        for module in import_map:
            target = merged.setdefault(module, {})
            for used_identifier, info in import_map.get(module).items():
                existing = target.get(used_identifier)
                overrides_type_only = (
                    existing is not None
                    and existing.imported_identifier == info.imported_identifier
                    and existing.is_type
                    and not info.is_type
                )
                if existing is None or overrides_type_only:
                    target[used_identifier] = info
    return ImportMap(merged)
