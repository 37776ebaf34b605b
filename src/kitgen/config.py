from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from kitgen.rendering.import_map import DEFAULT_KIT_IMPORT_STRATEGY, KitImportStrategy
from kitgen.rendering.links import LinkOverrides
from kitgen.schema import RenderOptionsDTO

DEFAULT_CONFIG_NAME = "kitgen.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class RenderOptions:
    async_resolvers: tuple[str, ...] = ()
    dependency_map: dict[str, str] = field(default_factory=dict)
    dependency_versions: dict[str, str] = field(default_factory=dict)
    kit_import_strategy: KitImportStrategy = DEFAULT_KIT_IMPORT_STRATEGY
    link_overrides: LinkOverrides = field(default_factory=LinkOverrides)
    render_parent_instructions: bool = False
    delete_folder_before_rendering: bool = True


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def render_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("render", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def render_options(
    payload: TomlTable | None = None,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
) -> RenderOptions:
    """Merge explicit options over the ``[render]`` table and validate them.

    Invalid values raise ``pydantic.ValidationError``.
    """
    merged = merge_payload(payload or {}, render_defaults(root, config_path))
    if "async_resolvers" in merged:
        merged["async_resolvers"] = _normalize_name_list(merged["async_resolvers"])
    dto = RenderOptionsDTO.model_validate(merged)
    links = dto.link_overrides
    return RenderOptions(
        async_resolvers=tuple(dto.async_resolvers),
        dependency_map=dict(dto.dependency_map),
        dependency_versions=dict(dto.dependency_versions),
        kit_import_strategy=dto.kit_import_strategy,
        link_overrides=LinkOverrides(
            accounts=dict(links.accounts),
            defined_types=dict(links.defined_types),
            instructions=dict(links.instructions),
            pdas=dict(links.pdas),
            programs=dict(links.programs),
            resolvers=dict(links.resolvers),
        ),
        render_parent_instructions=dto.render_parent_instructions,
        delete_folder_before_rendering=dto.delete_folder_before_rendering,
    )
