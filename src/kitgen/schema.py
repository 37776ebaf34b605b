from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


class LinkOverridesDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    accounts: Dict[str, str] = {}
    defined_types: Dict[str, str] = Field(default_factory=dict, alias="definedTypes")
    instructions: Dict[str, str] = {}
    pdas: Dict[str, str] = {}
    programs: Dict[str, str] = {}
    resolvers: Dict[str, str] = {}


class RenderOptionsDTO(BaseModel):
    async_resolvers: List[str] = []
    dependency_map: Dict[str, str] = {}
    dependency_versions: Dict[str, str] = {}
    kit_import_strategy: Literal["granular", "preferRoot", "rootOnly"] = "preferRoot"
    link_overrides: LinkOverridesDTO = LinkOverridesDTO()
    render_parent_instructions: bool = False
    delete_folder_before_rendering: bool = True


class RenderResponseDTO(BaseModel):
    written: List[str] = []
    dependencies: Dict[str, str] = {}
    warnings: List[str] = []


class DependencyVersionsResponseDTO(BaseModel):
    dependencies: Dict[str, str]
    warnings: List[str] = []
