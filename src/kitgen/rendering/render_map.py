"""Assemble rendered pages and write them to disk."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from kitgen.casing import camel_case
from kitgen.nodes.model import RootNode
from kitgen.rendering.fragment import Fragment
from kitgen.rendering.program_page import get_index_page_fragment, get_program_page_fragment
from kitgen.rendering.scope import RenderScope

RenderMap = Dict[str, Fragment]


@dataclass(frozen=True)
class RenderResult:
    render_map: RenderMap
    warnings: List[str] = field(default_factory=list)


def get_render_map(root: RootNode, scope: RenderScope) -> RenderResult:
    pages: RenderMap = {}
    warnings: List[str] = []
    program_files: List[str] = []
    for program in root.all_programs:
        if not program.accounts and not program.instructions:
            warnings.append(
                f"Program [{program.name}] has no accounts or instructions; no plugin rendered."
            )
        file_name = camel_case(program.name)
        program_files.append(file_name)
        pages[f"programs/{file_name}.ts"] = get_program_page_fragment(program, scope)

    programs_index = get_index_page_fragment(program_files)
    if programs_index is not None:
        pages["programs/index.ts"] = programs_index
        pages["index.ts"] = Fragment("export * from './programs';")
    return RenderResult(render_map=pages, warnings=warnings)


def render_page_text(page: Fragment, scope: RenderScope) -> str:
    imports = page.imports.render(scope.module_alias_table())
    if not imports:
        return f"{page.content}\n"
    return f"{imports}\n\n{page.content}\n"


def write_render_map(
    render_map: RenderMap,
    out_dir: Path,
    scope: RenderScope,
    *,
    delete_folder: bool = False,
) -> List[Path]:
    if delete_folder and out_dir.exists():
        shutil.rmtree(out_dir)
    written: List[Path] = []
    for relative, page in sorted(render_map.items()):
        target = out_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_page_text(page, scope), encoding="utf-8")
        written.append(target)
    return written
