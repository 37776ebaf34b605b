from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional
import json

import typer
from pydantic import ValidationError

from kitgen.casing import camel_case
from kitgen.config import RenderOptions, render_options
from kitgen.exceptions import KitgenError
from kitgen.nodes.model import InstructionNode, RootNode, all_instructions_with_subs
from kitgen.nodes.parse import load_root
from kitgen.rendering.dependencies import used_dependency_versions
from kitgen.rendering.input_defaults import get_instruction_input_defaults_fragment
from kitgen.rendering.render_map import get_render_map, render_page_text, write_render_map
from kitgen.rendering.scope import RenderScope
from kitgen.schema import DependencyVersionsResponseDTO, RenderResponseDTO

app = typer.Typer(add_completion=False)


def _load_root(path: Path) -> RootNode:
    try:
        return load_root(path)
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read node tree: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON node tree: {exc}") from exc
    except KitgenError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _options(
    *,
    root: Optional[Path],
    config: Optional[Path],
    kit_import_strategy: Optional[str] = None,
    async_resolvers: Optional[List[str]] = None,
) -> RenderOptions:
    payload = {
        "kit_import_strategy": kit_import_strategy,
        "async_resolvers": async_resolvers or None,
    }
    try:
        return render_options(payload, root=root, config_path=config)
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid render options: {exc}") from exc


def _fail(exc: KitgenError) -> NoReturn:
    typer.secho(str(exc), err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _emit_warnings(warnings: List[str]) -> None:
    for warning in warnings:
        typer.echo(f"warning: {warning}", err=True)


def _find_instruction(root: RootNode, name: str) -> InstructionNode:
    wanted = camel_case(name)
    for program in root.all_programs:
        for instruction in all_instructions_with_subs(program):
            if instruction.name == wanted:
                return instruction
    raise typer.BadParameter(f"Unknown instruction: {name}")


@app.command("render")
def render(
    idl: Path = typer.Argument(..., help="JSON serialization of the root node."),
    out_dir: Path = typer.Option(..., "--out-dir"),
    root: Optional[Path] = typer.Option(None, "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    kit_import_strategy: Optional[str] = typer.Option(None, "--kit-import-strategy"),
    async_resolver: Optional[List[str]] = typer.Option(None, "--async-resolver"),
) -> None:
    """Render program pages for a node tree into OUT_DIR."""
    options = _options(
        root=root,
        config=config,
        kit_import_strategy=kit_import_strategy,
        async_resolvers=async_resolver,
    )
    scope = RenderScope.from_options(options)
    node = _load_root(idl)
    try:
        result = get_render_map(node, scope)
        dependencies = used_dependency_versions(
            result.render_map,
            scope.dependency_map,
            scope.dependency_versions,
            scope.kit_import_strategy,
        )
    except KitgenError as exc:
        _fail(exc)
    written = write_render_map(
        result.render_map,
        out_dir,
        scope,
        delete_folder=options.delete_folder_before_rendering,
    )
    _emit_warnings(result.warnings)
    response = RenderResponseDTO(
        written=[str(path) for path in written],
        dependencies=dependencies,
        warnings=result.warnings,
    )
    typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))


@app.command("defaults")
def defaults(
    idl: Path = typer.Argument(..., help="JSON serialization of the root node."),
    instruction: str = typer.Option(..., "--instruction"),
    use_async: bool = typer.Option(True, "--async/--sync"),
    root: Optional[Path] = typer.Option(None, "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    async_resolver: Optional[List[str]] = typer.Option(None, "--async-resolver"),
) -> None:
    """Print the default-value block of one instruction builder."""
    scope = RenderScope.from_options(
        _options(root=root, config=config, async_resolvers=async_resolver)
    )
    node = _find_instruction(_load_root(idl), instruction)
    try:
        block = get_instruction_input_defaults_fragment(node, scope, use_async)
    except KitgenError as exc:
        _fail(exc)
    if block is not None:
        typer.echo(render_page_text(block, scope), nl=False)


@app.command("imports")
def imports(
    idl: Path = typer.Argument(..., help="JSON serialization of the root node."),
    root: Optional[Path] = typer.Option(None, "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    kit_import_strategy: Optional[str] = typer.Option(None, "--kit-import-strategy"),
) -> None:
    """Print the external packages used by the rendered pages as JSON."""
    scope = RenderScope.from_options(
        _options(root=root, config=config, kit_import_strategy=kit_import_strategy)
    )
    node = _load_root(idl)
    try:
        result = get_render_map(node, scope)
        dependencies = used_dependency_versions(
            result.render_map,
            scope.dependency_map,
            scope.dependency_versions,
            scope.kit_import_strategy,
        )
    except KitgenError as exc:
        _fail(exc)
    response = DependencyVersionsResponseDTO(dependencies=dependencies, warnings=result.warnings)
    typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))
