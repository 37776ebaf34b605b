from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from kitgen import cli

TOKEN = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

PROGRAM = {
    "kind": "programNode",
    "name": "token",
    "publicKey": TOKEN,
    "instructions": [
        {
            "kind": "instructionNode",
            "name": "transfer",
            "accounts": [
                {
                    "kind": "instructionAccountNode",
                    "name": "authority",
                    "defaultValue": {"kind": "resolverValueNode", "name": "resolveAuthority"},
                },
                {
                    "kind": "instructionAccountNode",
                    "name": "tokenProgram",
                    "defaultValue": {"kind": "publicKeyValueNode", "publicKey": TOKEN},
                },
            ],
        }
    ],
}


def _write_idl(tmp_path: Path, payload: dict = PROGRAM) -> Path:
    path = tmp_path / "idl.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _invoke(args: list[str]):
    return CliRunner().invoke(cli.app, args)


def test_cli_help_lists_commands() -> None:
    result = _invoke(["--help"])
    assert result.exit_code == 0
    for command_name in ("render", "defaults", "imports"):
        assert command_name in result.output


def test_render_writes_pages(tmp_path: Path) -> None:
    out_dir = tmp_path / "generated"
    result = _invoke(["render", str(_write_idl(tmp_path)), "--out-dir", str(out_dir), "--root", str(tmp_path)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["written"] == [
        str(out_dir / "index.ts"),
        str(out_dir / "programs" / "index.ts"),
        str(out_dir / "programs" / "token.ts"),
    ]
    assert sorted(payload["dependencies"]) == ["@solana/kit", "@solana/program-client-core"]
    assert payload["warnings"] == []
    page = (out_dir / "programs" / "token.ts").read_text(encoding="utf-8")
    assert page.startswith("import {")
    assert f"export const TOKEN_PROGRAM_ADDRESS = '{TOKEN}' as Address<'{TOKEN}'>;" in page


def test_render_fails_on_missing_dependency_versions(tmp_path: Path) -> None:
    (tmp_path / "kitgen.toml").write_text(
        '[render.dependency_map]\nsolanaAddresses = "@acme/addresses"\n', encoding="utf-8"
    )
    out_dir = tmp_path / "generated"
    result = _invoke(["render", str(_write_idl(tmp_path)), "--out-dir", str(out_dir), "--root", str(tmp_path)])
    assert result.exit_code == 1
    assert "@acme/addresses" in result.output
    assert not out_dir.exists()


def test_render_rejects_unknown_strategy(tmp_path: Path) -> None:
    result = _invoke(
        [
            "render",
            str(_write_idl(tmp_path)),
            "--out-dir",
            str(tmp_path / "generated"),
            "--root",
            str(tmp_path),
            "--kit-import-strategy",
            "everything",
        ]
    )
    assert result.exit_code == 2


def test_render_rejects_unreadable_tree(tmp_path: Path) -> None:
    result = _invoke(
        ["render", str(tmp_path / "missing.json"), "--out-dir", str(tmp_path / "out"), "--root", str(tmp_path)]
    )
    assert result.exit_code == 2


def test_defaults_prints_instruction_block(tmp_path: Path) -> None:
    result = _invoke(
        ["defaults", str(_write_idl(tmp_path)), "--instruction", "transfer", "--sync", "--root", str(tmp_path)]
    )
    assert result.exit_code == 0, result.output
    assert result.stdout == "\n".join(
        [
            "import { type Address } from '@solana/kit';",
            "import { resolveAuthority } from '../../hooked';",
            "",
            "const resolverScope = { programAddress, accounts, args };",
            "accounts.authority = { ...accounts.authority, ...resolveAuthority(resolverScope) };",
            f"accounts.tokenProgram.value = '{TOKEN}' as Address<'{TOKEN}'>;",
            "",
        ]
    )


def test_defaults_skips_async_resolvers_in_sync_builders(tmp_path: Path) -> None:
    result = _invoke(
        [
            "defaults",
            str(_write_idl(tmp_path)),
            "--instruction",
            "transfer",
            "--sync",
            "--root",
            str(tmp_path),
            "--async-resolver",
            "resolveAuthority",
        ]
    )
    assert result.exit_code == 0, result.output
    assert "resolveAuthority" not in result.stdout
    assert "accounts.tokenProgram.value" in result.stdout


def test_defaults_rejects_unknown_instruction(tmp_path: Path) -> None:
    result = _invoke(["defaults", str(_write_idl(tmp_path)), "--instruction", "mint", "--root", str(tmp_path)])
    assert result.exit_code == 2


def test_imports_reports_dependency_versions(tmp_path: Path) -> None:
    (tmp_path / "kitgen.toml").write_text(
        '[render]\nkit_import_strategy = "granular"\n', encoding="utf-8"
    )
    result = _invoke(["imports", str(_write_idl(tmp_path)), "--root", str(tmp_path)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert sorted(payload["dependencies"]) == [
        "@solana/addresses",
        "@solana/plugin-interfaces",
        "@solana/program-client-core",
    ]
