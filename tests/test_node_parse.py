from __future__ import annotations

import json
from pathlib import Path

import pytest

from kitgen.exceptions import UnknownNodeKindError
from kitgen.nodes.model import (
    ArrayTypeNode,
    FixedCountNode,
    InstructionAccountNode,
    NumberTypeNode,
    PdaValueNode,
    ProgramNode,
    RootNode,
)
from kitgen.nodes.parse import load_root, node_from_json

PROGRAM = {
    "kind": "programNode",
    "name": "spl-token",
    "publicKey": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
    "accounts": [
        {
            "kind": "accountNode",
            "name": "mint",
            "discriminators": [{"kind": "sizeDiscriminatorNode", "size": 82}],
        }
    ],
    "instructions": [
        {
            "kind": "instructionNode",
            "name": "create_ata",
            "optionalAccountStrategy": "omitted",
            "accounts": [
                {
                    "kind": "instructionAccountNode",
                    "name": "ata",
                    "isWritable": True,
                    "isSigner": "either",
                    "defaultValue": {
                        "kind": "pdaValueNode",
                        "pda": {"kind": "pdaLinkNode", "name": "associatedToken"},
                        "seeds": [
                            {
                                "kind": "pdaSeedValueNode",
                                "name": "owner",
                                "value": {"kind": "accountValueNode", "name": "owner"},
                            }
                        ],
                    },
                }
            ],
            "arguments": [
                {
                    "kind": "instructionArgumentNode",
                    "name": "data",
                    "type": {
                        "kind": "arrayTypeNode",
                        "item": {"kind": "numberTypeNode", "format": "u8", "endian": "le"},
                        "count": {"kind": "fixedCountNode", "value": 8},
                    },
                }
            ],
            "subInstructions": [{"kind": "instructionNode", "name": "inner"}],
        }
    ],
}


def test_node_from_json_builds_nested_nodes() -> None:
    program = node_from_json(PROGRAM)
    assert isinstance(program, ProgramNode)
    assert program.name == "splToken"
    assert program.accounts[0].discriminators[0].size == 82

    instruction = program.instructions[0]
    assert instruction.name == "createAta"
    assert instruction.optional_account_strategy == "omitted"
    assert [sub.name for sub in instruction.sub_instructions] == ["inner"]

    account = instruction.accounts[0]
    assert isinstance(account, InstructionAccountNode)
    assert account.is_writable is True
    assert account.is_signer == "either"
    assert isinstance(account.default_value, PdaValueNode)
    assert account.default_value.seeds[0].value.name == "owner"

    assert instruction.arguments[0].type == ArrayTypeNode(NumberTypeNode("u8"), FixedCountNode(8))


def test_node_from_json_rejects_unknown_kinds() -> None:
    with pytest.raises(UnknownNodeKindError) as excinfo:
        node_from_json({"kind": "mysteryNode"})
    assert excinfo.value.kind == "mysteryNode"


def test_node_from_json_passes_through_plain_values() -> None:
    assert node_from_json([1, "a", {"b": True}]) == [1, "a", {"b": True}]


def test_load_root_wraps_bare_programs(tmp_path: Path) -> None:
    path = tmp_path / "idl.json"
    path.write_text(json.dumps(PROGRAM), encoding="utf-8")
    root = load_root(path)
    assert isinstance(root, RootNode)
    assert root.all_programs == [root.program]
    assert root.program.name == "splToken"


def test_load_root_reads_additional_programs(tmp_path: Path) -> None:
    path = tmp_path / "idl.json"
    path.write_text(
        json.dumps(
            {
                "kind": "rootNode",
                "program": PROGRAM,
                "additionalPrograms": [{"kind": "programNode", "name": "memo", "publicKey": "Memo111"}],
            }
        ),
        encoding="utf-8",
    )
    root = load_root(path)
    assert [program.name for program in root.all_programs] == ["splToken", "memo"]


def test_load_root_rejects_other_nodes(tmp_path: Path) -> None:
    path = tmp_path / "idl.json"
    path.write_text(json.dumps({"kind": "numberTypeNode", "format": "u8"}), encoding="utf-8")
    with pytest.raises(UnknownNodeKindError):
        load_root(path)
