from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Dict, Type

from kitgen.casing import camel_case
from kitgen.exceptions import UnknownNodeKindError
from kitgen.json_types import JSONValue
from kitgen.nodes import model

NODE_CLASSES: Dict[str, Type[object]] = {
    cls.kind: cls
    for cls in vars(model).values()
    if isinstance(cls, type) and dataclasses.is_dataclass(cls) and hasattr(cls, "kind")
}


def node_from_json(payload: JSONValue) -> object:
    """Rebuild a node (or a list of nodes) from its kind-tagged JSON form."""
    if isinstance(payload, list):
        return [node_from_json(item) for item in payload]
    if not isinstance(payload, dict):
        return payload
    kind = payload.get("kind")
    if kind is None:
        return {str(key): node_from_json(value) for key, value in payload.items()}
    cls = NODE_CLASSES.get(str(kind))
    if cls is None:
        raise UnknownNodeKindError(kind)
    kwargs = {}
    for item in dataclasses.fields(cls):
        key = camel_case(item.name)
        if key in payload:
            kwargs[item.name] = node_from_json(payload[key])
    return cls(**kwargs)


def load_root(path: Path) -> model.RootNode:
    """Load a serialized root (or bare program) node from a JSON file."""
    node = node_from_json(json.loads(path.read_text(encoding="utf-8")))
    if isinstance(node, model.ProgramNode):
        return model.RootNode(program=node)
    if not isinstance(node, model.RootNode):
        raise UnknownNodeKindError(getattr(node, "kind", type(node).__name__))
    return node
