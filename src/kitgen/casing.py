from __future__ import annotations

import re
from typing import List


def _words(value: str) -> List[str]:
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", spaced)
    return [p for p in re.split(r"[^a-zA-Z0-9]+", spaced) if p]


def pascal_case(value: str) -> str:
    return "".join(p[:1].upper() + p[1:] for p in _words(value))


def camel_case(value: str) -> str:
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def snake_case(value: str) -> str:
    return "_".join(p.lower() for p in _words(value))


def upper_snake_case(value: str) -> str:
    return snake_case(value).upper()
