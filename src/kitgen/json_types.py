from __future__ import annotations

"""JSON value aliases used where node trees and options cross the CLI boundary."""

from typing import TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
