"""Runtime identification of accounts and instructions by discriminator.

Variants are tested in declaration order and the first rule set that
matches wins, so overlapping rule sets resolve to the earliest variant.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from kitgen.exceptions import DiscriminatorFieldError
from kitgen.nodes.model import (
    ArrayTypeNode,
    ArrayValueNode,
    ConstantDiscriminatorNode,
    DiscriminatorNode,
    FieldDiscriminatorNode,
    FixedCountNode,
    NumberTypeNode,
    NumberValueNode,
    SizeDiscriminatorNode,
    StructFieldTypeNode,
    StructTypeNode,
)
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.scope import RenderScope
from kitgen.rendering.type_manifest import get_type_encoder_fragment, get_value_fragment

IdentifiedKind = Literal["account", "instruction"]


@dataclass(frozen=True)
class DiscriminatedVariant:
    variant: str
    discriminators: List[DiscriminatorNode]
    struct: StructTypeNode


def _is_u8_byte_array(field: StructFieldTypeNode) -> bool:
    field_type = field.type
    value = field.default_value
    return (
        isinstance(field_type, ArrayTypeNode)
        and isinstance(field_type.item, NumberTypeNode)
        and field_type.item.format == "u8"
        and isinstance(field_type.count, FixedCountNode)
        and isinstance(value, ArrayValueNode)
        and all(isinstance(item, NumberValueNode) for item in value.items)
    )


def _field_bytes_fragment(field: StructFieldTypeNode, scope: RenderScope) -> Fragment:
    if _is_u8_byte_array(field):
        items = field.default_value.items  # type: ignore[union-attr]
        encoded = base64.b64encode(bytes(int(item.number) for item in items)).decode("ascii")
        return fragment(use("getBase64Encoder", "solanaCodecsStrings"), f"().encode('{encoded}')")
    encoder = get_type_encoder_fragment(field.type, scope)
    return fragment(encoder, ".encode(", get_value_fragment(field.default_value, scope), ")")  # type: ignore[arg-type]


def get_discriminator_rule_fragment(
    discriminator: DiscriminatorNode,
    struct: StructTypeNode,
    data_name: str,
    scope: RenderScope,
) -> Fragment:
    if isinstance(discriminator, SizeDiscriminatorNode):
        return Fragment(f"{data_name}.length === {discriminator.size}")
    contains_bytes = use("containsBytes", "solanaCodecsCore")
    if isinstance(discriminator, ConstantDiscriminatorNode):
        constant = get_value_fragment(discriminator.constant, scope)
        return fragment(contains_bytes, f"({data_name}, ", constant, f", {discriminator.offset})")
    if isinstance(discriminator, FieldDiscriminatorNode):
        field = next((f for f in struct.fields if f.name == discriminator.name), None)
        if field is None or field.default_value is None:
            raise DiscriminatorFieldError(discriminator.name)
        value = _field_bytes_fragment(field, scope)
        return fragment(contains_bytes, f"({data_name}, ", value, f", {discriminator.offset})")
    raise TypeError(f"Unsupported discriminator node: {type(discriminator).__name__}")


def get_discriminator_condition_fragment(
    discriminators: Sequence[DiscriminatorNode],
    struct: StructTypeNode,
    data_name: str,
    if_true: str,
    scope: RenderScope,
) -> Optional[Fragment]:
    conditions = merge_fragments(
        [get_discriminator_rule_fragment(d, struct, data_name, scope) for d in discriminators],
        lambda c: " && ".join(c),
    )
    if conditions is None:
        return None
    return conditions.map_content(lambda c: f"if ({c}) {{ {if_true} }}")


def get_identifier_function_fragment(
    *,
    kind: IdentifiedKind,
    function_name: str,
    enum_name: str,
    program_name: str,
    variants: Sequence[DiscriminatedVariant],
    scope: RenderScope,
) -> Optional[Fragment]:
    """Build ``identify<Program><Kind>(...)`` for the variants with discriminators.

    Falling through every rule set throws ``SolanaError`` carrying the raw
    data and the program name.
    """
    checks = merge_fragments(
        [
            get_discriminator_condition_fragment(
                variant.discriminators,
                variant.struct,
                "data",
                f"return {enum_name}.{variant.variant};",
                scope,
            )
            for variant in variants
        ],
        lambda c: "\n    ".join(c),
    )
    if checks is None:
        return None

    readonly_bytes = use("type ReadonlyUint8Array", "solanaCodecsCore")
    solana_error = use("SolanaError", "solanaErrors")
    if kind == "account":
        error_code = use("SOLANA_ERROR__PROGRAM_CLIENTS__FAILED_TO_IDENTIFY_ACCOUNT", "solanaErrors")
    else:
        error_code = use("SOLANA_ERROR__PROGRAM_CLIENTS__FAILED_TO_IDENTIFY_INSTRUCTION", "solanaErrors")
    return fragment(
        f"export function {function_name}({kind}: {{ data: ",
        readonly_bytes,
        " } | ",
        readonly_bytes,
        f"): {enum_name} {{\n",
        f"    const data = 'data' in {kind} ? {kind}.data : {kind};\n",
        "    ",
        checks,
        "\n    throw new ",
        solana_error,
        "(",
        error_code,
        f", {{ {kind}Data: data, programName: \"{program_name}\" }});\n",
        "}",
    )
