"""Encoder and literal-value fragments for type and value nodes."""

from __future__ import annotations

import json
from typing import List

from kitgen.nodes.model import (
    ArrayTypeNode,
    ArrayValueNode,
    BooleanTypeNode,
    BooleanValueNode,
    BytesTypeNode,
    BytesValueNode,
    ConstantValueNode,
    DefinedTypeLinkNode,
    EnumValueNode,
    FixedCountNode,
    FixedSizeTypeNode,
    NoneValueNode,
    NumberTypeNode,
    NumberValueNode,
    OptionTypeNode,
    PrefixedCountNode,
    PublicKeyTypeNode,
    PublicKeyValueNode,
    RemainderCountNode,
    SomeValueNode,
    StringTypeNode,
    StringValueNode,
    StructTypeNode,
    TypeNode,
    ValueNode,
)
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.scope import RenderScope

_SINGLE_BYTE_FORMATS = {"u8", "i8", "shortU16"}


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def _string_encoder(encoding: str) -> Fragment:
    return fragment(use(f"get{_capitalize(encoding)}Encoder", "solanaCodecsStrings"), "()")


def _number_encoder(node: NumberTypeNode) -> Fragment:
    encoder = use(f"get{_capitalize(node.format)}Encoder", "solanaCodecsNumbers")
    if node.endian == "be" and node.format not in _SINGLE_BYTE_FORMATS:
        endian = use("Endian", "solanaCodecsNumbers")
        return fragment(encoder, "({ endian: ", endian, ".Big })")
    return fragment(encoder, "()")


def _is_default_prefix(count: PrefixedCountNode) -> bool:
    return count.prefix.format == "u32" and count.prefix.endian == "le"


def get_type_encoder_fragment(node: TypeNode, scope: RenderScope) -> Fragment:
    if isinstance(node, NumberTypeNode):
        return _number_encoder(node)
    if isinstance(node, PublicKeyTypeNode):
        return fragment(use("getAddressEncoder", "solanaAddresses"), "()")
    if isinstance(node, StringTypeNode):
        return _string_encoder(node.encoding)
    if isinstance(node, BooleanTypeNode):
        return fragment(use("getBooleanEncoder", "solanaCodecsDataStructures"), "()")
    if isinstance(node, BytesTypeNode):
        return fragment(use("getBytesEncoder", "solanaCodecsDataStructures"), "()")
    if isinstance(node, FixedSizeTypeNode):
        inner = get_type_encoder_fragment(node.type, scope)
        return fragment(use("fixEncoderSize", "solanaCodecsCore"), "(", inner, f", {node.size})")
    if isinstance(node, ArrayTypeNode):
        item = get_type_encoder_fragment(node.item, scope)
        array_encoder = use("getArrayEncoder", "solanaCodecsDataStructures")
        count = node.count
        if isinstance(count, FixedCountNode):
            return fragment(array_encoder, "(", item, f", {{ size: {count.value} }})")
        if isinstance(count, RemainderCountNode):
            return fragment(array_encoder, "(", item, ", { size: 'remainder' })")
        if _is_default_prefix(count):
            return fragment(array_encoder, "(", item, ")")
        prefix = _number_encoder(count.prefix)
        return fragment(array_encoder, "(", item, ", { size: ", prefix, " })")
    if isinstance(node, OptionTypeNode):
        item = get_type_encoder_fragment(node.item, scope)
        return fragment(use("getOptionEncoder", "solanaOptions"), "(", item, ")")
    if isinstance(node, DefinedTypeLinkNode):
        encoder = use(scope.name_api.encoder_function(node.name), scope.import_from(node))
        return fragment(encoder, "()")
    if isinstance(node, StructTypeNode):
        fields = merge_fragments(
            [
                fragment(f"['{f.name}', ", get_type_encoder_fragment(f.type, scope), "]")
                for f in node.fields
            ],
            lambda c: ", ".join(c),
        )
        return fragment(use("getStructEncoder", "solanaCodecsDataStructures"), "([", fields, "])")
    raise TypeError(f"Unsupported type node: {type(node).__name__}")


def get_value_fragment(node: ValueNode, scope: RenderScope) -> Fragment:
    if isinstance(node, NumberValueNode):
        return Fragment(str(node.number))
    if isinstance(node, StringValueNode):
        return Fragment(json.dumps(node.string))
    if isinstance(node, BooleanValueNode):
        return Fragment("true" if node.boolean else "false")
    if isinstance(node, PublicKeyValueNode):
        return fragment(use("address", "solanaAddresses"), f"({json.dumps(node.public_key)})")
    if isinstance(node, BytesValueNode):
        return fragment(_string_encoder(node.encoding), f".encode({json.dumps(node.data)})")
    if isinstance(node, ArrayValueNode):
        items: List[Fragment] = [get_value_fragment(item, scope) for item in node.items]
        return fragment("[", merge_fragments(items, lambda c: ", ".join(c)), "]")
    if isinstance(node, NoneValueNode):
        return fragment(use("none", "solanaOptions"), "()")
    if isinstance(node, SomeValueNode):
        return fragment(use("some", "solanaOptions"), "(", get_value_fragment(node.value, scope), ")")
    if isinstance(node, EnumValueNode):
        enum_type = use(scope.name_api.data_type(node.enum.name), scope.import_from(node.enum))
        return fragment(enum_type, ".", scope.name_api.enum_variant(node.variant))
    if isinstance(node, ConstantValueNode):
        encoder = get_type_encoder_fragment(node.type, scope)
        return fragment(encoder, ".encode(", get_value_fragment(node.value, scope), ")")
    raise TypeError(f"Unsupported value node: {type(node).__name__}")
