from __future__ import annotations

from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use


def test_fragment_splices_text_and_nested_fragments() -> None:
    address = use("address", "solanaAddresses")
    flagged = Fragment("x").add_features(["feature:a"])
    result = fragment("const a = ", address, "(", None, flagged, ", ", 1, ");")
    assert result.content == "const a = address(x, 1);"
    assert set(result.imports.get("solanaAddresses")) == {"address"}
    assert result.features == frozenset({"feature:a"})


def test_use_references_the_local_identifier() -> None:
    aliased = use("type Address as SolanaAddress", "solanaAddresses")
    assert aliased.content == "SolanaAddress"
    info = aliased.imports.get("solanaAddresses")["SolanaAddress"]
    assert info.imported_identifier == "Address"
    assert info.is_type is True


def test_merge_fragments_skips_absent_fragments() -> None:
    seen: list[list[str]] = []

    def combine(contents: list[str]) -> str:
        seen.append(contents)
        return " && ".join(contents)

    merged = merge_fragments(
        [Fragment("a"), None, use("containsBytes", "solanaCodecsCore")], combine
    )
    assert seen == [["a", "containsBytes"]]
    assert merged is not None
    assert merged.content == "a && containsBytes"
    assert "solanaCodecsCore" in merged.imports


def test_merge_fragments_of_nothing_is_absent() -> None:
    assert merge_fragments([], lambda c: "".join(c)) is None
    assert merge_fragments([None, None], lambda c: "".join(c)) is None


def test_merge_of_single_fragment_preserves_it() -> None:
    original = use("expectSome", "shared").add_features(["instruction:resolverScopeVariable"])
    merged = merge_fragments([original], lambda c: "\n".join(c))
    assert merged is not None
    assert merged.content == original.content
    assert merged.imports == original.imports
    assert merged.features == original.features


def test_merge_unions_imports_regardless_of_combined_content() -> None:
    merged = merge_fragments(
        [use("address", "solanaAddresses"), use("expectSome", "shared")], lambda c: ""
    )
    assert merged is not None
    assert merged.content == ""
    assert set(merged.imports) == {"solanaAddresses", "shared"}


def test_fragment_helpers_return_new_fragments() -> None:
    base = Fragment("value")
    updated = base.add_imports("shared", "expectSome").with_content("expectSome(value)")
    mapped = updated.map_content(lambda c: f"[{c}]")
    assert base.content == "value"
    assert len(base.imports) == 0
    assert mapped.content == "[expectSome(value)]"
    assert set(mapped.imports.get("shared")) == {"expectSome"}
    assert mapped.remove_imports("shared", ["expectSome"]).imports == Fragment("").imports
