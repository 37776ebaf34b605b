from __future__ import annotations

from kitgen.rendering.import_map import (
    ImportInfo,
    ImportMap,
    merge_import_maps,
    module_alias_table,
    parse_import_input,
)


def test_parse_import_input_reads_type_and_alias() -> None:
    assert parse_import_input("address") == ImportInfo("address", False, "address")
    assert parse_import_input("type Address") == ImportInfo("Address", True, "Address")
    assert parse_import_input("getFoo as getBar") == ImportInfo("getFoo", False, "getBar")
    assert parse_import_input("type Foo as Bar") == ImportInfo("Foo", True, "Bar")


def test_merge_prefers_value_import_over_type_only_import() -> None:
    type_only = ImportMap().add("solanaAddresses", ["type Address"])
    value = ImportMap().add("solanaAddresses", ["Address"])
    for merged in (type_only.merge(value), value.merge(type_only)):
        entries = merged.get("solanaAddresses")
        assert list(entries) == ["Address"]
        assert entries["Address"].is_type is False


def test_operations_never_mutate_their_inputs() -> None:
    base = ImportMap().add("solanaAddresses", ["type Address"])
    extended = base.add("solanaAddresses", ["Address", "address"])
    trimmed = extended.remove("solanaAddresses", ["address"])
    assert base.get("solanaAddresses")["Address"].is_type is True
    assert set(extended.get("solanaAddresses")) == {"Address", "address"}
    assert set(trimmed.get("solanaAddresses")) == {"Address"}


def test_remove_drops_empty_modules() -> None:
    import_map = ImportMap().add("shared", ["expectSome"]).remove("shared", ["expectSome"])
    assert "shared" not in import_map
    assert len(import_map) == 0


def test_merge_of_no_maps_is_empty() -> None:
    assert merge_import_maps([]) == ImportMap()


def test_resolve_modules_applies_strategy_and_keeps_unknown_modules() -> None:
    import_map = (
        ImportMap()
        .add("solanaAddresses", ["address"])
        .add("solanaCodecsCore", ["containsBytes"])
        .add("custom-module", ["helper"])
    )
    granular = import_map.resolve_modules(module_alias_table(strategy="granular"))
    assert set(granular) == {"@solana/addresses", "@solana/codecs", "custom-module"}
    root = import_map.resolve_modules(module_alias_table())
    assert set(root) == {"@solana/kit", "custom-module"}
    assert set(root.get("@solana/kit")) == {"address", "containsBytes"}


def test_program_client_core_module_depends_on_strategy() -> None:
    assert module_alias_table()["solanaProgramClientCore"] == "@solana/program-client-core"
    assert (
        module_alias_table(strategy="rootOnly")["solanaProgramClientCore"]
        == "@solana/kit/program-client-core"
    )
    assert (
        module_alias_table(strategy="granular")["solanaProgramClientCore"]
        == "@solana/program-client-core"
    )


def test_dependency_map_overrides_internal_modules() -> None:
    table = module_alias_table({"hooked": "../custom", "solanaAddresses": "my-addresses"})
    assert table["hooked"] == "../custom"
    assert table["solanaAddresses"] == "my-addresses"
    assert table["generatedPdas"] == "../pdas"


def test_render_orders_packages_before_relative_modules() -> None:
    import_map = (
        ImportMap()
        .add("../shared", ["expectSome"])
        .add("@solana/kit", ["type Address", "getU8Encoder", "address"])
        .add("@solana/addresses", ["getFoo as getBar"])
    )
    assert import_map.render() == "\n".join(
        [
            "import { getFoo as getBar } from '@solana/addresses';",
            "import { address, getU8Encoder, type Address } from '@solana/kit';",
            "import { expectSome } from '../shared';",
        ]
    )


def test_render_resolves_logical_modules() -> None:
    import_map = ImportMap().add("shared", ["expectAddress"]).add("solanaAddresses", ["type Address"])
    assert import_map.render(module_alias_table()) == (
        "import { type Address } from '@solana/kit';\n"
        "import { expectAddress } from '../shared';"
    )


def test_render_of_empty_map_is_empty() -> None:
    assert ImportMap().render() == ""
