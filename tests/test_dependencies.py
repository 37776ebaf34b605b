from __future__ import annotations

import pytest

from kitgen.exceptions import MissingDependencyVersionsError
from kitgen.rendering.dependencies import (
    DEFAULT_DEPENDENCY_VERSIONS,
    external_dependencies,
    package_root,
    used_dependency_versions,
)
from kitgen.rendering.fragment import Fragment, fragment, use
from kitgen.rendering.import_map import ImportMap


def _render_map():
    return {
        "programs/token.ts": fragment(
            use("type Address", "solanaAddresses"),
            use("addSelfFetchFunctions", "solanaProgramClientCore"),
            use("getMintCodec", "generatedAccounts"),
        ),
        "index.ts": Fragment("export * from './programs';"),
    }


@pytest.mark.parametrize(
    ("module", "root"),
    [
        ("@solana/kit", "@solana/kit"),
        ("@solana/kit/program-client-core", "@solana/kit"),
        ("lodash/merge", "lodash"),
        ("bn.js", "bn.js"),
    ],
)
def test_package_root(module: str, root: str) -> None:
    assert package_root(module) == root


def test_external_dependencies_ignore_relative_modules() -> None:
    imports = ImportMap().add("generatedTypes", ["Foo"]).add("solanaCodecsCore", ["containsBytes"])
    assert external_dependencies(imports) == {"@solana/kit"}
    assert external_dependencies(imports, strategy="granular") == {"@solana/codecs"}


def test_used_dependency_versions_per_strategy() -> None:
    assert used_dependency_versions(_render_map()) == {
        "@solana/kit": DEFAULT_DEPENDENCY_VERSIONS["@solana/kit"],
        "@solana/program-client-core": DEFAULT_DEPENDENCY_VERSIONS["@solana/program-client-core"],
    }
    assert list(used_dependency_versions(_render_map(), strategy="rootOnly")) == ["@solana/kit"]
    assert list(used_dependency_versions(_render_map(), strategy="granular")) == [
        "@solana/addresses",
        "@solana/program-client-core",
    ]


def test_configured_versions_override_defaults() -> None:
    versions = used_dependency_versions(_render_map(), dependency_versions={"@solana/kit": "^6.0.0"})
    assert versions["@solana/kit"] == "^6.0.0"


def test_missing_versions_are_reported_together() -> None:
    with pytest.raises(MissingDependencyVersionsError) as excinfo:
        used_dependency_versions(
            _render_map(),
            dependency_map={"generatedAccounts": "@acme/accounts", "solanaAddresses": "@acme/addresses"},
        )
    assert excinfo.value.dependencies == ["@acme/accounts", "@acme/addresses"]
    assert "@acme/accounts, @acme/addresses" in str(excinfo.value)


def test_empty_render_map_uses_nothing() -> None:
    assert used_dependency_versions({}) == {}
