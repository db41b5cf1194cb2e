"""Tests for the scanner registry and the recommendation catalogue"""

from types import SimpleNamespace

import pytest

from azure_quick_review.core.errors import ConfigurationError
from azure_quick_review.core.registry import ScannerRegistry, build_registry
from azure_quick_review.scanners import SCANNER_CATALOGUE
from azure_quick_review.scanners.base import EnrichedTarget

from .fakes import FakeVaultScanner, registry_of


@pytest.fixture(scope="module")
def registry():
    return build_registry()


def test_registry_exposes_every_catalogue_key_sorted(registry):
    assert registry.keys() == sorted(SCANNER_CATALOGUE)
    assert [info.key for info in registry.scanner_info()] == registry.keys()


def test_grouped_keys_hold_several_plugins(registry):
    assert [p.key for p in registry.lookup("asp")] == ["asp", "app", "func", "logics"]
    assert [p.key for p in registry.lookup("psql")] == ["psql", "psqlf"]
    sql = {info.key: info for info in registry.scanner_info()}["sql"]
    assert sql.resource_types == ["Microsoft.Sql/servers", "Microsoft.Sql/servers/databases"]


def test_recommendation_ids_are_unique_and_prefixed(registry):
    seen = set()
    for key in registry.keys():
        for plugin in registry.lookup(key):
            prefixes = tuple(f"{p}-" for p in plugin.recommendation_prefixes())
            for rec_id, rec in plugin.all_recommendations().items():
                assert rec.id == rec_id
                assert rec_id.startswith(prefixes)
                assert rec_id not in seen
                seen.add(rec_id)
    assert seen == set(registry.all_recommendations())


def test_every_predicate_handles_a_minimal_resource(registry, empty_context):
    shells = [SimpleNamespace(), EnrichedTarget(SimpleNamespace(), site_config=None, blob_service_properties=None)]
    for rec_id, rec in registry.all_recommendations().items():
        for shell in shells:
            outcome = rec.predicate(shell, empty_context)
            assert len(outcome) == 2, rec_id


def test_resolve_selects_keys_case_insensitively(registry):
    selected = registry.resolve(["KV", " st "])
    assert list(selected) == ["kv", "st"]


def test_resolve_without_keys_returns_everything(registry):
    assert list(registry.resolve([])) == registry.keys()


def test_resolve_rejects_unknown_keys(registry):
    with pytest.raises(ConfigurationError):
        registry.resolve(["kv", "nope"])


def test_validate_rejects_duplicate_ids():
    registry = registry_of(kv=[FakeVaultScanner(), FakeVaultScanner()])
    with pytest.raises(ValueError, match="Duplicate"):
        registry.validate()


def test_validate_rejects_foreign_prefixes():
    class Misnamed(FakeVaultScanner):
        key = "st"

    registry = ScannerRegistry()
    registry.register("st", Misnamed())
    with pytest.raises(ValueError, match="does not start with"):
        registry.validate()
