"""Tests for the recommendation engine"""

from types import SimpleNamespace

from azure_quick_review.core.engine import EVALUATION_FAILED, RecommendationEngine
from azure_quick_review.core.filters import Filters
from azure_quick_review.core.models import Category, Impact, Recommendation, ScanContext
from azure_quick_review.scanners import rules

from .fakes import VAULTS, vault


def _recommendation(rec_id, predicate):
    return Recommendation(
        id=rec_id,
        resource_type=VAULTS,
        category=Category.SECURITY,
        impact=Impact.MEDIUM,
        recommendation=f"{rec_id} recommendation",
        learn_more_url="https://example.com",
        predicate=predicate,
    )


def test_diagnostics_found_through_lower_cased_index():
    ctx = ScanContext(
        filters=Filters(),
        diagnostics_settings={"/subscriptions/s/resourcegroups/r/providers/microsoft.keyvault/vaults/v": True},
    )
    resource = SimpleNamespace(id="/Subscriptions/S/ResourceGroups/R/providers/Microsoft.KeyVault/vaults/V")
    recs = rules.rule_set(rules.diagnostics("kv-001", VAULTS, "diag", "https://x"))

    result = RecommendationEngine().evaluate(recs, resource, ctx)["kv-001"]

    assert result.not_compliant is False
    assert result.result == ""


def test_sla_recommendation_reports_value_as_compliant(empty_context):
    recs = rules.rule_set(_recommendation("kv-003", lambda resource, ctx: (False, "99.95%")))
    engine = RecommendationEngine()

    for name in ("a", "b", "c"):
        result = engine.evaluate(recs, vault(name), empty_context)["kv-003"]
        assert result.result == "99.95%"
        assert result.not_compliant is False


def test_metadata_is_copied_into_results(empty_context):
    rec = rules.sla("kv-003", VAULTS, "Key Vault should have a SLA", "https://sla", "99.99%")

    result = RecommendationEngine().evaluate({"kv-003": rec}, vault("v"), empty_context)["kv-003"]

    assert result.recommendation_id == "kv-003"
    assert result.resource_type == VAULTS
    assert result.category == Category.HIGH_AVAILABILITY
    assert result.impact == Impact.HIGH
    assert result.learn_more_url == "https://sla"
    assert result.recommendation_type.value == "SLA"


def test_failing_predicate_becomes_a_non_compliant_result(empty_context):
    def broken(resource, ctx):
        raise KeyError("properties")

    recs = rules.rule_set(
        _recommendation("kv-001", broken),
        _recommendation("kv-002", lambda resource, ctx: (False, "")),
    )

    results = RecommendationEngine().evaluate(recs, vault("v"), empty_context)

    assert results["kv-001"].not_compliant is True
    assert results["kv-001"].result == EVALUATION_FAILED
    assert results["kv-002"].not_compliant is False


def test_evaluation_is_repeatable():
    ctx = ScanContext(filters=Filters(), diagnostics_settings={vault("v").id: True})
    recs = rules.rule_set(
        rules.diagnostics("kv-001", VAULTS, "diag", "https://x"),
        rules.tags("kv-007", VAULTS, "tags"),
    )
    engine = RecommendationEngine()

    first = engine.evaluate(recs, vault("v"), ctx)
    second = engine.evaluate(recs, vault("v"), ctx)

    assert first == second
    assert dict(ctx.diagnostics_settings) == {vault("v").id.lower(): True}
