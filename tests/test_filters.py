"""Tests for include/exclude filters and the filters file"""

import pytest

from azure_quick_review.core.errors import ConfigurationError
from azure_quick_review.core.filters import Filters, filters_from_dict, load_filters
from azure_quick_review.core.resource_id import get_resource_group_id_from_resource_id

KEPT = "/subscriptions/s/resourcegroups/kept"
DROPPED = "/subscriptions/s/resourcegroups/dropped"


def test_include_wins_over_exclude_for_resource_groups():
    filters = Filters(include_resource_groups={KEPT}, exclude_resource_groups={KEPT})
    assert filters.is_resource_group_excluded(KEPT) is False


def test_include_resource_groups_act_as_whitelist():
    filters = Filters(include_resource_groups={KEPT})
    assert filters.is_resource_group_excluded(DROPPED) is True
    assert filters.is_resource_group_excluded(KEPT.upper()) is False


def test_exclude_resource_groups_without_include():
    filters = Filters(exclude_resource_groups={DROPPED})
    assert filters.is_resource_group_excluded(DROPPED) is True
    assert filters.is_resource_group_excluded(KEPT) is False


def test_include_wins_over_exclude_for_subscriptions():
    filters = Filters(include_subscriptions={"S1"}, exclude_subscriptions={"s1", "s2"})
    assert filters.is_subscription_excluded("s1") is False
    assert filters.is_subscription_excluded("S2") is True


@pytest.mark.parametrize("resource_id", [
    f"{DROPPED}/providers/Microsoft.KeyVault/vaults/v1",
    f"{KEPT}/providers/Microsoft.KeyVault/vaults/v1",
    f"{KEPT}/providers/Microsoft.KeyVault/vaults/excluded",
])
def test_service_exclusion_combines_resource_group_and_service_sets(resource_id):
    filters = Filters(
        exclude_resource_groups={DROPPED},
        exclude_services={f"{KEPT}/providers/Microsoft.KeyVault/vaults/EXCLUDED"},
    )
    expected = (
        filters.is_resource_group_excluded(get_resource_group_id_from_resource_id(resource_id))
        or resource_id.lower() in filters.exclude_services
    )
    assert filters.is_service_excluded(resource_id) is expected


def test_recommendation_and_scanner_exclusion():
    filters = Filters(exclude_recommendations={"KV-003"}, include_resource_types={"kv", "st"})
    assert filters.is_recommendation_excluded("kv-003")
    assert not filters.is_recommendation_excluded("kv-001")
    assert filters.is_scanner_excluded("aks")
    assert not filters.is_scanner_excluded("KV")
    assert not Filters().is_scanner_excluded("aks")


def test_add_resource_group_validates_shape():
    filters = Filters()
    filters.add_resource_group("/subscriptions/S/resourceGroups/Kept")
    assert filters.include_resource_groups == {KEPT}

    with pytest.raises(ConfigurationError):
        filters.add_resource_group("kept")
    with pytest.raises(ConfigurationError):
        filters.add_resource_group("/subscriptions/S/resourceGroups/kept/providers/x")


def test_filters_from_dict_reads_azqr_root():
    filters = filters_from_dict({
        "azqr": {
            "include": {"subscriptions": ["S1"], "resourceGroups": ["/subscriptions/S1/resourceGroups/RG"]},
            "exclude": {
                "subscriptions": ["s2"],
                "services": ["/subscriptions/s1/resourceGroups/rg/providers/Microsoft.KeyVault/vaults/V"],
                "recommendations": ["kv-003"],
            },
        }
    })

    assert filters.include_subscriptions == {"s1"}
    assert filters.include_resource_groups == {"/subscriptions/s1/resourcegroups/rg"}
    assert filters.exclude_subscriptions == {"s2"}
    assert filters.exclude_services == {"/subscriptions/s1/resourcegroups/rg/providers/microsoft.keyvault/vaults/v"}
    assert filters.exclude_recommendations == {"kv-003"}


def test_filters_without_azqr_root_are_empty():
    assert filters_from_dict({"other": {"include": {"subscriptions": ["s1"]}}}) == Filters()


def test_load_filters_from_yaml(tmp_path):
    path = tmp_path / "filters.yaml"
    path.write_text(
        "azqr:\n"
        "  include:\n"
        "    resourceTypes: [kv]\n"
        "  exclude:\n"
        "    resourceGroups:\n"
        "      - /subscriptions/s/resourceGroups/dropped\n"
    )

    filters = load_filters(str(path))

    assert filters.include_resource_types == {"kv"}
    assert filters.is_resource_group_excluded(DROPPED)


def test_load_filters_without_path_is_empty():
    assert load_filters(None) == Filters()


def test_load_filters_rejects_bad_input(tmp_path):
    with pytest.raises(ConfigurationError):
        load_filters(str(tmp_path / "missing.yaml"))

    broken = tmp_path / "broken.yaml"
    broken.write_text("azqr: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_filters(str(broken))

    bad_rg = tmp_path / "bad_rg.yaml"
    bad_rg.write_text("azqr:\n  exclude:\n    resourceGroups: [just-a-name]\n")
    with pytest.raises(ConfigurationError):
        load_filters(str(bad_rg))
