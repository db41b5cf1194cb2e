"""Tests for the result model, ScanContext and resource id helpers"""

from collections import UserDict
from types import SimpleNamespace

import pytest

from azure_quick_review.core.filters import Filters
from azure_quick_review.core.models import (
    Category,
    Impact,
    PublicIPRecord,
    RecommendationType,
    Result,
    ScanContext,
    ServiceResult,
)
from azure_quick_review.core.resource_id import (
    dig,
    get_name_from_resource_id,
    get_resource_group_from_resource_id,
    get_resource_group_id_from_resource_id,
    get_resource_type_from_resource_id,
    get_subscription_from_resource_id,
    resource_id_of,
)

RESOURCE_ID = "/subscriptions/S/resourceGroups/R/providers/Microsoft.KeyVault/vaults/V"


def test_resource_id_parts():
    assert get_subscription_from_resource_id(RESOURCE_ID) == "S"
    assert get_resource_group_from_resource_id(RESOURCE_ID) == "R"
    assert get_resource_group_id_from_resource_id(RESOURCE_ID) == "/subscriptions/S/resourceGroups/R"
    assert get_resource_type_from_resource_id(RESOURCE_ID) == "Microsoft.KeyVault/vaults"
    assert get_name_from_resource_id(RESOURCE_ID) == "V"


@pytest.mark.parametrize("malformed", ["", None, "not-an-id", "/subscriptions/S"])
def test_malformed_resource_ids_yield_empty_strings(malformed):
    assert get_resource_group_from_resource_id(malformed) == ""
    assert get_resource_type_from_resource_id(malformed) == ""
    assert get_name_from_resource_id(malformed) == ""


def test_resource_id_of_is_lower_cased():
    assert resource_id_of("S", "R", "Microsoft.KeyVault/vaults", "V") == RESOURCE_ID.lower()


def test_dig_walks_attributes_and_mappings():
    resource = SimpleNamespace(properties={"network": SimpleNamespace(public_access="Disabled")})

    assert dig(resource, "properties", "network", "public_access") == "Disabled"
    assert dig(resource, "properties", "missing", "deeper") is None
    assert dig(resource, "absent", default=[]) == []
    assert dig(None, "anything", default="x") == "x"


def test_dig_treats_none_values_as_missing():
    assert dig(SimpleNamespace(tags=None), "tags", default={}) == {}


class RestKeyedModel(UserDict):
    """Mapping keyed by REST names that exposes flattened snake_case attributes"""

    @property
    def disable_local_auth(self):
        return self.data["properties"]["disableLocalAuth"]


def test_dig_prefers_attributes_on_mapping_models():
    model = RestKeyedModel({"properties": {"disableLocalAuth": True}, "kind": "GlobalDocumentDB"})

    assert dig(model, "disable_local_auth") is True
    assert dig(model, "kind") == "GlobalDocumentDB"
    assert dig(model, "properties", "disableLocalAuth") is True


def test_service_result_resource_id_prefers_upstream_id():
    result = ServiceResult(
        subscription_id="S", subscription_name="sub", resource_group="R", location="westeurope",
        type="Microsoft.Sql/servers/databases", service_name="db",
        id="/subscriptions/S/resourceGroups/R/providers/Microsoft.Sql/servers/srv/databases/DB",
    )
    assert result.resource_id == "/subscriptions/s/resourcegroups/r/providers/microsoft.sql/servers/srv/databases/db"


def test_service_result_resource_id_is_derived_without_upstream_id():
    result = ServiceResult(
        subscription_id="S", subscription_name="sub", resource_group="R", location="westeurope",
        type="Microsoft.KeyVault/vaults", service_name="V",
    )
    assert result.resource_id == RESOURCE_ID.lower()


def test_service_result_findings_and_to_dict():
    failing = Result(
        recommendation_id="kv-001", resource_type="Microsoft.KeyVault/vaults",
        category=Category.MONITORING_AND_ALERTING, impact=Impact.LOW, recommendation="diag",
        learn_more_url="https://x", recommendation_type=RecommendationType.STANDARD, not_compliant=True,
    )
    sla = Result(
        recommendation_id="kv-003", resource_type="Microsoft.KeyVault/vaults",
        category=Category.HIGH_AVAILABILITY, impact=Impact.HIGH, recommendation="sla",
        learn_more_url="https://x", recommendation_type=RecommendationType.SLA, not_compliant=False,
        result="99.99%",
    )
    result = ServiceResult(
        subscription_id="S", subscription_name="sub", resource_group="R", location="westeurope",
        type="Microsoft.KeyVault/vaults", service_name="V",
        recommendations={"kv-003": sla, "kv-001": failing},
    )

    assert result.findings == [failing]
    data = result.to_dict()
    assert list(data["recommendations"]) == ["kv-001", "kv-003"]
    assert data["recommendations"]["kv-003"]["recommendation_type"] == "SLA"
    assert data["recommendations"]["kv-003"]["result"] == "99.99%"
    assert data["recommendations"]["kv-001"]["category"] == "MonitoringAndAlerting"


def test_scan_context_lookups_are_case_insensitive():
    ctx = ScanContext(
        filters=Filters(),
        diagnostics_settings={"/subscriptions/s/resourcegroups/r/providers/microsoft.keyvault/vaults/v": True},
        private_endpoints={"/SUBSCRIPTIONS/S/RESOURCEGROUPS/R/PROVIDERS/MICROSOFT.KEYVAULT/VAULTS/V": True},
        public_ips={"/subscriptions/s/pip": PublicIPRecord(id="/subscriptions/s/pip", zones=("1", "2", "3"))},
    )

    assert ctx.has_diagnostics(RESOURCE_ID)
    assert ctx.has_private_endpoint(RESOURCE_ID)
    assert ctx.public_ip("/Subscriptions/S/PIP").zones == ("1", "2", "3")
    assert not ctx.has_diagnostics(None)
    assert ctx.public_ip("") is None


def test_scan_context_is_read_only():
    source = {"/a": True}
    ctx = ScanContext(filters=Filters(), diagnostics_settings=source)

    with pytest.raises(AttributeError):
        ctx.diagnostics_settings = {}
    with pytest.raises(TypeError):
        ctx.diagnostics_settings["/b"] = True

    source["/c"] = True
    assert not ctx.has_diagnostics("/c")
