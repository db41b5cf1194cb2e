"""Builders for the recommendation shapes shared across plugins"""

from typing import Callable, Dict, Union

from ..core.models import Category, Impact, Recommendation, RecommendationType, ScanContext
from ..core.resource_id import dig

CAF_URL = "https://learn.microsoft.com/en-us/azure/cloud-adoption-framework/ready/azure-best-practices/resource-abbreviations"
TAGS_URL = "https://learn.microsoft.com/en-us/azure/azure-resource-manager/management/tag-resources?tabs=json"
SLA_URL = "https://www.microsoft.com/licensing/docs/view/Service-Level-Agreements-SLA-for-Online-Services"


def rule_set(*recommendations: Recommendation) -> Dict[str, Recommendation]:
    return {rec.id: rec for rec in recommendations}


def diagnostics(rec_id: str, resource_type: str, recommendation: str, url: str) -> Recommendation:
    """Not compliant unless the diagnostics index has the resource"""

    def predicate(resource, ctx: ScanContext):
        return not ctx.has_diagnostics(dig(resource, "id")), ""

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.MONITORING_AND_ALERTING,
        impact=Impact.LOW,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
    )


def sla(rec_id: str, resource_type: str, recommendation: str, url: str,
        value: Union[str, Callable[[object], str]]) -> Recommendation:
    """Reports the SLA; only a "None" SLA is not compliant"""

    def predicate(resource, ctx: ScanContext):
        observed = value(resource) if callable(value) else value
        return observed == "None", observed

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.HIGH_AVAILABILITY,
        impact=Impact.HIGH,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
        recommendation_type=RecommendationType.SLA,
    )


def private_endpoint_index(rec_id: str, resource_type: str, recommendation: str,
                           url: str) -> Recommendation:
    """Not compliant unless a private endpoint targets the resource"""

    def predicate(resource, ctx: ScanContext):
        return not ctx.has_private_endpoint(dig(resource, "id")), ""

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.SECURITY,
        impact=Impact.HIGH,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
    )


def private_endpoint_connections(rec_id: str, resource_type: str, recommendation: str,
                                 url: str) -> Recommendation:
    """Not compliant when the resource reports no private endpoint connections"""

    def predicate(resource, ctx: ScanContext):
        return not dig(resource, "private_endpoint_connections"), ""

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.SECURITY,
        impact=Impact.HIGH,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
    )


def sku(rec_id: str, resource_type: str, recommendation: str, url: str,
        path=("sku", "name")) -> Recommendation:
    """Reports the SKU name"""

    def predicate(resource, ctx: ScanContext):
        value = dig(resource, *path, default="")
        return False, str(getattr(value, "value", value))

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.HIGH_AVAILABILITY,
        impact=Impact.HIGH,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
    )


def naming(rec_id: str, resource_type: str, recommendation: str, prefix: str) -> Recommendation:
    """Cloud Adoption Framework abbreviation check on the resource name"""

    def predicate(resource, ctx: ScanContext):
        return not dig(resource, "name", default="").startswith(prefix), ""

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.GOVERNANCE,
        impact=Impact.LOW,
        recommendation=recommendation,
        learn_more_url=CAF_URL,
        predicate=predicate,
    )


def tags(rec_id: str, resource_type: str, recommendation: str) -> Recommendation:

    def predicate(resource, ctx: ScanContext):
        return not dig(resource, "tags"), ""

    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=Category.GOVERNANCE,
        impact=Impact.LOW,
        recommendation=recommendation,
        learn_more_url=TAGS_URL,
        predicate=predicate,
    )


def check(rec_id: str, resource_type: str, recommendation: str, url: str,
          category: Category, impact: Impact,
          predicate: Callable[[object, ScanContext], tuple]) -> Recommendation:
    """Service-specific recommendation with its own predicate"""
    return Recommendation(
        id=rec_id,
        resource_type=resource_type,
        category=category,
        impact=impact,
        recommendation=recommendation,
        learn_more_url=url,
        predicate=predicate,
    )
