"""Shared helpers for result sinks"""

from typing import Any, Dict, List

from ..core.models import ScanReport, ServiceResult

MASK_PREFIX = "xxxxxxxx-xxxx-xxxx-xxxx-xxxxx"


def mask_subscription_id(subscription_id: str, mask: bool = True) -> str:
    """Hide all but the last 7 characters of a subscription id"""
    if not mask or not subscription_id:
        return subscription_id
    return f"{MASK_PREFIX}{subscription_id[29:]}"


def mask_resource_id(resource_id: str, subscription_id: str, mask: bool = True) -> str:
    if not mask or not subscription_id:
        return resource_id
    return resource_id.replace(subscription_id.lower(), mask_subscription_id(subscription_id.lower()))


def service_dict(result: ServiceResult, mask: bool) -> Dict[str, Any]:
    data = result.to_dict()
    data['subscription_id'] = mask_subscription_id(result.subscription_id, mask)
    data['resource_id'] = mask_resource_id(result.resource_id, result.subscription_id, mask)
    return data


def report_rows(report: ScanReport, mask: bool = True) -> List[Dict[str, Any]]:
    """One flat row per recommendation result"""

    rows = []
    for result in report.results:
        service = service_dict(result, mask)
        for rec in service.pop('recommendations').values():
            rows.append({**service, **rec})
    return rows
