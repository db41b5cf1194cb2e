"""Include/exclude filters applied to subscriptions, resource groups, services and recommendations"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

import yaml

from .errors import ConfigurationError
from .resource_id import get_resource_group_id_from_resource_id
from ..utils.logger import setup_logger

logger = setup_logger("Filters")


def _lowered(values: Optional[Iterable[Any]]) -> Set[str]:
    return {str(v).strip().lower() for v in (values or []) if v is not None and str(v).strip()}


@dataclass
class Filters:
    """Include/exclude sets, all stored lower-cased

    Include always wins over exclude. A non-empty include set for resource
    groups acts as a whitelist.
    """
    include_subscriptions: Set[str] = field(default_factory=set)
    include_resource_groups: Set[str] = field(default_factory=set)
    include_resource_types: Set[str] = field(default_factory=set)
    exclude_subscriptions: Set[str] = field(default_factory=set)
    exclude_resource_groups: Set[str] = field(default_factory=set)
    exclude_services: Set[str] = field(default_factory=set)
    exclude_recommendations: Set[str] = field(default_factory=set)

    def __post_init__(self):
        for name in (
            'include_subscriptions', 'include_resource_groups', 'include_resource_types',
            'exclude_subscriptions', 'exclude_resource_groups', 'exclude_services',
            'exclude_recommendations',
        ):
            setattr(self, name, _lowered(getattr(self, name)))

    def add_subscription(self, subscription_id: str) -> None:
        self.include_subscriptions.add(subscription_id.lower())

    def add_resource_group(self, resource_group_id: str) -> None:
        _validate_resource_group_id(resource_group_id)
        self.include_resource_groups.add(resource_group_id.lower())

    def is_subscription_excluded(self, subscription_id: str) -> bool:
        sub = (subscription_id or "").lower()
        return sub in self.exclude_subscriptions and sub not in self.include_subscriptions

    def is_resource_group_excluded(self, resource_group_id: str) -> bool:
        rg = (resource_group_id or "").lower()
        if rg in self.include_resource_groups:
            return False
        if self.include_resource_groups:
            return True
        return rg in self.exclude_resource_groups

    def is_service_excluded(self, resource_id: str) -> bool:
        rid = (resource_id or "").lower()
        if self.is_resource_group_excluded(get_resource_group_id_from_resource_id(rid)):
            return True
        return rid in self.exclude_services

    def is_recommendation_excluded(self, recommendation_id: str) -> bool:
        return (recommendation_id or "").lower() in self.exclude_recommendations

    def is_scanner_excluded(self, key: str) -> bool:
        """Scanner keys outside a non-empty include.resourceTypes set are excluded"""
        return bool(self.include_resource_types) and key.lower() not in self.include_resource_types


def _validate_resource_group_id(resource_group_id: str) -> None:
    parts = (resource_group_id or "").split("/")
    valid = (
        len(parts) == 5
        and parts[0] == ""
        and parts[1].lower() == "subscriptions"
        and parts[2] != ""
        and parts[3].lower() == "resourcegroups"
        and parts[4] != ""
    )
    if not valid:
        raise ConfigurationError(
            f"Invalid resource group id: {resource_group_id}. "
            "Expected /subscriptions/<subscription>/resourceGroups/<name>"
        )


def filters_from_dict(data: Optional[Dict[str, Any]]) -> Filters:
    """Build Filters from the parsed filter document"""

    root = (data or {}).get("azqr") or {}
    if not isinstance(root, dict):
        raise ConfigurationError("The 'azqr' section of the filters file must be a mapping")

    include = root.get("include") or {}
    exclude = root.get("exclude") or {}

    for rg in list(include.get("resourceGroups") or []) + list(exclude.get("resourceGroups") or []):
        _validate_resource_group_id(rg)

    return Filters(
        include_subscriptions=include.get("subscriptions"),
        include_resource_groups=include.get("resourceGroups"),
        include_resource_types=include.get("resourceTypes"),
        exclude_subscriptions=exclude.get("subscriptions"),
        exclude_resource_groups=exclude.get("resourceGroups"),
        exclude_services=exclude.get("services"),
        exclude_recommendations=exclude.get("recommendations"),
    )


def load_filters(path: Optional[str]) -> Filters:
    """Load Filters from a YAML file; no path means no filtering"""

    if not path:
        return Filters()

    filter_path = Path(path)
    if not filter_path.exists():
        raise ConfigurationError(f"Filters file not found: {path}")

    try:
        with open(filter_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse filters file {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Filters file {path} must contain a mapping")

    filters = filters_from_dict(data)
    logger.info(f"Loaded filters from: {path}")
    return filters
