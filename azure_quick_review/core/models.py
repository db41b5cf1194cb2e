"""Core data models for Azure Quick Review"""

import os
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .resource_id import resource_id_of


class Category(Enum):
    """Recommendation categories"""
    BUSINESS_CONTINUITY = "BusinessContinuity"
    DISASTER_RECOVERY = "DisasterRecovery"
    GOVERNANCE = "Governance"
    HIGH_AVAILABILITY = "HighAvailability"
    MONITORING_AND_ALERTING = "MonitoringAndAlerting"
    OTHER_BEST_PRACTICES = "OtherBestPractices"
    SCALABILITY = "Scalability"
    SECURITY = "Security"
    SERVICE_UPGRADE_AND_RETIREMENT = "ServiceUpgradeAndRetirement"


class Impact(Enum):
    """Impact of a failed recommendation"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RecommendationType(Enum):
    """Standard checks report a finding, SLA checks report the observed SLA"""
    STANDARD = ""
    SLA = "SLA"


# (resource, scan_context) -> (not_compliant, detail)
Predicate = Callable[[Any, "ScanContext"], Tuple[bool, str]]


@dataclass(frozen=True)
class Recommendation:
    """A single declarative check evaluated against one resource"""
    id: str
    resource_type: str
    category: Category
    impact: Impact
    recommendation: str
    learn_more_url: str
    predicate: Predicate = field(compare=False, repr=False)
    recommendation_type: RecommendationType = RecommendationType.STANDARD


@dataclass(frozen=True)
class Result:
    """Outcome of one recommendation for one resource"""
    recommendation_id: str
    resource_type: str
    category: Category
    impact: Impact
    recommendation: str
    learn_more_url: str
    recommendation_type: RecommendationType
    not_compliant: bool
    result: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'recommendation_id': self.recommendation_id,
            'resource_type': self.resource_type,
            'category': self.category.value,
            'impact': self.impact.value,
            'recommendation': self.recommendation,
            'learn_more_url': self.learn_more_url,
            'recommendation_type': self.recommendation_type.value,
            'not_compliant': self.not_compliant,
            'result': self.result,
        }


@dataclass
class ServiceResult:
    """Findings for a single resource"""
    subscription_id: str
    subscription_name: str
    resource_group: str
    location: str
    type: str
    service_name: str
    recommendations: Dict[str, Result] = field(default_factory=dict)
    # upstream id when known; child resources cannot be rebuilt from type and name
    id: str = ""

    @property
    def resource_id(self) -> str:
        """Canonical lower-cased ARM id of the resource"""
        if self.id:
            return self.id.lower()
        return resource_id_of(self.subscription_id, self.resource_group, self.type, self.service_name)

    @property
    def findings(self) -> List[Result]:
        return [r for r in self.recommendations.values() if r.not_compliant]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subscription_id': self.subscription_id,
            'subscription_name': self.subscription_name,
            'resource_group': self.resource_group,
            'location': self.location,
            'type': self.type,
            'service_name': self.service_name,
            'resource_id': self.resource_id,
            'recommendations': {
                key: result.to_dict()
                for key, result in sorted(self.recommendations.items())
            },
        }


@dataclass(frozen=True)
class PublicIPRecord:
    """Public IP details kept in the shared index"""
    id: str
    address: Optional[str] = None
    sku: Optional[str] = None
    zones: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScannerConfig:
    """Per-subscription bootstrap handed to every plugin's init"""
    subscription_id: str
    subscription_name: str
    credential: Any = None
    client_options: Mapping[str, Any] = field(default_factory=dict)
    cancel: threading.Event = field(default_factory=threading.Event, compare=False)

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set()


class ScanContext:
    """Read-only filters and enrichment indexes shared by the plugins of one subscription

    The indexes are frozen on construction. Lookups lower-case the resource id.
    A missing key means the resource was not enriched, which plugins read as
    the conservative answer.
    """

    __slots__ = ('filters', 'diagnostics_settings', 'private_endpoints', 'public_ips')

    def __init__(
        self,
        filters: Any,
        diagnostics_settings: Optional[Mapping[str, bool]] = None,
        private_endpoints: Optional[Mapping[str, bool]] = None,
        public_ips: Optional[Mapping[str, PublicIPRecord]] = None,
    ):
        object.__setattr__(self, 'filters', filters)
        object.__setattr__(self, 'diagnostics_settings', _freeze(diagnostics_settings))
        object.__setattr__(self, 'private_endpoints', _freeze(private_endpoints))
        object.__setattr__(self, 'public_ips', _freeze(public_ips))

    def __setattr__(self, name, value):
        raise AttributeError("ScanContext is read-only")

    def has_diagnostics(self, resource_id: Optional[str]) -> bool:
        return bool(resource_id) and bool(self.diagnostics_settings.get(resource_id.lower()))

    def has_private_endpoint(self, resource_id: Optional[str]) -> bool:
        return bool(resource_id) and bool(self.private_endpoints.get(resource_id.lower()))

    def public_ip(self, resource_id: Optional[str]) -> Optional[PublicIPRecord]:
        if not resource_id:
            return None
        return self.public_ips.get(resource_id.lower())


def _freeze(index: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType({key.lower(): value for key, value in (index or {}).items()})


@dataclass
class ScanConfiguration:
    """Configuration for a scan invocation"""
    subscription_ids: List[str] = field(default_factory=list)
    resource_groups: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    filters_file: Optional[str] = None
    parallel_workers: int = field(default_factory=lambda: os.cpu_count() or 4)
    plugin_workers: int = 8
    output_format: str = "table"
    output_file: Optional[str] = None
    mask_subscriptions: bool = True


@dataclass
class ScanError:
    """An error recorded against a subscription or plugin"""
    subscription_id: str
    message: str
    scanner: Optional[str] = None


@dataclass
class ScanReport:
    """Aggregate outcome of a scan invocation"""
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: List[ServiceResult] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)
    skipped: List[ScanError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def resources(self) -> int:
        return len(self.results)

    @property
    def findings(self) -> int:
        return sum(len(r.findings) for r in self.results)

    @property
    def duration_seconds(self) -> float:
        if not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
