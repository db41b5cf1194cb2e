"""Generic scanner shared by all plugins"""

import asyncio
import functools
from abc import abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from ..core.engine import RecommendationEngine
from ..core.errors import ScanCancelledError
from ..core.interfaces import IScannerPlugin
from ..core.models import ScanContext, ScannerConfig, ServiceResult
from ..core.pager import ItemPagedPager, Pager, collect
from ..core.resource_id import dig, get_resource_group_from_resource_id
from ..utils.logger import setup_logger

T = TypeVar("T")

ClientFactory = Callable[[ScannerConfig], Any]


class GenericScanner(IScannerPlugin, Generic[T]):
    """Lists resources of type T across a subscription and evaluates them

    Subclasses provide the upstream client, the listing and the recommendation
    set. A client factory can be injected to replace the SDK client.
    """

    key: str = ""
    types: List[str] = []

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self.logger = setup_logger(self.__class__.__name__)
        self.engine = RecommendationEngine()
        self.config: Optional[ScannerConfig] = None
        self.client: Any = None
        self._client_factory = client_factory

    def resource_types(self) -> List[str]:
        return list(self.types)

    def init(self, config: ScannerConfig) -> None:
        self.config = config
        factory = self._client_factory or self.create_client
        self.client = factory(config)

    @abstractmethod
    def create_client(self, config: ScannerConfig) -> Any:
        """Build the SDK management client"""
        pass

    @abstractmethod
    def list_resources(self) -> Pager:
        """Return the subscription-wide pager of resources"""
        pass

    async def enrich(self, resource: T) -> Any:
        """Return the evaluation target for a resource"""
        return resource

    def pager(self, item_paged: Any) -> Pager:
        return ItemPagedPager(item_paged)

    async def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a blocking upstream call on the default executor"""
        self._check_cancelled()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))

    async def scan(self, scan_context: ScanContext) -> List[ServiceResult]:
        self.log_subscription_scan(self.types[0])
        resources = await collect(self.list_resources(), self.config.cancel)
        recommendations = self.get_recommendations()

        results = []
        for resource in resources:
            target = await self.enrich(resource)
            results.append(self.service_result(
                resource, self.engine.evaluate(recommendations, target, scan_context)
            ))
        return results

    def service_result(self, resource: Any, recommendations: Dict[str, Any],
                       location: Optional[str] = None) -> ServiceResult:
        resource_id = dig(resource, "id", default="")
        return ServiceResult(
            subscription_id=self.config.subscription_id,
            subscription_name=self.config.subscription_name,
            resource_group=get_resource_group_from_resource_id(resource_id),
            location=location or dig(resource, "location", default=""),
            type=dig(resource, "type", default=""),
            service_name=dig(resource, "name", default=""),
            recommendations=recommendations,
            id=resource_id,
        )

    def log_subscription_scan(self, resource_type: str) -> None:
        self.logger.info(
            f"Scanning subscriptions/...{self.config.subscription_id[29:]} for {resource_type}"
        )

    def _check_cancelled(self) -> None:
        if self.config is not None and self.config.cancelled:
            raise ScanCancelledError("scan cancelled")


def client_kwargs(config: ScannerConfig) -> Dict[str, Any]:
    return dict(config.client_options or {})


class EnrichedTarget:
    """A resource plus plugin-local enrichment, read through to the resource"""

    def __init__(self, resource: Any, **enrichment: Any):
        self.resource = resource
        self.__dict__.update(enrichment)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.__dict__["resource"], name)
