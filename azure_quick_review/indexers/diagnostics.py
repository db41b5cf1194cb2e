"""Index of resources that have at least one diagnostic setting"""

import asyncio
from typing import Any, Dict, List, Mapping

from azure.core.exceptions import HttpResponseError
from azure.mgmt.monitor import MonitorManagementClient
from azure.mgmt.resource import ResourceManagementClient

from .base import IndexerBase
from ..core.errors import ScanCancelledError
from ..core.models import ScannerConfig
from ..core.pager import ItemPagedPager, collect
from ..core.resource_id import dig

# Lower-cased resource types whose diagnostic settings are looked up
DIAGNOSTIC_SETTINGS_TYPES = frozenset({
    "microsoft.cache/redis",
    "microsoft.containerregistry/registries",
    "microsoft.containerservice/managedclusters",
    "microsoft.datafactory/factories",
    "microsoft.dbforpostgresql/flexibleservers",
    "microsoft.dbforpostgresql/servers",
    "microsoft.documentdb/databaseaccounts",
    "microsoft.eventhub/namespaces",
    "microsoft.keyvault/vaults",
    "microsoft.network/applicationgateways",
    "microsoft.network/azurefirewalls",
    "microsoft.network/loadbalancers",
    "microsoft.network/networksecuritygroups",
    "microsoft.network/publicipaddresses",
    "microsoft.network/virtualnetworks",
    "microsoft.servicebus/namespaces",
    "microsoft.sql/servers",
    "microsoft.sql/servers/databases",
    "microsoft.storage/storageaccounts",
    "microsoft.web/serverfarms",
    "microsoft.web/sites",
})

DEFAULT_LOOKUP_WORKERS = 30


class DiagnosticSettingsIndexer(IndexerBase):
    """One subscription-wide resource listing, then bounded diagnostic settings lookups"""

    name = "diagnostics_settings"

    def __init__(self, client_factory=None, lookup_workers: int = DEFAULT_LOOKUP_WORKERS):
        super().__init__(client_factory)
        self.lookup_workers = lookup_workers

    def create_client(self, config: ScannerConfig) -> Dict[str, Any]:
        options = dict(config.client_options or {})
        return {
            'resource': ResourceManagementClient(config.credential, config.subscription_id, **options),
            'monitor': MonitorManagementClient(config.credential, config.subscription_id, **options),
        }

    async def collect_entries(self, config: ScannerConfig) -> Mapping[str, bool]:
        clients = self.client(config)
        resources = await collect(ItemPagedPager(clients['resource'].resources.list()), config.cancel)
        resource_ids: List[str] = [
            r.id for r in resources
            if (dig(r, "type", default="") or "").lower() in DIAGNOSTIC_SETTINGS_TYPES and dig(r, "id")
        ]
        if len(resource_ids) > 5000:
            self.logger.warning(f"{len(resource_ids)} resources detected. Scan will take longer than usual")

        semaphore = asyncio.Semaphore(self.lookup_workers)
        loop = asyncio.get_running_loop()
        monitor = clients['monitor']

        def list_settings(resource_id: str) -> bool:
            try:
                settings = monitor.diagnostic_settings.list(resource_uri=resource_id)
                # older API versions return a collection with .value instead of a pager
                value = getattr(settings, "value", None)
                return bool(list(value if value is not None else settings))
            except HttpResponseError as e:
                # unsupported or failed lookups leave the resource unenriched
                self.logger.debug(f"Diagnostic settings lookup failed for {resource_id}: {e.message}")
                return False

        async def has_settings(resource_id: str) -> bool:
            async with semaphore:
                if config.cancelled:
                    raise ScanCancelledError("scan cancelled")
                return await loop.run_in_executor(None, list_settings, resource_id)

        flags = await asyncio.gather(*(has_settings(rid) for rid in resource_ids))
        return {rid.lower(): True for rid, present in zip(resource_ids, flags) if present}
