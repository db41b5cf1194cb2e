"""Index of resources targeted by a private endpoint"""

from typing import Any, Mapping

from azure.mgmt.network import NetworkManagementClient

from .base import IndexerBase
from ..core.models import ScannerConfig
from ..core.pager import ItemPagedPager, collect
from ..core.resource_id import dig


class PrivateEndpointIndexer(IndexerBase):
    name = "private_endpoints"

    def create_client(self, config: ScannerConfig) -> Any:
        return NetworkManagementClient(config.credential, config.subscription_id, **dict(config.client_options or {}))

    async def collect_entries(self, config: ScannerConfig) -> Mapping[str, bool]:
        network = self.client(config)
        endpoints = await collect(ItemPagedPager(network.private_endpoints.list_by_subscription()), config.cancel)

        index = {}
        for endpoint in endpoints:
            connections = list(dig(endpoint, "private_link_service_connections", default=[]))
            connections += list(dig(endpoint, "manual_private_link_service_connections", default=[]))
            for connection in connections:
                target = dig(connection, "private_link_service_id")
                if target:
                    index[target.lower()] = True
        return index
