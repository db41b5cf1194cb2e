"""Index of public IP addresses by resource id"""

from typing import Any, Mapping

from azure.mgmt.network import NetworkManagementClient

from .base import IndexerBase
from ..core.models import PublicIPRecord, ScannerConfig
from ..core.pager import ItemPagedPager, collect
from ..core.resource_id import dig, enum_value


class PublicIPIndexer(IndexerBase):
    name = "public_ips"

    def create_client(self, config: ScannerConfig) -> Any:
        return NetworkManagementClient(config.credential, config.subscription_id, **dict(config.client_options or {}))

    async def collect_entries(self, config: ScannerConfig) -> Mapping[str, PublicIPRecord]:
        network = self.client(config)
        addresses = await collect(ItemPagedPager(network.public_ip_addresses.list_all()), config.cancel)

        index = {}
        for pip in addresses:
            pip_id = dig(pip, "id")
            if not pip_id:
                continue
            index[pip_id.lower()] = PublicIPRecord(
                id=pip_id,
                address=dig(pip, "ip_address"),
                sku=enum_value(dig(pip, "sku", "name")) or None,
                zones=tuple(dig(pip, "zones", default=[])),
            )
        return index
