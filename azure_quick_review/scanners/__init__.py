"""Scanner plugins, grouped by scanner key"""

from typing import Callable, Dict, List

from .adf import DataFactoryScanner
from .aks import AKSScanner
from .asp import AppServicePlanScanner, AppServiceScanner, FunctionAppScanner, LogicAppScanner
from .base import GenericScanner
from .cosmos import CosmosDBScanner
from .cr import ContainerRegistryScanner
from .kv import KeyVaultScanner
from .messaging import EventHubScanner, ServiceBusScanner
from .network import (
    ApplicationGatewayScanner,
    AzureFirewallScanner,
    LoadBalancerScanner,
    NetworkSecurityGroupScanner,
    PrivateEndpointScanner,
    PublicIPScanner,
    VirtualNetworkScanner,
)
from .psql import PostgreSQLFlexibleScanner, PostgreSQLScanner
from .redis import RedisScanner
from .sql import SQLScanner
from .st import StorageScanner

# scanner key -> plugin classes, in registration order
SCANNER_CATALOGUE: Dict[str, List[Callable[[], GenericScanner]]] = {
    "adf": [DataFactoryScanner],
    "afw": [AzureFirewallScanner],
    "agw": [ApplicationGatewayScanner],
    "aks": [AKSScanner],
    "asp": [AppServicePlanScanner, AppServiceScanner, FunctionAppScanner, LogicAppScanner],
    "cosmos": [CosmosDBScanner],
    "cr": [ContainerRegistryScanner],
    "evh": [EventHubScanner],
    "kv": [KeyVaultScanner],
    "lb": [LoadBalancerScanner],
    "nsg": [NetworkSecurityGroupScanner],
    "pep": [PrivateEndpointScanner],
    "pip": [PublicIPScanner],
    "psql": [PostgreSQLScanner, PostgreSQLFlexibleScanner],
    "redis": [RedisScanner],
    "sb": [ServiceBusScanner],
    "sql": [SQLScanner],
    "st": [StorageScanner],
    "vnet": [VirtualNetworkScanner],
}
