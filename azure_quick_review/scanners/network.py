"""Network resource scanners"""

from azure.mgmt.network import NetworkManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

APPLICATION_GATEWAYS = "Microsoft.Network/applicationGateways"
AZURE_FIREWALLS = "Microsoft.Network/azureFirewalls"
LOAD_BALANCERS = "Microsoft.Network/loadBalancers"
NETWORK_SECURITY_GROUPS = "Microsoft.Network/networkSecurityGroups"
PRIVATE_ENDPOINTS = "Microsoft.Network/privateEndpoints"
PUBLIC_IP_ADDRESSES = "Microsoft.Network/publicIPAddresses"
VIRTUAL_NETWORKS = "Microsoft.Network/virtualNetworks"


class NetworkScanner(GenericScanner):
    """Base for plugins backed by the network management client"""

    def create_client(self, config):
        return NetworkManagementClient(config.credential, config.subscription_id, **client_kwargs(config))


class ApplicationGatewayScanner(NetworkScanner):
    key = "agw"
    types = [APPLICATION_GATEWAYS]

    def list_resources(self):
        return self.pager(self.client.application_gateways.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "agw-005", APPLICATION_GATEWAYS,
                "Application Gateway: Monitor and Log the configurations and traffic",
                "https://learn.microsoft.com/en-us/azure/application-gateway/application-gateway-diagnostics#diagnostic-logging",
            ),
            rules.sla(
                "agw-103", APPLICATION_GATEWAYS, "Application Gateway SLA",
                "https://www.azure.cn/en-us/support/sla/application-gateway/", "99.95%",
            ),
            rules.naming(
                "agw-105", APPLICATION_GATEWAYS,
                "Application Gateway Name should comply with naming conventions", "agw",
            ),
            rules.tags("agw-106", APPLICATION_GATEWAYS, "Application Gateway should have tags"),
        )


def firewall_sla(firewall) -> str:
    if len(dig(firewall, "zones", default=[])) > 1:
        return "99.99%"
    return "99.95%"


class AzureFirewallScanner(NetworkScanner):
    key = "afw"
    types = [AZURE_FIREWALLS]

    def list_resources(self):
        return self.pager(self.client.azure_firewalls.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "afw-001", AZURE_FIREWALLS, "Azure Firewall should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/firewall/firewall-diagnostics",
            ),
            rules.sla("afw-003", AZURE_FIREWALLS, "Azure Firewall SLA", rules.SLA_URL, firewall_sla),
            rules.sku(
                "afw-005", AZURE_FIREWALLS, "Azure Firewall SKU",
                "https://learn.microsoft.com/en-us/azure/firewall/choose-firewall-sku",
            ),
            rules.naming("afw-006", AZURE_FIREWALLS, "Azure Firewall Name should comply with naming conventions", "afw"),
            rules.tags("afw-007", AZURE_FIREWALLS, "Azure Firewall should have tags"),
        )


def load_balancer_sla(lb) -> str:
    if enum_value(dig(lb, "sku", "name")) == "Basic":
        return "None"
    return "99.99%"


def load_balancer_sku(lb, ctx):
    name = enum_value(dig(lb, "sku", "name"))
    return name != "Standard", name


def load_balancer_naming(lb, ctx):
    frontends = dig(lb, "frontend_ip_configurations", default=[])
    has_private_ip = any(dig(f, "private_ip_address") for f in frontends)
    has_public_ip = any(dig(f, "public_ip_address") is not None for f in frontends)
    name = dig(lb, "name", default="")
    caf = (name.startswith("lbi") and has_private_ip) or (name.startswith("lbe") and has_public_ip)
    return not caf, ""


def load_balancer_public_ip_zones(lb, ctx):
    """Public frontends must use zone-redundant public IPs; unknown IPs count as non-redundant"""
    not_redundant = []
    for frontend in dig(lb, "frontend_ip_configurations", default=[]):
        public_ip_id = dig(frontend, "public_ip_address", "id")
        if not public_ip_id:
            continue
        record = ctx.public_ip(public_ip_id)
        if record is None or len(record.zones) < 2:
            not_redundant.append(public_ip_id.rsplit("/", 1)[-1])
    return bool(not_redundant), ", ".join(not_redundant)


class LoadBalancerScanner(NetworkScanner):
    key = "lb"
    types = [LOAD_BALANCERS]

    def list_resources(self):
        return self.pager(self.client.load_balancers.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "lb-001", LOAD_BALANCERS, "Load Balancer should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/load-balancer/monitor-load-balancer#creating-a-diagnostic-setting",
            ),
            rules.check(
                "lb-002", LOAD_BALANCERS, "Load Balancer public frontends should use zone-redundant public IPs",
                "https://learn.microsoft.com/en-us/azure/load-balancer/load-balancer-standard-availability-zones",
                Category.HIGH_AVAILABILITY, Impact.HIGH, load_balancer_public_ip_zones,
            ),
            rules.sla(
                "lb-003", LOAD_BALANCERS, "Load Balancer should have a SLA",
                "https://learn.microsoft.com/en-us/azure/load-balancer/skus", load_balancer_sla,
            ),
            rules.check(
                "lb-005", LOAD_BALANCERS, "Load Balancer SKU",
                "https://learn.microsoft.com/en-us/azure/load-balancer/skus",
                Category.HIGH_AVAILABILITY, Impact.HIGH, load_balancer_sku,
            ),
            rules.check(
                "lb-006", LOAD_BALANCERS, "Load Balancer Name should comply with naming conventions",
                rules.CAF_URL, Category.GOVERNANCE, Impact.LOW, load_balancer_naming,
            ),
            rules.tags("lb-007", LOAD_BALANCERS, "Load Balancer should have tags"),
        )


class NetworkSecurityGroupScanner(NetworkScanner):
    key = "nsg"
    types = [NETWORK_SECURITY_GROUPS]

    def list_resources(self):
        return self.pager(self.client.network_security_groups.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "nsg-001", NETWORK_SECURITY_GROUPS, "NSG should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/virtual-network/virtual-network-nsg-manage-log",
            ),
            rules.sla("nsg-003", NETWORK_SECURITY_GROUPS, "NSG SLA", rules.SLA_URL, "99.99%"),
            rules.naming("nsg-006", NETWORK_SECURITY_GROUPS, "NSG Name should comply with naming conventions", "nsg"),
            rules.tags("nsg-007", NETWORK_SECURITY_GROUPS, "NSG should have tags"),
        )


def dns_servers(vnet, ctx):
    dhcp_options = dig(vnet, "dhcp_options")
    if dhcp_options is None:
        return False, ""
    return len(dig(dhcp_options, "dns_servers", default=[])) < 2, ""


class VirtualNetworkScanner(NetworkScanner):
    key = "vnet"
    types = [VIRTUAL_NETWORKS]

    def list_resources(self):
        return self.pager(self.client.virtual_networks.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "vnet-001", VIRTUAL_NETWORKS, "Virtual Network should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/virtual-network/monitor-virtual-network#collection-and-routing",
            ),
            rules.naming(
                "vnet-006", VIRTUAL_NETWORKS, "Virtual Network Name should comply with naming conventions", "vnet"
            ),
            rules.tags("vnet-007", VIRTUAL_NETWORKS, "Virtual Network should have tags"),
            rules.check(
                "vnet-009", VIRTUAL_NETWORKS, "Virtual Network should have at least two DNS servers assigned",
                "https://learn.microsoft.com/en-us/azure/virtual-network/virtual-networks-name-resolution-for-vms-and-role-instances?tabs=redhat#specify-dns-servers",
                Category.HIGH_AVAILABILITY, Impact.HIGH, dns_servers,
            ),
        )


class PublicIPScanner(NetworkScanner):
    key = "pip"
    types = [PUBLIC_IP_ADDRESSES]

    def list_resources(self):
        return self.pager(self.client.public_ip_addresses.list_all())

    def get_recommendations(self):
        return rules.rule_set(
            rules.sla("pip-003", PUBLIC_IP_ADDRESSES, "Public IP SLA", rules.SLA_URL, "99.99%"),
            rules.naming("pip-006", PUBLIC_IP_ADDRESSES, "Public IP Name should comply with naming conventions", "pip"),
            rules.tags("pip-007", PUBLIC_IP_ADDRESSES, "Public IP should have tags"),
        )


class PrivateEndpointScanner(NetworkScanner):
    key = "pep"
    types = [PRIVATE_ENDPOINTS]

    def list_resources(self):
        return self.pager(self.client.private_endpoints.list_by_subscription())

    def get_recommendations(self):
        return rules.rule_set(
            rules.sla("pep-003", PRIVATE_ENDPOINTS, "Private Endpoint SLA", rules.SLA_URL, "99.99%"),
            rules.naming(
                "pep-006", PRIVATE_ENDPOINTS, "Private Endpoint Name should comply with naming conventions", "pep"
            ),
            rules.tags("pep-007", PRIVATE_ENDPOINTS, "Private Endpoint should have tags"),
        )
