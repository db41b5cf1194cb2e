"""AKS managed cluster scanner"""

from azure.mgmt.containerservice import ContainerServiceClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

CLUSTERS = "Microsoft.ContainerService/managedClusters"


def cluster_sla(cluster) -> str:
    pools = dig(cluster, "agent_pool_profiles", default=[])
    zones = all(len(dig(pool, "availability_zones", default=[])) > 1 for pool in pools)
    tier = enum_value(dig(cluster, "sku", "tier")) or "Free"
    if "Free" in tier:
        return "None"
    return "99.95%" if zones else "99.9%"


def private_cluster(cluster, ctx):
    return not dig(cluster, "api_server_access_profile", "enable_private_cluster", default=False), ""


def aad_managed(cluster, ctx):
    return not dig(cluster, "aad_profile", "managed", default=False), ""


def rbac_enabled(cluster, ctx):
    return not dig(cluster, "enable_rbac", default=False), ""


def http_application_routing(cluster, ctx):
    addon = dig(cluster, "addon_profiles", "httpApplicationRouting")
    return bool(dig(addon, "enabled", default=False)), ""


def outbound_udr(cluster, ctx):
    outbound = enum_value(dig(cluster, "network_profile", "outbound_type"))
    return outbound != "userDefinedRouting", ""


def max_surge(cluster, ctx):
    # A pool without upgrade settings runs with the default surge of one node
    for pool in dig(cluster, "agent_pool_profiles", default=[]):
        surge = dig(pool, "upgrade_settings", "max_surge")
        if surge is None or surge == "1":
            return True, ""
    return False, ""


class AKSScanner(GenericScanner):
    key = "aks"
    types = [CLUSTERS]

    def create_client(self, config):
        return ContainerServiceClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.managed_clusters.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "aks-001", CLUSTERS, "AKS Cluster should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/aks/monitor-aks#collect-resource-logs",
            ),
            rules.sla(
                "aks-003", CLUSTERS, "AKS Cluster should have an SLA",
                "https://learn.microsoft.com/en-us/azure/aks/free-standard-pricing-tiers#uptime-sla-terms-and-conditions",
                cluster_sla,
            ),
            rules.check(
                "aks-004", CLUSTERS, "AKS Cluster should be private",
                "https://learn.microsoft.com/en-us/azure/aks/private-clusters",
                Category.SECURITY, Impact.HIGH, private_cluster,
            ),
            rules.naming("aks-006", CLUSTERS, "AKS Name should comply with naming conventions", "aks"),
            rules.check(
                "aks-007", CLUSTERS, "AKS should integrate authentication with AAD (Managed)",
                "https://learn.microsoft.com/en-us/azure/aks/managed-azure-ad",
                Category.SECURITY, Impact.MEDIUM, aad_managed,
            ),
            rules.check(
                "aks-008", CLUSTERS, "AKS should be RBAC enabled.",
                "https://learn.microsoft.com/azure/aks/manage-azure-rbac",
                Category.SECURITY, Impact.MEDIUM, rbac_enabled,
            ),
            rules.check(
                "aks-010", CLUSTERS, "AKS should have httpApplicationRouting disabled",
                "https://learn.microsoft.com/azure/aks/http-application-routing",
                Category.SECURITY, Impact.MEDIUM, http_application_routing,
            ),
            rules.check(
                "aks-012", CLUSTERS, "AKS should have outbound type set to user defined routing",
                "https://learn.microsoft.com/azure/aks/limit-egress-traffic",
                Category.SECURITY, Impact.HIGH, outbound_udr,
            ),
            rules.tags("aks-015", CLUSTERS, "AKS should have tags"),
            rules.check(
                "aks-016", CLUSTERS, "AKS Node Pools should have MaxSurge set",
                "https://learn.microsoft.com/en-us/azure/aks/operator-best-practices-run-at-scale#cluster-upgrade-considerations-and-best-practices",
                Category.SCALABILITY, Impact.LOW, max_surge,
            ),
        )
