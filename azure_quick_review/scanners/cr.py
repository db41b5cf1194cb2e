"""Container Registry scanner"""

from azure.mgmt.containerregistry import ContainerRegistryManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

REGISTRIES = "Microsoft.ContainerRegistry/registries"


def retention_policy(registry, ctx):
    status = enum_value(dig(registry, "policies", "retention_policy", "status"))
    return status.lower() != "enabled", ""


class ContainerRegistryScanner(GenericScanner):
    key = "cr"
    types = [REGISTRIES]

    def create_client(self, config):
        return ContainerRegistryManagementClient(
            config.credential, config.subscription_id, **client_kwargs(config)
        )

    def list_resources(self):
        return self.pager(self.client.registries.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "cr-001", REGISTRIES, "ContainerRegistry should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/container-registry/monitor-service",
            ),
            rules.sla(
                "cr-003", REGISTRIES, "ContainerRegistry should have a SLA",
                "https://www.azure.cn/en-us/support/sla/container-registry/", "99.95%",
            ),
            rules.private_endpoint_connections(
                "cr-004", REGISTRIES, "ContainerRegistry should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/container-registry/container-registry-private-link",
            ),
            rules.naming("cr-006", REGISTRIES, "ContainerRegistry Name should comply with naming conventions", "cr"),
            rules.check(
                "cr-008", REGISTRIES, "ContainerRegistry should have the Administrator account disabled",
                "https://learn.microsoft.com/azure/container-registry/container-registry-authentication-managed-identity",
                Category.SECURITY, Impact.MEDIUM,
                lambda registry, ctx: (bool(dig(registry, "admin_user_enabled", default=False)), ""),
            ),
            rules.tags("cr-009", REGISTRIES, "ContainerRegistry should have tags"),
            rules.check(
                "cr-010", REGISTRIES, "ContainerRegistry should use retention policies",
                "https://learn.microsoft.com/en-us/azure/container-registry/container-registry-retention-policy",
                Category.GOVERNANCE, Impact.MEDIUM, retention_policy,
            ),
        )
