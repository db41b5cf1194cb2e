"""Storage account scanner"""

from azure.core.exceptions import HttpResponseError
from azure.mgmt.storage import StorageManagementClient

from . import rules
from .base import EnrichedTarget, GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value, get_resource_group_from_resource_id

ACCOUNTS = "Microsoft.Storage/storageAccounts"


def account_sla(account) -> str:
    sku = enum_value(dig(account, "sku", "name"))
    tier = enum_value(dig(account, "access_tier"))
    if "RAGRS" in sku and "Hot" in tier:
        return "99.99%"
    if "RAGRS" in sku:
        return "99.9%"
    if ("LRS" in sku or "ZRS" in sku or "GRS" in sku) and "Hot" in tier:
        return "99.9%"
    return "99%"


def soft_delete(target, ctx):
    # Accounts whose blob service properties could not be read are not reported
    properties = getattr(target, "blob_service_properties", None)
    if properties is None:
        return False, ""
    return not dig(properties, "container_delete_retention_policy", "enabled", default=False), ""


class StorageScanner(GenericScanner):
    key = "st"
    types = [ACCOUNTS]

    def create_client(self, config):
        return StorageManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.storage_accounts.list())

    async def enrich(self, account):
        try:
            properties = await self.call(
                self.client.blob_services.get_service_properties,
                get_resource_group_from_resource_id(dig(account, "id", default="")),
                dig(account, "name", default=""),
            )
        except HttpResponseError as e:
            self.logger.debug(f"Blob service properties unavailable for {dig(account, 'name')}: {e.message}")
            properties = None
        return EnrichedTarget(account, blob_service_properties=properties)

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "st-001", ACCOUNTS, "Storage should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/storage/blobs/monitor-blob-storage",
            ),
            rules.sla(
                "st-003", ACCOUNTS, "Storage should have a SLA",
                "https://www.azure.cn/en-us/support/sla/storage/", account_sla,
            ),
            rules.sku(
                "st-005", ACCOUNTS, "Storage SKU",
                "https://learn.microsoft.com/en-us/rest/api/storagerp/srp_sku_types",
            ),
            rules.naming("st-006", ACCOUNTS, "Storage Name should comply with naming conventions", "st"),
            rules.check(
                "st-007", ACCOUNTS, "Storage Account should use HTTPS only",
                "https://learn.microsoft.com/en-us/azure/storage/common/storage-require-secure-transfer",
                Category.SECURITY, Impact.HIGH,
                lambda account, ctx: (not dig(account, "enable_https_traffic_only", default=False), ""),
            ),
            rules.tags("st-008", ACCOUNTS, "Storage Account should have tags"),
            rules.check(
                "st-009", ACCOUNTS, "Storage Account should enforce TLS >= 1.2",
                "https://learn.microsoft.com/en-us/azure/storage/common/transport-layer-security-configure-minimum-version?tabs=portal",
                Category.SECURITY, Impact.LOW,
                lambda account, ctx: (enum_value(dig(account, "minimum_tls_version")) != "TLS1_2", ""),
            ),
            rules.check(
                "st-010", ACCOUNTS, "Storage Account should have immutable storage versioning enabled",
                "https://learn.microsoft.com/en-us/azure/well-architected/service-guides/storage-accounts/reliability",
                Category.DISASTER_RECOVERY, Impact.LOW,
                lambda account, ctx: (
                    not dig(account, "immutable_storage_with_versioning", "enabled", default=False), ""
                ),
            ),
            rules.check(
                "st-011", ACCOUNTS, "Storage Account should have soft delete enabled",
                "https://learn.microsoft.com/en-us/azure/well-architected/service-guides/storage-accounts/reliability",
                Category.DISASTER_RECOVERY, Impact.MEDIUM, soft_delete,
            ),
        )
