"""Cosmos DB scanner"""

from azure.mgmt.cosmosdb import CosmosDBManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig

ACCOUNTS = "Microsoft.DocumentDB/databaseAccounts"


def _zone_redundancy(account):
    """Return (any location zone redundant, every location zone redundant, location count)"""
    locations = dig(account, "locations", default=[])
    flags = [bool(dig(location, "is_zone_redundant", default=False)) for location in locations]
    return any(flags), bool(flags) and all(flags), len(flags)


def availability_zones(account, ctx):
    any_zr, all_zr, count = _zone_redundancy(account)
    return not (any_zr and all_zr and count >= 2), ""


def account_sla(account) -> str:
    # Any zone redundant location lifts the SLA to 99.995%; every location
    # zone redundant across two or more regions gives 99.999%.
    any_zr, all_zr, count = _zone_redundancy(account)
    if any_zr and all_zr and count >= 2:
        return "99.999%"
    if any_zr:
        return "99.995%"
    return "99.99%"


class CosmosDBScanner(GenericScanner):
    key = "cosmos"
    types = [ACCOUNTS]

    def create_client(self, config):
        return CosmosDBManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.database_accounts.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "cosmos-001", ACCOUNTS, "CosmosDB should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/monitor-resource-logs",
            ),
            rules.check(
                "cosmos-002", ACCOUNTS, "CosmosDB should have availability zones enabled",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/high-availability",
                Category.HIGH_AVAILABILITY, Impact.HIGH, availability_zones,
            ),
            rules.sla(
                "cosmos-003", ACCOUNTS, "CosmosDB should have a SLA",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/high-availability#slas", account_sla,
            ),
            rules.private_endpoint_connections(
                "cosmos-004", ACCOUNTS, "CosmosDB should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/how-to-configure-private-endpoints",
            ),
            rules.naming("cosmos-006", ACCOUNTS, "CosmosDB Name should comply with naming conventions", "cosmos"),
            rules.tags("cosmos-007", ACCOUNTS, "CosmosDB should have tags"),
            rules.check(
                "cosmos-008", ACCOUNTS, "CosmosDB should have local authentication disabled",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/how-to-setup-rbac#disable-local-auth",
                Category.SECURITY, Impact.HIGH,
                lambda account, ctx: (not dig(account, "disable_local_auth", default=False), ""),
            ),
            rules.check(
                "cosmos-009", ACCOUNTS,
                "CosmosDB: disable write operations on metadata resources (databases, containers, throughput) via account keys",
                "https://learn.microsoft.com/en-us/azure/cosmos-db/role-based-access-control#set-via-arm-template",
                Category.SECURITY, Impact.HIGH,
                lambda account, ctx: (not dig(account, "disable_key_based_metadata_write_access", default=False), ""),
            ),
        )
