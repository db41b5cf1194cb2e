"""Azure SQL server scanner; also evaluates the databases of each server"""

from typing import List

from azure.mgmt.sql import SqlManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact, ScanContext, ServiceResult
from ..core.pager import collect
from ..core.resource_id import dig, enum_value, get_resource_group_from_resource_id

SERVERS = "Microsoft.Sql/servers"
DATABASES = "Microsoft.Sql/servers/databases"


def database_sla(database) -> str:
    zone_redundant = bool(dig(database, "zone_redundant", default=False))
    if zone_redundant and enum_value(dig(database, "sku", "tier")) == "Premium":
        return "99.995%"
    return "99.99%"


class SQLScanner(GenericScanner):
    key = "sql"
    types = [SERVERS, DATABASES]

    def recommendation_prefixes(self) -> List[str]:
        return ["sql", "sqldb"]

    def create_client(self, config):
        return SqlManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.servers.list())

    def list_databases(self, resource_group: str, server_name: str):
        return self.pager(self.client.databases.list_by_server(resource_group, server_name))

    async def scan(self, scan_context: ScanContext) -> List[ServiceResult]:
        self.log_subscription_scan(SERVERS)
        servers = await collect(self.list_resources(), self.config.cancel)
        server_rules = self.get_recommendations()
        database_rules = self.get_database_recommendations()

        results = []
        for server in servers:
            results.append(self.service_result(
                server, self.engine.evaluate(server_rules, server, scan_context)
            ))

            resource_group = get_resource_group_from_resource_id(dig(server, "id", default=""))
            databases = await collect(
                self.list_databases(resource_group, dig(server, "name", default="")), self.config.cancel
            )
            for database in databases:
                results.append(self.service_result(
                    database, self.engine.evaluate(database_rules, database, scan_context)
                ))
        return results

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "sql-001", SERVERS, "SQL should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/azure-sql/database/metrics-diagnostic-telemetry-logging-streaming-export-configure?view=azuresql&tabs=azure-portal",
            ),
            rules.private_endpoint_connections(
                "sql-004", SERVERS, "SQL should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/azure-sql/database/private-endpoint-overview?view=azuresql",
            ),
            rules.naming("sql-006", SERVERS, "SQL Name should comply with naming conventions", "sql"),
            rules.tags("sql-007", SERVERS, "SQL should have tags"),
            rules.check(
                "sql-008", SERVERS, "SQL should enforce TLS >= 1.2",
                "https://learn.microsoft.com/en-us/azure/azure-sql/database/connectivity-settings?view=azuresql&tabs=azure-portal#minimal-tls-version",
                Category.SECURITY, Impact.LOW,
                lambda server, ctx: (dig(server, "minimal_tls_version") != "1.2", ""),
            ),
        )

    def get_database_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "sqldb-001", DATABASES, "SQL Database should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/azure-sql/database/metrics-diagnostic-telemetry-logging-streaming-export-configure?view=azuresql&tabs=azure-portal",
            ),
            rules.check(
                "sqldb-002", DATABASES, "SQL Database should have availability zones enabled",
                "https://learn.microsoft.com/en-us/azure/azure-sql/database/high-availability-sla?view=azuresql&tabs=azure-powershell#zone-redundant-availability",
                Category.HIGH_AVAILABILITY, Impact.HIGH,
                lambda database, ctx: (not dig(database, "zone_redundant", default=False), ""),
            ),
            rules.sla(
                "sqldb-003", DATABASES, "SQL Database should have a SLA",
                "https://www.azure.cn/en-us/support/sla/sql-database/", database_sla,
            ),
            rules.sku(
                "sqldb-005", DATABASES, "SQL Database SKU",
                "https://docs.microsoft.com/en-us/azure/azure-sql/database/service-tiers-vcore?tabs=azure-portal",
            ),
            rules.naming("sqldb-006", DATABASES, "SQL Database Name should comply with naming conventions", "sqldb"),
            rules.tags("sqldb-007", DATABASES, "SQL Database should have tags"),
        )

    def all_recommendations(self):
        combined = dict(self.get_recommendations())
        combined.update(self.get_database_recommendations())
        return combined
