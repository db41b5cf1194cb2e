"""PostgreSQL single server and flexible server scanners"""

from azure.mgmt.rdbms.postgresql import PostgreSQLManagementClient
from azure.mgmt.rdbms.postgresql_flexibleservers import (
    PostgreSQLManagementClient as PostgreSQLFlexibleManagementClient,
)

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

SERVERS = "Microsoft.DBforPostgreSQL/servers"
FLEXIBLE_SERVERS = "Microsoft.DBforPostgreSQL/flexibleServers"


class PostgreSQLScanner(GenericScanner):
    key = "psql"
    types = [SERVERS]

    def create_client(self, config):
        return PostgreSQLManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.servers.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "psql-001", SERVERS, "PostgreSQL should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/postgresql/single-server/concepts-server-logs#resource-logs",
            ),
            rules.sla(
                "psql-003", SERVERS, "PostgreSQL should have a SLA",
                "https://www.azure.cn/en-us/support/sla/postgresql/", "99.99%",
            ),
            rules.private_endpoint_connections(
                "psql-004", SERVERS, "PostgreSQL should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/postgresql/single-server/concepts-data-access-and-security-private-link",
            ),
            rules.naming("psql-006", SERVERS, "PostgreSQL Name should comply with naming conventions", "psql"),
            rules.tags("psql-007", SERVERS, "PostgreSQL should have tags"),
            rules.check(
                "psql-008", SERVERS, "PostgreSQL should enforce SSL",
                "https://learn.microsoft.com/en-us/azure/postgresql/single-server/concepts-ssl-connection-security#enforcing-tls-connections",
                Category.SECURITY, Impact.HIGH,
                lambda server, ctx: (enum_value(dig(server, "ssl_enforcement")) != "Enabled", ""),
            ),
            rules.check(
                "psql-009", SERVERS, "PostgreSQL should enforce TLS >= 1.2",
                "https://learn.microsoft.com/en-us/azure/postgresql/single-server/how-to-tls-configurations",
                Category.SECURITY, Impact.LOW,
                lambda server, ctx: (enum_value(dig(server, "minimal_tls_version")) != "TLS1_2", ""),
            ),
        )


def flexible_server_sla(server) -> str:
    mode = enum_value(dig(server, "high_availability", "mode"))
    if mode != "ZoneRedundant":
        return "99.9%"
    standby_zone = dig(server, "high_availability", "standby_availability_zone")
    if standby_zone == dig(server, "availability_zone"):
        return "99.95%"
    return "99.99%"


def public_access(server, ctx):
    access = enum_value(dig(server, "network", "public_network_access"))
    return access != "Disabled", ""


class PostgreSQLFlexibleScanner(GenericScanner):
    key = "psqlf"
    types = [FLEXIBLE_SERVERS]

    def create_client(self, config):
        return PostgreSQLFlexibleManagementClient(
            config.credential, config.subscription_id, **client_kwargs(config)
        )

    def list_resources(self):
        return self.pager(self.client.servers.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "psqlf-001", FLEXIBLE_SERVERS, "PostgreSQL should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/postgresql/flexible-server/howto-configure-and-access-logs",
            ),
            rules.sla(
                "psqlf-003", FLEXIBLE_SERVERS, "PostgreSQL should have a SLA",
                "https://learn.microsoft.com/en-us/azure/postgresql/flexible-server/concepts-compare-single-server-flexible-server",
                flexible_server_sla,
            ),
            rules.check(
                "psqlf-004", FLEXIBLE_SERVERS, "PostgreSQL should have private access enabled",
                "https://learn.microsoft.com/en-us/azure/postgresql/flexible-server/concepts-networking#private-access-vnet-integration",
                Category.SECURITY, Impact.HIGH, public_access,
            ),
            rules.naming("psqlf-006", FLEXIBLE_SERVERS, "PostgreSQL Name should comply with naming conventions", "psql"),
            rules.tags("psqlf-007", FLEXIBLE_SERVERS, "PostgreSQL should have tags"),
        )
