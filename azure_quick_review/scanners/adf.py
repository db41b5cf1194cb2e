"""Data Factory scanner"""

from azure.mgmt.datafactory import DataFactoryManagementClient

from . import rules
from .base import GenericScanner, client_kwargs

FACTORIES = "Microsoft.DataFactory/factories"


class DataFactoryScanner(GenericScanner):
    key = "adf"
    types = [FACTORIES]

    def create_client(self, config):
        return DataFactoryManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.factories.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "adf-001", FACTORIES, "Azure Data Factory should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/data-factory/monitor-configure-diagnostics",
            ),
            rules.private_endpoint_index(
                "adf-002", FACTORIES, "Azure Data Factory should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/data-factory/data-factory-private-link",
            ),
            rules.sla("adf-003", FACTORIES, "Azure Data Factory SLA", rules.SLA_URL, "99.99%"),
            rules.naming(
                "adf-004", FACTORIES, "Azure Data Factory Name should comply with naming conventions", "adf"
            ),
            rules.tags("adf-005", FACTORIES, "Azure Data Factory should have tags"),
        )
