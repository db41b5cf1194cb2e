"""Key Vault scanner"""

from azure.mgmt.keyvault import KeyVaultManagementClient

from . import rules
from .base import GenericScanner, client_kwargs

VAULTS = "Microsoft.KeyVault/vaults"


class KeyVaultScanner(GenericScanner):
    key = "kv"
    types = [VAULTS]

    def create_client(self, config):
        return KeyVaultManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.vaults.list_by_subscription())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "kv-001", VAULTS, "Key Vault should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/key-vault/general/monitor-key-vault",
            ),
            rules.sla(
                "kv-003", VAULTS, "Key Vault should have a SLA",
                "https://www.azure.cn/en-us/support/sla/key-vault/", "99.99%",
            ),
            rules.naming("kv-006", VAULTS, "Key Vault Name should comply with naming conventions", "kv"),
            rules.tags("kv-007", VAULTS, "Key Vault should have tags"),
        )
