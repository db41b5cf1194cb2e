"""In-memory fakes for upstream clients and plugins"""

from types import SimpleNamespace

from azure.core.exceptions import HttpResponseError

from azure_quick_review.core.pager import ListPager
from azure_quick_review.core.registry import ScannerRegistry
from azure_quick_review.scanners import rules
from azure_quick_review.scanners.base import GenericScanner

SUB_ID = "00000000-0000-0000-0000-000000000001"
OTHER_SUB_ID = "00000000-0000-0000-0000-000000000002"
VAULTS = "Microsoft.KeyVault/vaults"

AZQR_VARIABLES = [
    "AZQR_SUBSCRIPTION_IDS", "AZQR_RESOURCE_GROUPS", "AZQR_SERVICES", "AZQR_FILTERS_FILE",
    "AZQR_PARALLEL_WORKERS", "AZQR_PLUGIN_WORKERS", "AZQR_OUTPUT_FORMAT", "AZQR_OUTPUT_FILE",
    "AZQR_MASK_SUBSCRIPTIONS",
]


def vault(name, sub=SUB_ID, rg="rg", **attrs):
    return SimpleNamespace(
        id=f"/subscriptions/{sub}/resourceGroups/{rg}/providers/Microsoft.KeyVault/vaults/{name}",
        name=name,
        type=VAULTS,
        location="westeurope",
        **attrs,
    )


def upstream_error(code=None, status_code=None, message="upstream failure"):
    err = HttpResponseError(message=message)
    err.error = SimpleNamespace(code=code) if code else None
    err.status_code = status_code
    return err


class FakeVaultScanner(GenericScanner):
    """Key vault shaped plugin over in-memory pages"""

    key = "kv"
    types = [VAULTS]

    def __init__(self, pages=None, error=None, on_scan=None):
        super().__init__()
        self.pages = pages or []
        self.error = error
        self.on_scan = on_scan

    def create_client(self, config):
        return None

    def list_resources(self):
        if self.error is not None:
            raise self.error
        if self.on_scan is not None:
            self.on_scan(self.config)
        return ListPager(self.pages)

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics("kv-001", VAULTS, "Key Vault should have diagnostic settings enabled", "https://x"),
            rules.tags("kv-002", VAULTS, "Key Vault should have tags"),
            rules.sla("kv-003", VAULTS, "Key Vault should have a SLA", "https://x", "99.99%"),
        )


def registry_of(**plugins):
    registry = ScannerRegistry()
    for key, group in plugins.items():
        for plugin in group:
            registry.register(key, plugin)
    return registry
