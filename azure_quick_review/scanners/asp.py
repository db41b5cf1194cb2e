"""App Service plan, web app, function app and logic app scanners"""

from typing import List

from azure.mgmt.web import WebSiteManagementClient

from . import rules
from .base import EnrichedTarget, GenericScanner, client_kwargs
from ..core.models import Category, Impact, ScanContext, ServiceResult
from ..core.pager import collect
from ..core.resource_id import dig, enum_value, get_resource_group_from_resource_id

PLANS = "Microsoft.Web/serverFarms"
SITES = "Microsoft.Web/sites"

FUNCTION_KINDS = ("functionapp,linux", "functionapp")
LOGIC_KINDS = ("functionapp,workflowapp",)

VNET_URL = "https://learn.microsoft.com/en-us/azure/app-service/overview-vnet-integration"
TLS_URL = "https://learn.microsoft.com/en-us/azure/app-service/overview-tls"
HTTPS_URL = "https://learn.microsoft.com/azure/app-service/configure-ssl-bindings#enforce-https"
REMOTE_DEBUGGING_URL = "https://learn.microsoft.com/en-us/visualstudio/debugger/remote-debugging-azure-app-service?view=vs-2022#enable-remote-debugging"
AFFINITY_URL = "https://learn.microsoft.com/en-us/azure/well-architected/service-guides/azure-app-service/reliability#checklist"
IDENTITY_URL = "https://learn.microsoft.com/en-us/azure/app-service/overview-managed-identity?tabs=portal%2Chttp"


def plan_sla(plan) -> str:
    tier = enum_value(dig(plan, "sku", "tier"))
    if tier in ("Free", "Shared"):
        return "None"
    return "99.95%"


class AppServicePlanScanner(GenericScanner):
    key = "asp"
    types = [PLANS]

    def create_client(self, config):
        return WebSiteManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.app_service_plans.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "asp-001", PLANS, "Plan should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/app-service/troubleshoot-diagnostic-logs#send-logs-to-azure-monitor",
            ),
            rules.check(
                "asp-002", PLANS, "Plan should have availability zones enabled",
                "https://learn.microsoft.com/en-us/azure/reliability/migrate-app-service",
                Category.HIGH_AVAILABILITY, Impact.HIGH,
                lambda plan, ctx: (not dig(plan, "zone_redundant", default=False), ""),
            ),
            rules.sla(
                "asp-003", PLANS, "Plan should have a SLA",
                "https://www.azure.cn/en-us/support/sla/app-service/", plan_sla,
            ),
            rules.sku(
                "asp-005", PLANS, "Plan SKU",
                "https://learn.microsoft.com/en-us/azure/app-service/overview-hosting-plans",
            ),
            rules.naming("asp-006", PLANS, "Plan Name should comply with naming conventions", "asp"),
            rules.tags("asp-007", PLANS, "Plan should have tags"),
        )


def site_kind(site) -> str:
    kind = (dig(site, "kind", default="") or "").lower()
    if kind in FUNCTION_KINDS:
        return "func"
    if kind in LOGIC_KINDS:
        return "logic"
    return "app"


def https_only(site, ctx):
    return not dig(site, "https_only", default=False), ""


def vnet_integration(site, ctx):
    return not dig(site, "virtual_network_subnet_id"), ""


def vnet_route_all(site, ctx):
    return not dig(site, "vnet_route_all_enabled", default=False), ""


def min_tls(site, ctx):
    return enum_value(dig(site, "site_config", "min_tls_version")) != "1.2", ""


def remote_debugging(site, ctx):
    return dig(site, "site_config", "remote_debugging_enabled", default=True) is not False, ""


def insecure_ftp(site, ctx):
    state = enum_value(dig(site, "site_config", "ftps_state"))
    return state in ("", "AllAllowed"), ""


def always_on(site, ctx):
    return not dig(site, "site_config", "always_on", default=False), ""


def client_affinity(site, ctx):
    return bool(dig(site, "client_affinity_enabled", default=False)), ""


def managed_identity(site, ctx):
    config = dig(site, "site_config")
    ok = (
        dig(config, "managed_service_identity_id") is not None
        or dig(config, "x_managed_service_identity_id") is not None
    )
    return not ok, ""


class SiteScanner(GenericScanner):
    """Web sites of one kind; site configuration is fetched per site"""

    kind: str = ""
    label: str = ""
    caf_prefix: str = ""
    types = [SITES]

    def create_client(self, config):
        return WebSiteManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        # each site plugin lists the subscription's sites itself and keeps its own kind,
        # so plugins stay independent at the cost of one listing per plugin
        return self.pager(self.client.web_apps.list())

    async def scan(self, scan_context: ScanContext) -> List[ServiceResult]:
        self.log_subscription_scan(SITES)
        sites = await collect(self.list_resources(), self.config.cancel)
        recommendations = self.get_recommendations()

        results = []
        for site in sites:
            if site_kind(site) != self.kind:
                continue
            target = await self.enrich(site)
            results.append(self.service_result(
                site, self.engine.evaluate(recommendations, target, scan_context)
            ))
        return results

    async def enrich(self, site):
        config = await self.call(
            self.client.web_apps.get_configuration,
            get_resource_group_from_resource_id(dig(site, "id", default="")),
            dig(site, "name", default=""),
        )
        return EnrichedTarget(site, site_config=config)

    def common_recommendations(self, diagnostics_url: str, private_endpoint_url: str):
        k, label = self.key, self.label
        return [
            rules.diagnostics(f"{k}-001", SITES, f"{label} should have diagnostic settings enabled", diagnostics_url),
            rules.private_endpoint_index(
                f"{k}-004", SITES, f"{label} should have private endpoints enabled", private_endpoint_url
            ),
            rules.naming(f"{k}-006", SITES, f"{label} Name should comply with naming conventions", self.caf_prefix),
            rules.check(f"{k}-007", SITES, f"{label} should use HTTPS only", HTTPS_URL,
                        Category.SECURITY, Impact.HIGH, https_only),
            rules.tags(f"{k}-008", SITES, f"{label} should have tags"),
            rules.check(f"{k}-009", SITES, f"{label} should use VNET integration", VNET_URL,
                        Category.SECURITY, Impact.MEDIUM, vnet_integration),
            rules.check(f"{k}-010", SITES, f"{label} should have VNET Route all enabled for VNET integration",
                        VNET_URL, Category.SECURITY, Impact.MEDIUM, vnet_route_all),
        ]


class AppServiceScanner(SiteScanner):
    key = "app"
    kind = "app"
    label = "App Service"
    caf_prefix = "app"

    def get_recommendations(self):
        return rules.rule_set(
            *self.common_recommendations(
                "https://learn.microsoft.com/en-us/azure/app-service/troubleshoot-diagnostic-logs#send-logs-to-azure-monitor",
                "https://learn.microsoft.com/en-us/azure/app-service/networking/private-endpoint",
            ),
            rules.check("app-011", SITES, "App Service should use TLS 1.2", TLS_URL,
                        Category.SECURITY, Impact.HIGH, min_tls),
            rules.check("app-012", SITES, "App Service remote debugging should be disabled", REMOTE_DEBUGGING_URL,
                        Category.SECURITY, Impact.HIGH, remote_debugging),
            rules.check("app-013", SITES, "App Service should not allow insecure FTP",
                        "https://learn.microsoft.com/en-us/azure/app-service/deploy-ftp?tabs=portal",
                        Category.SECURITY, Impact.HIGH, insecure_ftp),
            rules.check("app-014", SITES, "App Service should have Always On enabled",
                        "https://learn.microsoft.com/en-us/azure/app-service/configure-common?tabs=portal",
                        Category.SCALABILITY, Impact.HIGH, always_on),
            rules.check("app-015", SITES, "App Service should avoid using Client Affinity", AFFINITY_URL,
                        Category.HIGH_AVAILABILITY, Impact.MEDIUM, client_affinity),
            rules.check("app-016", SITES, "App Service should use Managed Identities", IDENTITY_URL,
                        Category.SECURITY, Impact.MEDIUM, managed_identity),
        )


class FunctionAppScanner(SiteScanner):
    key = "func"
    kind = "func"
    label = "Function"
    caf_prefix = "func"

    def get_recommendations(self):
        return rules.rule_set(
            *self.common_recommendations(
                "https://learn.microsoft.com/en-us/azure/azure-functions/functions-monitor-log-analytics?tabs=csharp",
                "https://learn.microsoft.com/en-us/azure/azure-functions/functions-create-vnet",
            ),
            *_function_runtime_recommendations(self.key, self.label),
        )


class LogicAppScanner(SiteScanner):
    key = "logics"
    kind = "logic"
    label = "Logic App"
    caf_prefix = "logic"

    def get_recommendations(self):
        return rules.rule_set(
            *self.common_recommendations(
                "https://learn.microsoft.com/en-us/azure/logic-apps/monitor-workflows-collect-diagnostic-data",
                "https://learn.microsoft.com/en-us/azure/logic-apps/secure-single-tenant-workflow-virtual-network-private-endpoint",
            ),
            *_function_runtime_recommendations(self.key, self.label),
        )


def _function_runtime_recommendations(k: str, label: str):
    return [
        rules.check(f"{k}-011", SITES, f"{label} should use TLS 1.2", TLS_URL,
                    Category.SECURITY, Impact.MEDIUM, min_tls),
        rules.check(f"{k}-012", SITES, f"{label} remote debugging should be disabled", REMOTE_DEBUGGING_URL,
                    Category.SECURITY, Impact.MEDIUM, remote_debugging),
        rules.check(f"{k}-013", SITES, f"{label} should avoid using Client Affinity", AFFINITY_URL,
                    Category.HIGH_AVAILABILITY, Impact.MEDIUM, client_affinity),
        rules.check(f"{k}-014", SITES, f"{label} should use Managed Identities", IDENTITY_URL,
                    Category.SECURITY, Impact.MEDIUM, managed_identity),
    ]
