"""Event Hub and Service Bus namespace scanners"""

from azure.mgmt.eventhub import EventHubManagementClient
from azure.mgmt.servicebus import ServiceBusManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

EVENT_HUB_NAMESPACES = "Microsoft.EventHub/namespaces"
SERVICE_BUS_NAMESPACES = "Microsoft.ServiceBus/namespaces"


def local_auth_enabled(namespace, ctx):
    return not dig(namespace, "disable_local_auth", default=False), ""


def event_hub_sla(namespace) -> str:
    sku = enum_value(dig(namespace, "sku", "name"))
    if "Basic" not in sku and "Standard" not in sku:
        return "99.99%"
    return "99.95%"


def service_bus_sla(namespace) -> str:
    if "Premium" in enum_value(dig(namespace, "sku", "name")):
        return "99.95%"
    return "99.9%"


class EventHubScanner(GenericScanner):
    key = "evh"
    types = [EVENT_HUB_NAMESPACES]

    def create_client(self, config):
        return EventHubManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.namespaces.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "evh-001", EVENT_HUB_NAMESPACES, "Event Hub Namespace should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/event-hubs/monitor-event-hubs#collection-and-routing",
            ),
            rules.sla(
                "evh-003", EVENT_HUB_NAMESPACES, "Event Hub Namespace should have a SLA",
                "https://www.azure.cn/en-us/support/sla/event-hubs/", event_hub_sla,
            ),
            rules.private_endpoint_connections(
                "evh-004", EVENT_HUB_NAMESPACES, "Event Hub Namespace should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/event-hubs/network-security",
            ),
            rules.naming(
                "evh-006", EVENT_HUB_NAMESPACES,
                "Event Hub Namespace Name should comply with naming conventions", "evh",
            ),
            rules.tags("evh-007", EVENT_HUB_NAMESPACES, "Event Hub should have tags"),
            rules.check(
                "evh-008", EVENT_HUB_NAMESPACES, "Event Hub should have local authentication disabled",
                "https://learn.microsoft.com/en-us/azure/event-hubs/authorize-access-event-hubs#shared-access-signatures",
                Category.SECURITY, Impact.MEDIUM, local_auth_enabled,
            ),
        )


class ServiceBusScanner(GenericScanner):
    key = "sb"
    types = [SERVICE_BUS_NAMESPACES]

    def create_client(self, config):
        return ServiceBusManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.namespaces.list())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "sb-001", SERVICE_BUS_NAMESPACES, "Service Bus should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/service-bus-messaging/monitor-service-bus#collection-and-routing",
            ),
            rules.sla(
                "sb-003", SERVICE_BUS_NAMESPACES, "Service Bus should have a SLA",
                "https://www.azure.cn/en-us/support/sla/service-bus/", service_bus_sla,
            ),
            rules.private_endpoint_connections(
                "sb-004", SERVICE_BUS_NAMESPACES, "Service Bus should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/service-bus-messaging/network-security",
            ),
            rules.naming(
                "sb-006", SERVICE_BUS_NAMESPACES, "Service Bus Name should comply with naming conventions", "sb"
            ),
            rules.tags("sb-007", SERVICE_BUS_NAMESPACES, "Service Bus should have tags"),
            rules.check(
                "sb-008", SERVICE_BUS_NAMESPACES, "Service Bus should have local authentication disabled",
                "https://learn.microsoft.com/en-us/azure/service-bus-messaging/service-bus-sas",
                Category.SECURITY, Impact.MEDIUM, local_auth_enabled,
            ),
        )
