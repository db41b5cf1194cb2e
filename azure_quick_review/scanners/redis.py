"""Azure Cache for Redis scanner"""

from azure.mgmt.redis import RedisManagementClient

from . import rules
from .base import GenericScanner, client_kwargs
from ..core.models import Category, Impact
from ..core.resource_id import dig, enum_value

CACHES = "Microsoft.Cache/Redis"


class RedisScanner(GenericScanner):
    key = "redis"
    types = [CACHES]

    def create_client(self, config):
        return RedisManagementClient(config.credential, config.subscription_id, **client_kwargs(config))

    def list_resources(self):
        return self.pager(self.client.redis.list_by_subscription())

    def get_recommendations(self):
        return rules.rule_set(
            rules.diagnostics(
                "redis-001", CACHES, "Redis should have diagnostic settings enabled",
                "https://learn.microsoft.com/en-us/azure/azure-cache-for-redis/cache-monitor-diagnostic-settings",
            ),
            rules.check(
                "redis-002", CACHES, "Redis should have availability zones enabled",
                "https://learn.microsoft.com/en-us/azure/azure-cache-for-redis/cache-high-availability",
                Category.HIGH_AVAILABILITY, Impact.HIGH,
                lambda cache, ctx: (not dig(cache, "zones"), ""),
            ),
            rules.sla("redis-003", CACHES, "Redis should have a SLA", rules.SLA_URL, "99.9%"),
            rules.private_endpoint_connections(
                "redis-004", CACHES, "Redis should have private endpoints enabled",
                "https://learn.microsoft.com/en-us/azure/azure-cache-for-redis/cache-private-link",
            ),
            rules.sku("redis-005", CACHES, "Redis SKU", "https://azure.microsoft.com/en-gb/pricing/details/cache/"),
            rules.naming("redis-006", CACHES, "Redis Name should comply with naming conventions", "redis"),
            rules.tags("redis-007", CACHES, "Redis should have tags"),
            rules.check(
                "redis-008", CACHES, "Redis should not enable non SSL ports",
                "https://learn.microsoft.com/en-us/azure/azure-cache-for-redis/cache-configure#access-ports",
                Category.SECURITY, Impact.HIGH,
                lambda cache, ctx: (bool(dig(cache, "enable_non_ssl_port", default=False)), ""),
            ),
            rules.check(
                "redis-009", CACHES, "Redis should enforce TLS >= 1.2",
                "https://learn.microsoft.com/en-us/azure/azure-cache-for-redis/cache-remove-tls-10-11",
                Category.SECURITY, Impact.LOW,
                lambda cache, ctx: (enum_value(dig(cache, "minimum_tls_version")) != "1.2", ""),
            ),
        )
