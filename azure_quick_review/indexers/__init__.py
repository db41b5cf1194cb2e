"""Subscription-wide enrichment indexes"""

from .base import Index, IndexerBase
from .diagnostics import DiagnosticSettingsIndexer
from .private_endpoints import PrivateEndpointIndexer
from .public_ips import PublicIPIndexer


def default_indexers():
    return [DiagnosticSettingsIndexer(), PrivateEndpointIndexer(), PublicIPIndexer()]


__all__ = [
    "Index",
    "IndexerBase",
    "DiagnosticSettingsIndexer",
    "PrivateEndpointIndexer",
    "PublicIPIndexer",
    "default_indexers",
]
