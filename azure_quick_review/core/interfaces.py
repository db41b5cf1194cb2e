"""Core interfaces for the Azure Quick Review system"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping

from .models import Recommendation, ScanContext, ScannerConfig, ScanReport, ServiceResult


class IScannerPlugin(ABC):
    """Interface for scanner plugins

    A plugin lists the resources of its types across a whole subscription and
    evaluates its own recommendation set on each of them.
    """

    # Prefix of every recommendation id the plugin owns
    key: str = ""

    @abstractmethod
    def resource_types(self) -> List[str]:
        """Return the ARM resource types covered by this plugin"""
        pass

    @abstractmethod
    def init(self, config: ScannerConfig) -> None:
        """Construct upstream clients; no I/O"""
        pass

    @abstractmethod
    def get_recommendations(self) -> Dict[str, Recommendation]:
        """Return the plugin's recommendation set"""
        pass

    @abstractmethod
    async def scan(self, scan_context: ScanContext) -> List[ServiceResult]:
        """List resources and evaluate recommendations on each"""
        pass

    def recommendation_prefixes(self) -> List[str]:
        """Id prefixes owned by this plugin"""
        return [self.key]

    def all_recommendations(self) -> Dict[str, Recommendation]:
        """Every recommendation the plugin can emit, child resources included"""
        return self.get_recommendations()


class IIndexer(ABC):
    """Interface for subscription-wide enrichment indexes"""

    # Name of the ScanContext index this indexer populates
    name: str = ""

    @abstractmethod
    async def build(self, config: ScannerConfig) -> Mapping[str, Any]:
        """Build the index for one subscription"""
        pass


class IResultSink(ABC):
    """Interface for result outputs"""

    @abstractmethod
    def write(self, report: ScanReport) -> None:
        """Write the scan report"""
        pass
