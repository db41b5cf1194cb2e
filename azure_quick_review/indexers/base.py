"""Shared behaviour for enrichment indexers"""

from abc import abstractmethod
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from azure.core.exceptions import HttpResponseError

from ..core.errors import error_code, is_permission_error, SKIPPABLE_ERROR_CODES
from ..core.interfaces import IIndexer
from ..core.models import ScannerConfig
from ..utils.logger import setup_logger


class Index(Mapping):
    """Read-only index keyed by lower-cased resource id

    A degraded index could not be built (missing permissions or an
    unregistered provider); it is empty and lookups behave as "not enriched".
    """

    def __init__(self, entries: Optional[Mapping[str, Any]] = None,
                 degraded: bool = False, reason: str = ""):
        self._entries: Dict[str, Any] = {k.lower(): v for k, v in (entries or {}).items()}
        self.degraded = degraded
        self.reason = reason

    def __getitem__(self, key: str) -> Any:
        return self._entries[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        state = f", degraded: {self.reason}" if self.degraded else ""
        return f"Index({len(self)} entries{state})"


class IndexerBase(IIndexer):
    """Builds one index per subscription, degrading on permission errors"""

    def __init__(self, client_factory: Optional[Callable[[ScannerConfig], Any]] = None):
        self.logger = setup_logger(self.__class__.__name__)
        self._client_factory = client_factory

    def client(self, config: ScannerConfig) -> Any:
        factory = self._client_factory or self.create_client
        return factory(config)

    @abstractmethod
    def create_client(self, config: ScannerConfig) -> Any:
        """Build the SDK client used for the listing"""
        pass

    @abstractmethod
    async def collect_entries(self, config: ScannerConfig) -> Mapping[str, Any]:
        """List and key the subscription's entries"""
        pass

    async def build(self, config: ScannerConfig) -> Index:
        try:
            entries = await self.collect_entries(config)
        except HttpResponseError as e:
            if not (is_permission_error(e) or error_code(e) in SKIPPABLE_ERROR_CODES):
                raise
            reason = error_code(e) or f"HTTP {e.status_code}"
            self.logger.warning(
                f"{self.name} index unavailable for subscription {config.subscription_id} ({reason}); "
                f"continuing without it"
            )
            return Index(degraded=True, reason=reason)

        self.logger.debug(f"{self.name} index for {config.subscription_id}: {len(entries)} entries")
        return Index(entries)
