"""Registry of scanner plugins keyed by scanner key"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import ConfigurationError
from .interfaces import IScannerPlugin
from .models import Recommendation
from ..utils.logger import setup_logger


@dataclass(frozen=True)
class ScannerInfo:
    """Summary of a scanner key"""
    key: str
    resource_types: List[str]
    scanner_count: int


class ScannerRegistry:
    """Maps scanner keys to ordered lists of plugins

    Populated once by build_registry before any scan starts; read-only after.
    """

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)
        self._plugins: Dict[str, List[IScannerPlugin]] = {}

    def register(self, key: str, plugin: IScannerPlugin) -> None:
        """Append a plugin under key"""
        self._plugins.setdefault(key, []).append(plugin)
        self.logger.debug(f"Registered scanner: {key}/{plugin.__class__.__name__}")

    def keys(self) -> List[str]:
        return sorted(self._plugins)

    def lookup(self, key: str) -> List[IScannerPlugin]:
        return list(self._plugins.get(key, []))

    def resolve(self, keys: Optional[Iterable[str]] = None) -> Dict[str, List[IScannerPlugin]]:
        """Plugins for the given keys in sorted key order; all keys when none are given"""

        selected = sorted({k.strip().lower() for k in (keys or []) if k and k.strip()})
        if not selected:
            selected = self.keys()

        unknown = [k for k in selected if k not in self._plugins]
        if unknown:
            raise ConfigurationError(
                f"Unknown scanner key(s): {', '.join(unknown)}. Available: {', '.join(self.keys())}"
            )
        return {key: self.lookup(key) for key in selected}

    def scanner_info(self) -> List[ScannerInfo]:
        info = []
        for key in self.keys():
            plugins = self._plugins[key]
            types: List[str] = []
            for plugin in plugins:
                for resource_type in plugin.resource_types():
                    if resource_type not in types:
                        types.append(resource_type)
            info.append(ScannerInfo(key=key, resource_types=types, scanner_count=len(plugins)))
        return info

    def all_recommendations(self) -> Dict[str, Recommendation]:
        """Every recommendation across all plugins keyed by id"""
        combined: Dict[str, Recommendation] = {}
        for key in self.keys():
            for plugin in self._plugins[key]:
                combined.update(plugin.all_recommendations())
        return combined

    def validate(self) -> None:
        """Recommendation ids must be unique and carry their plugin's prefix"""

        owners: Dict[str, str] = {}
        for key in self.keys():
            for plugin in self._plugins[key]:
                name = plugin.__class__.__name__
                prefixes = tuple(f"{p}-" for p in plugin.recommendation_prefixes())
                for rec_id, rec in plugin.all_recommendations().items():
                    if rec_id != rec.id:
                        raise ValueError(f"{name}: recommendation keyed {rec_id} declares id {rec.id}")
                    if not rec_id.startswith(prefixes):
                        raise ValueError(f"{name}: recommendation {rec_id} does not start with {prefixes}")
                    if rec_id in owners:
                        raise ValueError(
                            f"Duplicate recommendation id {rec_id} in {name} and {owners[rec_id]}"
                        )
                    owners[rec_id] = name


PluginFactory = Callable[[], IScannerPlugin]


def build_registry(catalogue: Optional[Mapping[str, Sequence[PluginFactory]]] = None) -> ScannerRegistry:
    """Construct every plugin of the catalogue and return a validated registry"""

    if catalogue is None:
        from ..scanners import SCANNER_CATALOGUE
        catalogue = SCANNER_CATALOGUE

    registry = ScannerRegistry()
    for key, factories in catalogue.items():
        for factory in factories:
            registry.register(key, factory())
    registry.validate()
    return registry
