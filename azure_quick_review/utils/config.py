"""Configuration loading and management"""

import os
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.errors import ConfigurationError
from ..core.models import ScanConfiguration
from .logger import setup_logger

OUTPUT_FORMATS = ("table", "json", "csv")
INT_FIELDS = ("parallel_workers", "plugin_workers")
BOOL_FIELDS = ("mask_subscriptions",)
BOOL_TOKENS = ("true", "false", "1", "0", "yes", "no", "on", "off", "enabled", "disabled")
LIST_FIELDS = ("subscription_ids", "resource_groups", "services")


class ConfigurationLoader:
    """Load configuration from defaults, a YAML file, the environment and overrides"""

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)

    def load_configuration(self, config_file: Optional[str] = None, **overrides) -> ScanConfiguration:
        """Load configuration; later sources win"""

        config_dict = asdict(ScanConfiguration())

        if config_file:
            config_dict.update(self._load_from_file(config_file))

        config_dict.update(self._load_from_environment())
        config_dict.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(ScanConfiguration)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            self.logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        config = ScanConfiguration(**{k: v for k, v in config_dict.items() if k in known})
        self._validate_configuration(config)
        return config

    def _load_from_file(self, config_file: str) -> Dict[str, Any]:
        """Load configuration from a YAML file"""

        config_path = Path(config_file)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        if config_path.suffix.lower() not in ('.yml', '.yaml'):
            raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")

        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse configuration file {config_file}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file {config_file} must contain a mapping")

        self.logger.info(f"Loaded configuration from: {config_file}")
        return self._coerce_types(self._flatten_config(config_data), config_file)

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from AZQR_* environment variables"""

        env_mapping = {
            'AZQR_SUBSCRIPTION_IDS': ('subscription_ids', self._parse_list),
            'AZQR_RESOURCE_GROUPS': ('resource_groups', self._parse_list),
            'AZQR_SERVICES': ('services', self._parse_list),
            'AZQR_FILTERS_FILE': ('filters_file', str),
            'AZQR_PARALLEL_WORKERS': ('parallel_workers', int),
            'AZQR_PLUGIN_WORKERS': ('plugin_workers', int),
            'AZQR_OUTPUT_FORMAT': ('output_format', str),
            'AZQR_OUTPUT_FILE': ('output_file', str),
            'AZQR_MASK_SUBSCRIPTIONS': ('mask_subscriptions', self._parse_bool),
        }

        env_config = {}
        for env_var, (config_key, parser) in env_mapping.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                env_config[config_key] = parser(value)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_var}={value}: {e}") from e
            self.logger.debug(f"Loaded {config_key} from environment: {value}")

        return env_config

    def _flatten_config(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten nested configuration: {'output': {'format': 'json'}} -> {'output_format': 'json'}"""

        flattened = {}

        def _flatten(obj, parent_key=''):
            if isinstance(obj, dict):
                for key, value in obj.items():
                    new_key = f"{parent_key}_{key}" if parent_key else key
                    _flatten(value, new_key)
            else:
                flattened[parent_key] = obj

        _flatten(config_data)
        return flattened

    def _coerce_types(self, config_dict: Dict[str, Any], source: str) -> Dict[str, Any]:
        """Convert YAML scalars to the types ScanConfiguration declares"""

        coerced = dict(config_dict)
        for key, value in config_dict.items():
            if value is None:
                continue
            try:
                if key in INT_FIELDS:
                    if isinstance(value, bool):
                        raise ValueError("expected an integer")
                    coerced[key] = int(value)
                elif key in BOOL_FIELDS and not isinstance(value, bool):
                    if str(value).lower() not in BOOL_TOKENS:
                        raise ValueError("expected a boolean")
                    coerced[key] = self._parse_bool(str(value))
                elif key in LIST_FIELDS and isinstance(value, str):
                    coerced[key] = self._parse_list(value)
                elif key in LIST_FIELDS:
                    coerced[key] = [str(item) for item in value]
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid value for {key} in {source}: {value!r}") from e
        return coerced

    def _parse_list(self, value: str) -> List[str]:
        """Parse comma-separated string into list"""
        if not value.strip():
            return []
        return [item.strip() for item in value.split(',') if item.strip()]

    def _parse_bool(self, value: str) -> bool:
        """Parse string into boolean"""
        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _validate_configuration(self, config: ScanConfiguration) -> None:
        """Validate configuration values"""

        if config.parallel_workers < 1:
            raise ConfigurationError("Parallel workers must be at least 1")

        if config.plugin_workers < 1:
            raise ConfigurationError("Plugin workers must be at least 1")

        if config.plugin_workers > 20:
            self.logger.warning("High number of plugin workers may cause API throttling")

        if config.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unsupported output format: {config.output_format}. Use one of {', '.join(OUTPUT_FORMATS)}"
            )

        self.logger.debug("Configuration validation completed")
