"""
Configuration loading and validation for MySQL Data Dumper.
"""

import os
import re
from typing import Any

import yaml

from .models import DumpOptions


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
    REQUIRED_CONNECTION_KEYS = ('host', 'user')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self) -> dict[str, Any]:
        """Get source database connection settings."""
        settings = self.config.get('connection', {})
        missing = [key for key in self.REQUIRED_CONNECTION_KEYS if not settings.get(key)]
        if missing:
            raise ValueError(f"Connection setting(s) missing from configuration: {', '.join(missing)}")
        return settings

    def get_dump_settings(self) -> dict[str, Any]:
        """Get the raw dump section (options plus table selection)."""
        return self.config.get('dump', {})

    def get_dump_options(self, overrides: dict[str, Any] | None = None) -> DumpOptions:
        """Build DumpOptions from the dump section, with optional overrides."""
        return DumpOptions.from_configs(self.get_dump_settings(), overrides or {})

    def get_tables_config(self) -> Any:
        """Get the table selection: '*' or a list of table names."""
        return self.get_dump_settings().get('tables', '*')

    def get_exclude_patterns(self) -> list[str]:
        return self.get_dump_settings().get('exclude_tables', [])

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
