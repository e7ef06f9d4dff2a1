"""Configuration loader with YAML parsing and environment variable substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional
from .models import ExporterConfig
from .settings import Settings


class ConfigLoader:
    """Load and validate exporter configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> ExporterConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ExporterConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        return ExporterConfig(**ConfigLoader._read_yaml(config_path))

    @staticmethod
    def from_sources(
        overrides: Optional[Dict[str, Any]] = None,
        config_path: Optional[str] = None
    ) -> ExporterConfig:
        """
        Merge configuration sources into one validated object.

        Precedence: explicit overrides (CLI flags) > YAML file > environment.
        Fields missing everywhere fall back to model defaults.

        Args:
            overrides: Values from the command line; None entries are ignored
            config_path: Optional YAML configuration file

        Returns:
            ExporterConfig: Validated configuration object
        """
        merged: Dict[str, Any] = dict(Settings.from_env())

        if config_path:
            merged.update(ConfigLoader._read_yaml(config_path))

        merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

        # Let pydantic report missing credentials as empty values
        merged.setdefault("token", "")
        merged.setdefault("org_name", "")

        return ExporterConfig(**merged)

    @staticmethod
    def _read_yaml(config_path: str) -> Dict[str, Any]:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        return ConfigLoader._substitute_env_vars(raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
