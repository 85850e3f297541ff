"""
Configuration loader for shopify_gql.

This module handles loading configuration from configuration files and
environment variables.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import ShopifyConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("shopify_gql.yaml"),
            Path("shopify_gql.yml"),
            Path("shopify_gql.json"),
            Path.home() / ".shopify_gql" / "config.yaml",
            Path.home() / ".shopify_gql" / "config.yml",
            Path.home() / ".shopify_gql" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "SHOPIFY_"

        # Unprefixed names, read when the prefixed ones are unset
        self.fallback_env = {
            "API_URL": ("api_url",),
            "API_TOKEN": ("api_token",),
        }

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> ShopifyConfig:
        """
        Load configuration from all available sources.

        Environment variables override values read from the file.

        Args:
            config_file: Specific config file to load

        Returns:
            ShopifyConfig instance with merged configuration

        Raises:
            ConfigurationError: If the file cannot be read or the merged
                settings are missing or invalid
        """
        config_data: Dict[str, Any] = {}

        # Load from file
        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        # Load from environment variables
        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            return ShopifyConfig(**config_data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ConfigurationError(
                f"Invalid shopify_gql configuration ({fields})", errors=e.errors()
            ) from e

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            # Use specific file
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            return self._parse_config_file(config_path)

        # Search for config files
        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f) or {}
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must hold a mapping")

        logger.debug("Loaded configuration from %s", config_path)
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        # Map environment variables to config structure; the flag says
        # whether the value is type-converted
        env_mappings: Dict[str, Tuple[Tuple[str, ...], bool]] = {
            f"{self.env_prefix}API_URL": (("api_url",), False),
            f"{self.env_prefix}API_TOKEN": (("api_token",), False),
            f"{self.env_prefix}TIMEOUT": (("timeout",), True),
            f"{self.env_prefix}USER_AGENT": (("user_agent",), False),
            # Logging
            f"{self.env_prefix}LOG_LEVEL": (("logging", "level"), False),
            f"{self.env_prefix}LOG_FORMAT": (("logging", "format"), False),
            f"{self.env_prefix}LOG_STRUCTURED": (("logging", "enable_structured"), True),
        }
        for env_var, config_path in self.fallback_env.items():
            if os.getenv(f"{self.env_prefix}{env_var}") is None:
                env_mappings[env_var] = (config_path, False)

        for env_var, (config_path, convert) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value) if convert else value

                # Set nested configuration value
                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        # Boolean values
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        # Numeric values
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # String value
        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
