"""Configuration manager for loading and validating .admiro.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from admiro.domain.config import ApiConfig, AppConfig, RetryConfig, normalize_retry_dict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".admiro.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .admiro.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .admiro.yml file (searched from current directory upwards)
    3. Environment variables (ADMIRO_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "api": {
            "base_url": "http://localhost:8000",
            "timeout": 15.0,
            "transport": "httpx",
            "token": None,
        },
        "retry": {
            "max_retries": 2,
            "base_delay_ms": 1000,
            "max_delay_ms": None,
            "retry_policy": "all",
        },
    }

    # env var -> (section, key)
    ENV_OVERRIDES = {
        "ADMIRO_API_URL": ("api", "base_url"),
        "ADMIRO_API_TOKEN": ("api", "token"),
        "ADMIRO_TRANSPORT": ("api", "transport"),
        "ADMIRO_MAX_RETRIES": ("retry", "max_retries"),
        "ADMIRO_BASE_DELAY_MS": ("retry", "base_delay_ms"),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .admiro.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .admiro.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be read or parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping at the top level")
            if isinstance(file_config.get("retry"), dict):
                file_config["retry"] = normalize_retry_dict(file_config["retry"])
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply ADMIRO_* environment variable overrides

        Values are passed as strings; Pydantic coerces numeric fields.
        """
        for env_name, (section, key) in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config.setdefault(section, {})[key] = value
                logger.debug(f"Config {section}.{key} overridden by {env_name}")
        return config

    def get_api_config(self) -> ApiConfig:
        """Get API connection configuration"""
        return self.config.api

    def get_retry_config(self) -> RetryConfig:
        """Get retry configuration"""
        return self.config.retry

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.max_retries" or "api")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
