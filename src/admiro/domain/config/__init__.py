"""Configuration models with Pydantic validation."""

from admiro.domain.config.api import ApiConfig
from admiro.domain.config.app import AppConfig
from admiro.domain.config.retry import RetryConfig, normalize_retry_dict, retry_config_from_dict

__all__ = [
    "AppConfig",
    "ApiConfig",
    "RetryConfig",
    "normalize_retry_dict",
    "retry_config_from_dict",
]
