"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from admiro.domain.config.api import ApiConfig
from admiro.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation is
    performed at load time to fail fast on configuration errors.

    Attributes:
        api: API connection configuration
        retry: Retry logic configuration
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "api": {
                    "base_url": "https://api.admiro.example",
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
        },
    )
