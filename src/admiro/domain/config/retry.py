"""Retry configuration model."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

# camelCase keys used by the web client, plus older names
RETRY_KEY_ALIASES = {
    "maxRetries": "max_retries",
    "retries": "max_retries",
    "baseDelayMs": "base_delay_ms",
    "retry_delay_ms": "base_delay_ms",
    "maxDelayMs": "max_delay_ms",
    "retryPolicy": "retry_policy",
}


class RetryConfig(BaseModel):
    """Configuration for request retry logic.

    Attributes:
        max_retries: Retries after the first attempt (0 = never retry)
        base_delay_ms: Delay before the first retry; doubles on each further retry
        max_delay_ms: Optional cap on a single delay (None = uncapped)
        retry_policy: "all" retries every failure, "safe" only idempotent
            requests that failed on the network, with 429 or with 5xx
    """

    max_retries: int = Field(2, ge=0)
    base_delay_ms: int = Field(1000, gt=0)
    max_delay_ms: Optional[int] = Field(None, gt=0)
    retry_policy: Literal["all", "safe"] = "all"


def normalize_retry_dict(config: Dict[str, Any]) -> Dict[str, Any]:
    """Rename alias keys to RetryConfig field names.

    A field name given explicitly wins over any of its aliases; among
    aliases the first one seen wins. Values are left for Pydantic to validate.
    """
    result: Dict[str, Any] = {}
    for key, value in config.items():
        canonical = RETRY_KEY_ALIASES.get(key)
        if canonical is None:
            result[key] = value
        elif canonical not in config:
            result.setdefault(canonical, value)
    return result


def retry_config_from_dict(config: Dict[str, Any]) -> RetryConfig:
    """Build a RetryConfig from a dict that may use alias keys

    Raises:
        pydantic.ValidationError: If any value is invalid
    """
    return RetryConfig(**normalize_retry_dict(config))
