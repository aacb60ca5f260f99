"""Retry policies and backoff built on tenacity.

The resilient client asks a policy whether an outcome deserves another
attempt and uses `create_wait` for the delay between attempts.
"""

from __future__ import annotations

import logging
from typing import Callable

from tenacity import wait_exponential

from admiro.domain.config.retry import RetryConfig
from admiro.domain.models.outcome import Failure, FailureKind, Outcome
from admiro.domain.models.request import RequestDescriptor

logger = logging.getLogger(__name__)

RetryPredicate = Callable[[RequestDescriptor, Outcome], bool]


def _should_retry_status(status_code: int | None) -> bool:
    """Check if a failed response status is worth retrying."""
    # Don't retry on auth errors or most 4xx (except 429)
    if status_code in (401, 403):
        return False
    if status_code and 400 <= status_code < 500 and status_code != 429:
        return False
    # Retry on 429 and 5xx
    return True


def retry_any_failure(descriptor: RequestDescriptor, outcome: Outcome) -> bool:
    """Retry every failure, whatever the method or status."""
    return isinstance(outcome, Failure)


def retry_safe_failures(descriptor: RequestDescriptor, outcome: Outcome) -> bool:
    """Retry only idempotent requests that failed on the network, with 429 or 5xx."""
    if not isinstance(outcome, Failure):
        return False
    if not descriptor.is_idempotent:
        return False
    if outcome.kind == FailureKind.TRANSPORT:
        return True
    return _should_retry_status(outcome.status_code)


POLICIES = {
    "all": retry_any_failure,
    "safe": retry_safe_failures,
}


def get_retry_predicate(policy: str) -> RetryPredicate:
    """Look up a retry predicate by policy name

    Raises:
        ValueError: If the policy is unknown
    """
    try:
        return POLICIES[policy]
    except KeyError:
        available = ", ".join(POLICIES)
        raise ValueError(f"Unknown retry policy: {policy}. Available policies: {available}") from None


def create_wait(retry_config: RetryConfig) -> wait_exponential:
    """Build the backoff strategy: base_delay * 2 ** (failed_attempts - 1), no jitter.

    Delays are in seconds as tenacity expects.
    """
    base_delay = retry_config.base_delay_ms / 1000.0
    if retry_config.max_delay_ms is None:
        return wait_exponential(multiplier=base_delay, exp_base=2)
    return wait_exponential(multiplier=base_delay, exp_base=2, max=retry_config.max_delay_ms / 1000.0)
