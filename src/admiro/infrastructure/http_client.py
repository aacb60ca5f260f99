"""Resilient HTTP client: retry with exponential backoff around a transport.

We keep retry logic centralized here so every caller gets the same policy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt

from admiro.domain.config.retry import RetryConfig
from admiro.domain.models.outcome import Outcome
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.request_log import log_outcome, log_request
from admiro.infrastructure.retry import RetryPredicate, create_wait, get_retry_predicate
from admiro.infrastructure.transport.base import Transport

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass
class _CallState:
    """Per-call retry bookkeeping; never shared between logical calls"""

    descriptor: RequestDescriptor
    attempts: int = 0


def _return_last_outcome(retry_state: RetryCallState) -> Outcome:
    # Retries exhausted: hand back the final failure unchanged
    return retry_state.outcome.result()


class ResilientClient(Transport):
    """Drop-in transport wrapper that retries failed requests.

    A failed attempt is retried after `base_delay_ms * 2 ** (n - 1)`
    milliseconds, where n counts the failures so far, until `max_retries`
    retries have been spent. The caller receives the transport's outcome
    exactly as the transport produced it: the first success, or the last
    failure once retries run out.
    """

    def __init__(
        self,
        transport: Transport,
        retry_config: Optional[RetryConfig] = None,
        *,
        should_retry: Optional[RetryPredicate] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize resilient client

        Args:
            transport: Underlying transport used for every attempt
            retry_config: Retry configuration (defaults: 2 retries, 1000ms base delay)
            should_retry: Custom retry predicate; overrides retry_config.retry_policy
            sleep: Awaitable sleep used between attempts (seconds)
        """
        super().__init__()
        self.transport = transport
        self.retry_config = retry_config or RetryConfig()
        self.should_retry = should_retry or get_retry_predicate(self.retry_config.retry_policy)
        self._sleep = sleep
        self._wait = create_wait(self.retry_config)

    @property
    def max_attempts(self) -> int:
        return self.retry_config.max_retries + 1

    async def issue(self, descriptor: RequestDescriptor) -> Outcome:
        """Issue the request, retrying failures per the retry configuration

        Args:
            descriptor: Request to send; re-sent unchanged on every attempt

        Returns:
            First successful outcome, or the final failure
        """
        state = _CallState(descriptor)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_result(lambda outcome: self.should_retry(descriptor, outcome)),
            sleep=self._sleep,
            before_sleep=self._log_before_sleep(state),
            retry_error_callback=_return_last_outcome,
            reraise=True,
        )
        outcome = await retrying(self._attempt, state)
        if not outcome.ok:
            logger.error(
                f"{descriptor.method} {descriptor.url} failed after {state.attempts} "
                f"attempt(s): {outcome.detail}"
            )
        return outcome

    async def _attempt(self, state: _CallState) -> Outcome:
        state.attempts += 1
        log_request(state.descriptor, state.attempts)
        started = time.monotonic()
        outcome = await self.transport.issue(state.descriptor)
        log_outcome(state.descriptor, outcome, state.attempts, (time.monotonic() - started) * 1000)
        return outcome

    def _log_before_sleep(self, state: _CallState) -> Callable[[RetryCallState], None]:
        def _before_sleep(retry_state: RetryCallState) -> None:
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            logger.warning(
                f"Retrying {state.descriptor.method} {state.descriptor.url} "
                f"(attempt {retry_state.attempt_number}/{self.max_attempts} failed) "
                f"in {delay * 1000:.0f}ms..."
            )

        return _before_sleep

    async def aclose(self) -> None:
        await self.transport.aclose()
