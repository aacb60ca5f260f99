from __future__ import annotations

import asyncio
from collections import Counter

import pytest

from admiro.domain.config.retry import RetryConfig
from admiro.domain.models.outcome import Failure, FailureKind, Response, Success
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.http_client import ResilientClient
from admiro.infrastructure.transport.base import Transport
from admiro.infrastructure.transport.mock import ScriptedTransport


def _success(status_code: int = 200, url: str = "/api/displays") -> Success:
    return Success(Response(status_code=status_code, url=url, content=b'{"ok": true}'))


def _response_failure(status_code: int = 500) -> Failure:
    return Failure(
        FailureKind.RESPONSE,
        f"HTTP {status_code}",
        response=Response(status_code=status_code, url="/api/displays", content=b'{"error": "boom"}'),
    )


def _transport_failure() -> Failure:
    return Failure(FailureKind.TRANSPORT, "Network error: connection refused")


class SleepRecorder:
    """Stands in for asyncio.sleep and records requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


def _client(transport: Transport, sleeper: SleepRecorder, **retry) -> ResilientClient:
    return ResilientClient(transport, RetryConfig(**retry), sleep=sleeper)


GET_DISPLAYS = RequestDescriptor("GET", "/api/displays")


class TestRetryCounts:
    """Tests for the number of attempts issued"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_retries", [0, 1, 2, 5])
    async def test_permanent_failure_makes_n_plus_one_attempts(self, max_retries):
        """A transport that always fails is tried exactly max_retries + 1 times"""
        transport = ScriptedTransport(outcomes=[_response_failure(503)])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=max_retries).issue(GET_DISPLAYS)

        assert not outcome.ok
        assert transport.call_count == max_retries + 1
        assert len(sleeper.delays) == max_retries

    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [1, 2, 3])
    async def test_success_on_attempt_k_stops(self, k):
        """Success on attempt k ends the call with no further attempts"""
        script = [_transport_failure()] * (k - 1) + [_success()]
        transport = ScriptedTransport(outcomes=script)
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=2).issue(GET_DISPLAYS)

        assert outcome.ok
        assert transport.call_count == k
        assert len(sleeper.delays) == k - 1

    @pytest.mark.asyncio
    async def test_retry_count_has_no_upper_cap(self):
        """max_retries above ten is honoured as configured"""
        transport = ScriptedTransport(outcomes=[_transport_failure()])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=11, base_delay_ms=1).issue(GET_DISPLAYS)

        assert not outcome.ok
        assert transport.call_count == 12
        assert len(sleeper.delays) == 11

    @pytest.mark.asyncio
    async def test_always_succeeding_transport_never_sleeps(self):
        transport = ScriptedTransport(outcomes=[_success()])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper).issue(GET_DISPLAYS)

        assert outcome.ok
        assert transport.call_count == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_zero_retries_surfaces_failure_immediately(self):
        failure = _transport_failure()
        transport = ScriptedTransport(outcomes=[failure])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=0).issue(GET_DISPLAYS)

        assert outcome is failure
        assert transport.call_count == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_first_failure_is_always_retried(self):
        """A fresh call that fails once gets at least one retry"""
        transport = ScriptedTransport(outcomes=[_response_failure(500), _success()])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=1).issue(GET_DISPLAYS)

        assert outcome.ok
        assert transport.call_count == 2


class TestBackoff:
    """Tests for delays between attempts"""

    @pytest.mark.asyncio
    async def test_delays_double_without_jitter(self):
        """max_retries=2, base_delay_ms=1000 waits 1000ms then 2000ms"""
        transport = ScriptedTransport(outcomes=[_response_failure(500)])
        sleeper = SleepRecorder()

        await _client(transport, sleeper, max_retries=2, base_delay_ms=1000).issue(GET_DISPLAYS)

        assert sleeper.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_fail_fail_succeed_totals_three_seconds(self):
        """Third attempt succeeds after 1000ms + 2000ms of backoff"""
        success = _success()
        transport = ScriptedTransport(outcomes=[_transport_failure(), _response_failure(502), success])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=2, base_delay_ms=1000).issue(GET_DISPLAYS)

        assert outcome is success
        assert sum(sleeper.delays) == pytest.approx(3.0)

    @pytest.mark.asyncio
    async def test_longer_retry_chain_keeps_doubling(self):
        transport = ScriptedTransport(outcomes=[_transport_failure()])
        sleeper = SleepRecorder()

        await _client(transport, sleeper, max_retries=4, base_delay_ms=250).issue(GET_DISPLAYS)

        assert sleeper.delays == pytest.approx([0.25, 0.5, 1.0, 2.0])

    @pytest.mark.asyncio
    async def test_max_delay_caps_each_wait(self):
        transport = ScriptedTransport(outcomes=[_transport_failure()])
        sleeper = SleepRecorder()

        await _client(
            transport, sleeper, max_retries=5, base_delay_ms=1000, max_delay_ms=3000
        ).issue(GET_DISPLAYS)

        assert sleeper.delays == pytest.approx([1.0, 2.0, 3.0, 3.0, 3.0])


class TestOutcomePassThrough:
    """Tests that outcomes reach the caller unchanged"""

    @pytest.mark.asyncio
    async def test_final_failure_is_returned_verbatim(self):
        first = _transport_failure()
        last = _response_failure(503)
        transport = ScriptedTransport(outcomes=[first, last])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, max_retries=1).issue(GET_DISPLAYS)

        assert outcome is last
        assert outcome.status_code == 503

    @pytest.mark.asyncio
    async def test_same_descriptor_is_reissued(self):
        descriptor = RequestDescriptor("POST", "/api/ads", json={"title": "Spring sale"})
        transport = ScriptedTransport(outcomes=[_response_failure(500), _response_failure(500), _success()])
        sleeper = SleepRecorder()

        await _client(transport, sleeper).issue(descriptor)

        assert transport.requests == [descriptor, descriptor, descriptor]

    @pytest.mark.asyncio
    async def test_default_policy_retries_client_errors_and_posts(self):
        """Without a restrictive policy a 400 on POST is still retried"""
        descriptor = RequestDescriptor("POST", "/api/loops", json={"name": "Lobby"})
        transport = ScriptedTransport(outcomes=[_response_failure(400)])
        sleeper = SleepRecorder()

        await _client(transport, sleeper, max_retries=2).issue(descriptor)

        assert transport.call_count == 3

    @pytest.mark.asyncio
    async def test_safe_policy_skips_client_errors(self):
        transport = ScriptedTransport(outcomes=[_response_failure(404)])
        sleeper = SleepRecorder()

        outcome = await _client(transport, sleeper, retry_policy="safe").issue(GET_DISPLAYS)

        assert outcome.status_code == 404
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_exception_propagates_without_retry(self):
        class BrokenTransport(Transport):
            calls = 0

            async def issue(self, descriptor):
                BrokenTransport.calls += 1
                raise RuntimeError("transport bug")

        sleeper = SleepRecorder()
        with pytest.raises(RuntimeError, match="transport bug"):
            await _client(BrokenTransport(), sleeper).issue(GET_DISPLAYS)
        assert BrokenTransport.calls == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_custom_predicate_overrides_policy(self):
        transport = ScriptedTransport(outcomes=[_response_failure(500)])
        sleeper = SleepRecorder()
        client = ResilientClient(
            transport, RetryConfig(max_retries=3), should_retry=lambda d, o: False, sleep=sleeper
        )

        await client.issue(GET_DISPLAYS)

        assert transport.call_count == 1


class FlakyPerUrlTransport(Transport):
    """Fails every request and counts attempts per URL"""

    def __init__(self):
        super().__init__()
        self.attempts = Counter()

    async def issue(self, descriptor):
        self.attempts[descriptor.url] += 1
        await asyncio.sleep(0)
        return _transport_failure()


class TestConcurrency:
    """Tests for concurrent calls through one client"""

    @pytest.mark.asyncio
    async def test_concurrent_calls_keep_independent_attempt_counts(self):
        transport = FlakyPerUrlTransport()
        sleeper = SleepRecorder()
        client = _client(transport, sleeper, max_retries=2)

        outcomes = await asyncio.gather(
            client.issue(RequestDescriptor("GET", "/api/displays")),
            client.issue(RequestDescriptor("GET", "/api/ads")),
        )

        assert all(not o.ok for o in outcomes)
        assert transport.attempts == {"/api/displays": 3, "/api/ads": 3}
        assert sorted(sleeper.delays) == [1.0, 1.0, 2.0, 2.0]

    @pytest.mark.asyncio
    async def test_client_is_reusable_across_calls(self):
        transport = FlakyPerUrlTransport()
        sleeper = SleepRecorder()
        client = _client(transport, sleeper, max_retries=1)

        await client.issue(GET_DISPLAYS)
        await client.issue(GET_DISPLAYS)

        assert transport.attempts["/api/displays"] == 4
        assert sleeper.delays == [1.0, 1.0]

