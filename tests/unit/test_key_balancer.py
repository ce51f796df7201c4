"""Unit tests for retry and failover across API keys."""

import httpx
import pytest

from gemini_gateway.api.services.key_rotation import KeyBalancer, is_retryable_error
from gemini_gateway.core.exceptions import (
    InvalidRequestError,
    NoApiKeysConfiguredError,
    UpstreamError,
)
from gemini_gateway.core.provider.api_key_rotator import ApiKeyRotator


def make_balancer(keys=("key1", "key2", "key3"), max_retries=3):
    return KeyBalancer(ApiKeyRotator(list(keys), cooldown_seconds=60), max_retries=max_retries)


class ScriptedOperation:
    """Fails with the scripted errors in order, then returns the key used."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.keys = []

    async def __call__(self, api_key):
        self.keys.append(api_key)
        if self.errors:
            raise self.errors.pop(0)
        return f"ok:{api_key}"


@pytest.mark.unit
@pytest.mark.parametrize(
    "error, retryable",
    [
        (UpstreamError("rate limited", status_code=429), True),
        (UpstreamError("unauthorized", status_code=401), True),
        (UpstreamError("forbidden", status_code=403), True),
        (UpstreamError("unavailable", status_code=503), True),
        (UpstreamError("bad request", status_code=400), False),
        (UpstreamError("not found", status_code=404), False),
        (httpx.ConnectError("refused"), True),
        (httpx.ReadTimeout("slow"), True),
        (InvalidRequestError("missing"), False),
        (ValueError("local"), False),
    ],
)
def test_is_retryable_error(error, retryable):
    assert is_retryable_error(error) is retryable


@pytest.mark.unit
@pytest.mark.asyncio
class TestWithRetry:
    async def test_first_attempt_success(self):
        operation = ScriptedOperation()

        result = await make_balancer().with_retry("m", operation)

        assert result == "ok:key1"
        assert operation.keys == ["key1"]

    async def test_rotates_on_rate_limit(self):
        balancer = make_balancer()
        operation = ScriptedOperation(UpstreamError("rate limited", status_code=429))

        result = await balancer.with_retry("m", operation)

        assert result == "ok:key2"
        assert operation.keys == ["key1", "key2"]
        assert balancer.rotator.is_cooling_down("key1", "m")

    async def test_rotates_on_transport_error(self):
        operation = ScriptedOperation(httpx.ConnectError("refused"), httpx.ReadTimeout("slow"))

        result = await make_balancer().with_retry("m", operation)

        assert result == "ok:key3"
        assert operation.keys == ["key1", "key2", "key3"]

    async def test_non_retryable_error_propagates_immediately(self):
        balancer = make_balancer()
        operation = ScriptedOperation(UpstreamError("bad request", status_code=400))

        with pytest.raises(UpstreamError) as exc_info:
            await balancer.with_retry("m", operation)

        assert exc_info.value.status_code == 400
        assert operation.keys == ["key1"]
        assert not balancer.rotator.is_cooling_down("key1", "m")

    async def test_never_reuses_a_key_and_reraises_last_error(self):
        errors = [UpstreamError(f"fail {i}", status_code=500 + i) for i in range(3)]
        operation = ScriptedOperation(*errors)

        with pytest.raises(UpstreamError) as exc_info:
            await make_balancer().with_retry("m", operation)

        assert exc_info.value.message == "fail 2"
        assert operation.keys == ["key1", "key2", "key3"]

    async def test_attempts_bounded_by_max_retries(self):
        operation = ScriptedOperation(*[UpstreamError("x", status_code=429) for _ in range(5)])

        with pytest.raises(UpstreamError):
            await make_balancer(keys=("k1", "k2", "k3", "k4", "k5"), max_retries=1).with_retry(
                "m", operation
            )

        assert len(operation.keys) == 2

    async def test_single_key_gets_one_attempt(self):
        operation = ScriptedOperation(UpstreamError("x", status_code=503))

        with pytest.raises(UpstreamError):
            await make_balancer(keys=("only",)).with_retry("m", operation)

        assert operation.keys == ["only"]

    async def test_cooled_key_skipped_on_next_call(self):
        balancer = make_balancer()
        await balancer.with_retry("m", ScriptedOperation(UpstreamError("x", status_code=429)))
        balancer.rotator._index = 0

        operation = ScriptedOperation()
        await balancer.with_retry("m", operation)

        assert operation.keys == ["key2"]

    async def test_empty_pool(self):
        with pytest.raises(NoApiKeysConfiguredError):
            await make_balancer(keys=()).with_retry("m", ScriptedOperation())

    async def test_no_retries_reraises_the_upstream_error(self):
        error = UpstreamError("busy", status_code=503)
        operation = ScriptedOperation(error)

        with pytest.raises(UpstreamError) as exc_info:
            await make_balancer(max_retries=0).with_retry("m", operation)

        assert exc_info.value is error
        assert operation.keys == ["key1"]


@pytest.mark.unit
@pytest.mark.asyncio
class TestWithoutBalancing:
    async def test_always_uses_primary_key(self):
        balancer = make_balancer()
        operation = ScriptedOperation()

        for _ in range(3):
            await balancer.without_balancing(operation)

        assert operation.keys == ["key1", "key1", "key1"]

    async def test_failure_is_not_retried_or_marked(self):
        balancer = make_balancer()
        operation = ScriptedOperation(UpstreamError("x", status_code=429))

        with pytest.raises(UpstreamError):
            await balancer.without_balancing(operation)

        assert operation.keys == ["key1"]
        assert not balancer.rotator.is_cooling_down("key1", "m")
