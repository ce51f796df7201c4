"""Retry and load balancing across the upstream API key pool."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from gemini_gateway.core.exceptions import ApiKeysExhaustedError, UpstreamError
from gemini_gateway.core.provider.api_key_rotator import ApiKeyRotator

T = TypeVar("T")

# An upstream call bound to one API key
KeyedOperation = Callable[[str], Awaitable[T]]

logger = logging.getLogger(__name__)


def is_retryable_error(error: BaseException) -> bool:
    """Whether a different API key might succeed after ``error``.

    Rate limits, auth failures tied to the key (401/403), upstream 5xx and
    transport failures (including timeouts) are retryable. Everything else is
    a property of the request and would fail the same way on any key.
    """
    if isinstance(error, UpstreamError):
        return error.is_retryable
    return isinstance(error, httpx.TransportError)


def _status_of(error: BaseException) -> int | None:
    return error.status_code if isinstance(error, UpstreamError) else None


class KeyBalancer:
    """Runs upstream operations against the API key pool.

    ``with_retry`` spreads calls across keys and fails over to a key not yet
    tried in the same call. ``without_balancing`` always uses the first key.
    """

    def __init__(self, rotator: ApiKeyRotator, *, max_retries: int = 3) -> None:
        self.rotator = rotator
        self.max_retries = max_retries

    @property
    def max_attempts(self) -> int:
        return min(len(self.rotator.keys), self.max_retries + 1)

    async def with_retry(self, model: str, operation: KeyedOperation[T]) -> T:
        """Run ``operation`` with failover between API keys.

        Args:
            model: Upstream model id; cooldowns are tracked per model
            operation: Async callable receiving the API key to use

        Returns:
            Whatever the first successful attempt returned.

        Raises:
            NoApiKeysConfiguredError: If the pool is empty.
            Exception: The first non-retryable error, or the last retryable one
                once the attempt budget is spent.
        """
        tried: set[str] = set()
        attempts = max(self.max_attempts, 1)
        last_error: BaseException | None = None

        for attempt in range(1, attempts + 1):
            api_key = await self.rotator.get_next_key(model, exclude=tried)
            tried.add(api_key)

            try:
                result = await operation(api_key)
            except Exception as e:
                if not is_retryable_error(e):
                    raise

                last_error = e
                await self.rotator.mark_failure(api_key, model, status_code=_status_of(e))
                if attempt < attempts:
                    logger.warning(
                        f"Attempt {attempt}/{attempts} for model '{model}' failed "
                        f"({type(e).__name__}: {e}); retrying with another API key"
                    )
                continue

            await self.rotator.mark_success(api_key, model)
            return result

        logger.error(f"All {attempts} attempts for model '{model}' failed")
        if last_error is None:
            raise ApiKeysExhaustedError(f"No API key could be tried for model '{model}'")
        raise last_error

    async def without_balancing(self, operation: KeyedOperation[T]) -> T:
        """Run ``operation`` once with the primary key; no rotation, no cooldown."""
        return await operation(self.rotator.primary_key)
