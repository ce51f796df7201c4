"""API key rotation with round-robin selection and per-model cooldown."""

import asyncio
import logging
import time
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass

from gemini_gateway.core.exceptions import ApiKeysExhaustedError, NoApiKeysConfiguredError

logger = logging.getLogger(__name__)

# Cooldown grows 1x, 2x, 4x, 8x the base value, then stays there
_MAX_BACKOFF_EXPONENT = 3


@dataclass
class ApiKeyState:
    """Failure bookkeeping for one (API key, model) pair."""

    fail_count: int = 0
    cooldown_until: float = 0.0


class ApiKeyRotator:
    """Round-robin API key pool shared by all in-flight requests.

    Responsibilities:
    - Hand out the next key, skipping keys already tried by the caller
    - Skip keys cooling down for the requested model after a failure
    - Record failures and successes reported by the retry executor

    Upstream quotas are tracked per key and per model, so a key rate limited
    on one model stays available for the others. Selection and marking run
    under one asyncio.Lock.
    """

    def __init__(
        self,
        api_keys: Sequence[str],
        *,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._keys: tuple[str, ...] = tuple(api_keys)
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._index = 0
        self._states: dict[tuple[str, str], ApiKeyState] = {}

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    @property
    def primary_key(self) -> str:
        """The fixed key used for calls that bypass balancing.

        Raises:
            NoApiKeysConfiguredError: If the pool is empty.
        """
        if not self._keys:
            raise NoApiKeysConfiguredError()
        return self._keys[0]

    async def get_next_key(self, model: str, exclude: Collection[str] = ()) -> str:
        """Get the next API key for ``model`` using round-robin rotation.

        Keys in ``exclude`` are never returned. Keys cooling down for
        ``model`` are skipped while another key is available; when all
        remaining keys are cooling down, the one that recovers first wins.

        Raises:
            NoApiKeysConfiguredError: If the pool is empty.
            ApiKeysExhaustedError: If every key is excluded.
        """
        if not self._keys:
            raise NoApiKeysConfiguredError()

        async with self._lock:
            now = self._clock()
            count = len(self._keys)
            fallback: tuple[float, int] | None = None

            for offset in range(count):
                position = (self._index + offset) % count
                key = self._keys[position]
                if key in exclude:
                    continue

                state = self._states.get((key, model))
                if state is None or state.cooldown_until <= now:
                    self._index = (position + 1) % count
                    return key

                if fallback is None or state.cooldown_until < fallback[0]:
                    fallback = (state.cooldown_until, position)

            if fallback is None:
                raise ApiKeysExhaustedError(
                    f"All {count} API keys already tried for model '{model}'"
                )

            _, position = fallback
            self._index = (position + 1) % count
            logger.warning(
                f"All untried API keys are cooling down for model '{model}'; "
                f"using key #{position + 1} early"
            )
            return self._keys[position]

    async def mark_failure(self, key: str, model: str, *, status_code: int | None = None) -> float:
        """Put ``key`` into cooldown for ``model``.

        Returns:
            The cooldown duration in seconds.
        """
        async with self._lock:
            state = self._states.setdefault((key, model), ApiKeyState())
            state.fail_count += 1
            exponent = min(state.fail_count - 1, _MAX_BACKOFF_EXPONENT)
            cooldown = self._cooldown_seconds * (2**exponent)
            state.cooldown_until = self._clock() + cooldown

        logger.warning(
            f"API key #{self._position(key)} cooling down for {cooldown:.0f}s "
            f"on model '{model}' (status={status_code}, failures={state.fail_count})"
        )
        return cooldown

    async def mark_success(self, key: str, model: str) -> None:
        """Clear any failure state of ``key`` for ``model``."""
        async with self._lock:
            self._states.pop((key, model), None)

    def is_cooling_down(self, key: str, model: str) -> bool:
        state = self._states.get((key, model))
        return state is not None and state.cooldown_until > self._clock()

    def reset_rotation(self) -> None:
        """Reset rotation position and all cooldowns.

        This is primarily useful for testing.
        """
        self._index = 0
        self._states.clear()

    def _position(self, key: str) -> int:
        try:
            return self._keys.index(key) + 1
        except ValueError:
            return 0
