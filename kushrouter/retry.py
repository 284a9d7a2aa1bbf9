"""Retry policy: exponential backoff for rate limits, linear for everything else."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from kushrouter.errors import ConfigurationError, ErrorKind, KushRouterError
from kushrouter.logging import get_logger

T = TypeVar("T")

_log = get_logger(__name__)


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    rate_limit_base: float = 2.0
    linear_step: float = 1.0
    max_delay: float = 30.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    on_retry: Callable[[KushRouterError, int, float], None] | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be >= 1, got {self.max_attempts}")

    def calculate_delay(self, error: KushRouterError, attempt: int) -> float:
        """Seconds to wait after ``attempt`` (1-indexed) failed with ``error``."""
        if error.kind == ErrorKind.RATE_LIMIT:
            delay = self.rate_limit_base ** attempt
        else:
            delay = self.linear_step * attempt
        return min(delay, self.max_delay)


async def retry_call(
    coro_factory: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
) -> T:
    """Run ``coro_factory()`` until it succeeds or the policy gives up.

    The factory is called once per attempt so every attempt gets a fresh
    envelope. Authentication and credit errors are raised on first sight;
    when attempts run out the last classified error is raised unchanged.
    """
    pol = policy or RetryPolicy()

    for attempt in range(1, pol.max_attempts + 1):
        try:
            return await coro_factory()
        except KushRouterError as exc:
            if not exc.retryable or attempt >= pol.max_attempts:
                raise

            delay = pol.calculate_delay(exc, attempt)
            _log.warning(
                "kushrouter_retry",
                attempt=attempt,
                max_attempts=pol.max_attempts,
                wait_seconds=delay,
                kind=exc.kind.value,
                status=exc.status,
                error=exc.message,
            )
            if pol.on_retry:
                pol.on_retry(exc, attempt, delay)

            await pol.sleep(delay)

    raise AssertionError("unreachable: retry loop exited without result")
