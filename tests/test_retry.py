"""Tests for the retry controller's per-kind backoff."""

import pytest

from kushrouter.errors import (
    AuthenticationError,
    ConfigurationError,
    InsufficientCreditsError,
    KushRouterError,
    RateLimitError,
)
from kushrouter.retry import RetryPolicy, retry_call


class _Failing:
    """Raises the queued errors in order, then returns ``result``."""

    def __init__(self, *errors: Exception, result: str = "ok") -> None:
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


def _policy(sleeps, **kwargs) -> RetryPolicy:
    return RetryPolicy(sleep=sleeps, **kwargs)


# ---------------------------------------------------------------------------
# Final errors
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("error", [AuthenticationError(), InsufficientCreditsError()])
async def test_final_errors_single_attempt(sleeps, error):
    factory = _Failing(error, error, error)
    with pytest.raises(type(error)):
        await retry_call(factory, _policy(sleeps, max_attempts=3))
    assert factory.calls == 1
    assert sleeps.calls == []


# ---------------------------------------------------------------------------
# Backoff schedules
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_rate_limit_exponential(sleeps):
    factory = _Failing(RateLimitError(), RateLimitError(), RateLimitError())
    with pytest.raises(RateLimitError):
        await retry_call(factory, _policy(sleeps, max_attempts=3))
    assert factory.calls == 3
    assert sleeps.calls == [2.0, 4.0]


@pytest.mark.asyncio
async def test_generic_linear(sleeps):
    last = KushRouterError("HTTP 503", status=503)
    factory = _Failing(KushRouterError("HTTP 500", status=500), KushRouterError("HTTP 502", status=502), last)
    with pytest.raises(KushRouterError) as exc_info:
        await retry_call(factory, _policy(sleeps, max_attempts=3))
    assert exc_info.value is last
    assert factory.calls == 3
    assert sleeps.calls == [1.0, 2.0]


@pytest.mark.asyncio
async def test_mixed_kinds_use_attempt_index(sleeps):
    factory = _Failing(RateLimitError(), KushRouterError("boom"))
    assert await retry_call(factory, _policy(sleeps, max_attempts=3)) == "ok"
    assert sleeps.calls == [2.0, 2.0]


@pytest.mark.asyncio
async def test_success_after_failure(sleeps):
    factory = _Failing(KushRouterError("flaky"), result="done")
    assert await retry_call(factory, _policy(sleeps)) == "done"
    assert factory.calls == 2
    assert sleeps.calls == [1.0]


@pytest.mark.asyncio
async def test_delay_capped(sleeps):
    factory = _Failing(*[RateLimitError() for _ in range(8)])
    with pytest.raises(RateLimitError):
        await retry_call(factory, _policy(sleeps, max_attempts=8))
    assert sleeps.calls == [2.0, 4.0, 8.0, 16.0, 30.0, 30.0, 30.0]


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps(sleeps):
    factory = _Failing(RateLimitError())
    with pytest.raises(RateLimitError):
        await retry_call(factory, _policy(sleeps, max_attempts=1))
    assert sleeps.calls == []


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_unclassified_exceptions_propagate(sleeps):
    factory = _Failing(RuntimeError("bug"))
    with pytest.raises(RuntimeError):
        await retry_call(factory, _policy(sleeps))
    assert factory.calls == 1
    assert sleeps.calls == []


@pytest.mark.asyncio
async def test_on_retry_hook(sleeps):
    seen = []
    factory = _Failing(RateLimitError())
    policy = _policy(sleeps, on_retry=lambda err, attempt, delay: seen.append((err.kind.value, attempt, delay)))
    await retry_call(factory, policy)
    assert seen == [("rate_limit", 1, 2.0)]


def test_policy_rejects_zero_attempts():
    with pytest.raises(ConfigurationError):
        RetryPolicy(max_attempts=0)
