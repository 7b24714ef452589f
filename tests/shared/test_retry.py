"""
Tests for the shared retry decorator.
"""

from unittest.mock import AsyncMock, patch

import pytest

from shared.retry import RetryConfig, RetryError, calculate_delay, retry_on_exception


class FlakyError(Exception):
    pass


def wrap(calls, exceptions=(FlakyError,), base_delay=0.0):
    """Decorate a plain coroutine that delegates to the mock."""
    async def operation():
        return await calls()

    return retry_on_exception(exceptions, RetryConfig.from_retries(3, base_delay=base_delay))(operation)


class TestCalculateDelay:
    """Backoff schedule."""

    def test_exponential_schedule_from_200ms(self):
        config = RetryConfig.from_retries(3, base_delay=0.2)
        delays = [calculate_delay(attempt, config) for attempt in (1, 2, 3)]
        assert delays == pytest.approx([0.2, 0.4, 0.8])

    def test_delay_capped(self):
        config = RetryConfig(base_delay=1.0, max_delay=3.0)
        assert calculate_delay(5, config) == 3.0

    def test_jitter_stays_within_ten_percent(self):
        config = RetryConfig(base_delay=1.0, jitter=True)
        for _ in range(20):
            assert 0.9 <= calculate_delay(1, config) <= 1.1


class TestRetryOnException:
    """Retry decorator behaviour."""

    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self):
        calls = AsyncMock(side_effect=[FlakyError("a"), FlakyError("b"), "done"])
        wrapped = wrap(calls)

        assert await wrapped() == "done"
        assert calls.await_count == 3

    @pytest.mark.asyncio
    async def test_exhaustion_raises_retry_error(self):
        calls = AsyncMock(side_effect=FlakyError("down"))
        wrapped = wrap(calls)

        with pytest.raises(RetryError) as exc_info:
            await wrapped()

        assert exc_info.value.attempts == 4
        assert isinstance(exc_info.value.last_exception, FlakyError)
        assert calls.await_count == 4

    @pytest.mark.asyncio
    async def test_other_exceptions_not_retried(self):
        calls = AsyncMock(side_effect=ValueError("bad input"))
        wrapped = wrap(calls)

        with pytest.raises(ValueError):
            await wrapped()

        assert calls.await_count == 1

    @pytest.mark.asyncio
    async def test_sleeps_follow_backoff(self):
        calls = AsyncMock(side_effect=FlakyError("down"))
        wrapped = wrap(calls, base_delay=0.2)

        with patch("shared.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            with pytest.raises(RetryError):
                await wrapped()

        slept = [call.args[0] for call in mock_sleep.await_args_list]
        assert slept == pytest.approx([0.2, 0.4, 0.8])
