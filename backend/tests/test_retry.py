"""超时与退避重试测试。"""

import asyncio

import pytest

from insta_translate.errors import ServiceUnavailable, TranslationFailed
from insta_translate.services.retry import RetryPolicy, call_with_retry

FAST = RetryPolicy(max_attempts=3, base_delay_sec=0.0, max_delay_sec=0.0)


class Flaky:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome == "hang":
            await asyncio.sleep(10)
        return outcome


def test_delays_are_exponential_and_capped():
    policy = RetryPolicy(max_attempts=5, base_delay_sec=0.5, max_delay_sec=1.5, backoff_factor=2.0)
    assert list(policy.delays()) == [0.5, 1.0, 1.5, 1.5]


@pytest.mark.asyncio
async def test_retries_transient_then_succeeds():
    call = Flaky(ServiceUnavailable("503"), ServiceUnavailable("503"), "ok")
    assert await call_with_retry(call, timeout=1.0, policy=FAST) == "ok"
    assert call.calls == 3


@pytest.mark.asyncio
async def test_non_retryable_raises_immediately():
    call = Flaky(TranslationFailed("400"), "ok")
    with pytest.raises(TranslationFailed):
        await call_with_retry(call, timeout=1.0, policy=FAST)
    assert call.calls == 1


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    call = Flaky(*[ServiceUnavailable("down")] * 3)
    with pytest.raises(ServiceUnavailable):
        await call_with_retry(call, timeout=1.0, policy=FAST)
    assert call.calls == 3


@pytest.mark.asyncio
async def test_timeout_counts_as_transient():
    call = Flaky("hang", "ok")
    assert await call_with_retry(call, timeout=0.05, policy=FAST) == "ok"
    assert call.calls == 2
