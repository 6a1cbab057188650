"""外部调用的超时与指数退避重试。

仅对临时故障（ServiceUnavailable、超时）重试；其他异常立即抛出。
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger

from insta_translate.config import PipelineConfig
from insta_translate.errors import ServiceUnavailable

T = TypeVar("T")

RETRYABLE = (ServiceUnavailable, asyncio.TimeoutError)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_sec: float = 0.5
    max_delay_sec: float = 5.0
    backoff_factor: float = 2.0

    @classmethod
    def from_config(cls, cfg: PipelineConfig) -> "RetryPolicy":
        return cls(
            max_attempts=cfg.max_attempts,
            base_delay_sec=cfg.retry_base_delay_sec,
            max_delay_sec=cfg.retry_max_delay_sec,
            backoff_factor=cfg.backoff_factor,
        )

    def delays(self):
        """第 1..n-1 次失败后的等待时长。"""
        delay = self.base_delay_sec
        for _ in range(self.max_attempts - 1):
            yield min(delay, self.max_delay_sec)
            delay *= self.backoff_factor


NO_RETRY = RetryPolicy(max_attempts=1)


async def call_with_timeout(call: Callable[[], Awaitable[T]], timeout: float) -> T:
    return await asyncio.wait_for(call(), timeout=timeout)


async def call_with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    timeout: float,
    policy: RetryPolicy = NO_RETRY,
    label: str = "call",
) -> T:
    """
    每次尝试受 timeout 约束，临时故障按 policy 退避重试。

    :param call: 每次尝试都重新创建协程的工厂
    :raises: 最后一次失败的异常
    """
    delays = policy.delays()
    attempt = 0
    while True:
        attempt += 1
        try:
            return await call_with_timeout(call, timeout)
        except RETRYABLE as e:
            delay = next(delays, None)
            if delay is None:
                logger.error(f"{label} failed after {attempt} attempts: {e=}")
                raise
            logger.warning(
                f"{label} failed (attempt {attempt}/{policy.max_attempts}): {e=}, retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)
