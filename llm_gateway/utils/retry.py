"""Retry executor with capped exponential backoff and jitter.

:func:`retry_with_backoff` re-runs an async operation until it succeeds or
the :class:`RetryConfig` attempt ceiling is reached, sleeping between
attempts with ``asyncio.sleep`` so only the calling task is suspended.

# ─── BACKOFF MATH (Junior Developer Guide) ─────────────────────────────
#
# After failed attempt N (1-based) the engine waits:
#
#     delay = min(max_delay_ms, base_delay_ms * backoff_factor ** (N - 1))
#
# With jitter enabled the delay is multiplied by a random factor in
# [0.5, 1.5] and clamped to max_delay_ms again, so many requests that
# failed together do not all retry at the same instant.
#
#   AI_API (1000ms base, 8000ms cap):  ~1s, ~2s, ~4s  -> 4 attempts total
#   FAST_OPERATION (500ms, 2000ms):    ~0.5s, ~1s     -> 3 attempts total
# ──────────────────────────────────────────────────────────────────────

Named profiles live on :class:`RetryConfigs`.
"""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = structlog.get_logger(logger_name=__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]
RetryCallback = Callable[[int, BaseException, float], None]


class RetryConfig(BaseModel):
    """Immutable, named retry policy.

    ``retry_on`` is an optional predicate; when set, failures it rejects
    are re-raised at once instead of consuming the attempt budget.  Leave
    it ``None`` to retry every failure.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    max_attempts: int = Field(ge=1)
    base_delay_ms: int = Field(ge=0)
    max_delay_ms: int = Field(ge=0)
    jitter: bool = True
    backoff_factor: float = Field(default=2.0, ge=1.0)
    retry_on: Callable[[BaseException], bool] | None = None

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> RetryConfig:
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        return self


class RetryConfigs:
    """Canonical retry profiles."""

    # Cheap connectivity checks: a dead key should be reported quickly.
    FAST_OPERATION = RetryConfig(
        name="fast_operation",
        max_attempts=3,
        base_delay_ms=500,
        max_delay_ms=2000,
    )

    # Text generation: more patience for user-facing quality.
    AI_API = RetryConfig(
        name="ai_api",
        max_attempts=4,
        base_delay_ms=1000,
        max_delay_ms=8000,
    )

    SLOW_OPERATION = RetryConfig(
        name="slow_operation",
        max_attempts=6,
        base_delay_ms=2000,
        max_delay_ms=30000,
        backoff_factor=1.5,
    )

    CRITICAL_OPERATION = RetryConfig(
        name="critical_operation",
        max_attempts=6,
        base_delay_ms=1000,
        max_delay_ms=15000,
    )

    @classmethod
    def by_name(cls) -> dict[str, RetryConfig]:
        return {
            cfg.name: cfg
            for cfg in (
                cls.FAST_OPERATION,
                cls.AI_API,
                cls.SLOW_OPERATION,
                cls.CRITICAL_OPERATION,
            )
        }


def compute_backoff_delay(
    config: RetryConfig,
    attempt: int,
    rng: random.Random | None = None,
) -> float:
    """Return the delay in milliseconds to wait after failed attempt ``attempt``.

    The result never exceeds ``config.max_delay_ms``.
    """
    if attempt <= 0:
        raise ValueError("attempt must be >= 1")

    delay = min(
        float(config.max_delay_ms),
        config.base_delay_ms * (config.backoff_factor ** (attempt - 1)),
    )
    if config.jitter:
        factor = (rng or random).uniform(0.5, 1.5)
        delay = min(float(config.max_delay_ms), delay * factor)
    return delay


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    *,
    sleep: SleepFn | None = None,
    rng: random.Random | None = None,
    on_retry: RetryCallback | None = None,
) -> T:
    """Run ``operation`` until it succeeds or ``config.max_attempts`` is reached.

    Parameters
    ----------
    operation:
        Zero-argument callable returning a fresh awaitable per attempt.
    config:
        The retry profile to apply.
    sleep:
        Awaitable sleep taking seconds; defaults to ``asyncio.sleep``.
    rng:
        Random source for jitter; defaults to the ``random`` module.
    on_retry:
        Called as ``on_retry(attempt, error, delay_ms)`` before each backoff.

    Returns
    -------
    T
        The first successful result.

    Raises
    ------
    Exception
        The last attempt's error, unchanged, once attempts are exhausted or
        ``config.retry_on`` rejects it.  ``asyncio.CancelledError`` is never
        caught, so caller cancellation stops the loop immediately.
    """
    do_sleep = sleep or asyncio.sleep
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if config.retry_on is not None and not config.retry_on(exc):
                logger.warning(
                    "retry_skipped_non_retryable",
                    policy=config.name,
                    attempt=attempt,
                    error=str(exc),
                )
                raise
            if attempt >= config.max_attempts:
                logger.warning(
                    "retry_exhausted",
                    policy=config.name,
                    attempts=attempt,
                    error=str(exc),
                )
                raise

            delay_ms = compute_backoff_delay(config, attempt, rng)
            logger.warning(
                "retry_attempt_failed",
                policy=config.name,
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay_ms=round(delay_ms),
                error=str(exc),
            )
            if on_retry is not None:
                on_retry(attempt, exc, delay_ms)
            await do_sleep(delay_ms / 1000)
            attempt += 1


def with_retry(
    config: RetryConfig,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator form of :func:`retry_with_backoff` for async functions."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_with_backoff(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator
