# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Timeouts, retries and a circuit breaker for calls leaving the process."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from catalog.shared.config import load_config
from catalog.shared.logging import logger

T = TypeVar("T")


class CircuitOpenError(RuntimeError):
    pass


@dataclass
class CircuitBreaker:
    """Simple in-memory circuit breaker."""

    name: str
    failure_threshold: int
    reset_timeout: float

    def __post_init__(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None

    @classmethod
    def from_config(cls, name: str) -> CircuitBreaker:
        resilience = load_config().resilience
        return cls(
            name=name,
            failure_threshold=resilience.circuit_fail_threshold,
            reset_timeout=resilience.circuit_reset_timeout,
        )

    @property
    def is_open(self) -> bool:
        return self._opened_at is not None

    def allow(self) -> bool:
        if self._opened_at is None:
            return True
        if time.monotonic() - self._opened_at >= self.reset_timeout:
            logger.info(f"breaker.{self.name}: half-open state")
            self._opened_at = None
            self._failures = 0
            return True
        logger.warning(f"breaker.{self.name}: open state refusing call")
        return False

    def on_success(self) -> None:
        self._failures = 0
        self._opened_at = None

    def on_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold:
            self._opened_at = time.monotonic()
            logger.error(f"breaker.{self.name}: opening circuit after {self._failures} failures")


async def resilient_call(  # noqa: UP047
    func: Callable[..., Awaitable[T]],
    *args: Any,
    breaker: CircuitBreaker | None = None,
    timeout: float | None = None,
    retries: int | None = None,
    **kwargs: Any,
) -> T:
    """Execute call with retries, timeout, and optional circuit breaker."""

    resilience = load_config().resilience
    if breaker is not None and not breaker.allow():
        raise CircuitOpenError(f"circuit {breaker.name} is open")

    timeout = timeout or resilience.default_timeout
    attempts = (resilience.max_retries if retries is None else retries) + 1
    retry = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=resilience.backoff_base, max=resilience.backoff_cap),
        retry=retry_if_exception_type(Exception),
        reraise=True,
    )

    try:
        async for attempt in retry:
            with attempt:
                logger.debug(
                    f"resilience: attempt={attempt.retry_state.attempt_number} "
                    f"func={getattr(func, '__name__', func)}"
                )
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
    except RetryError as exc:
        if breaker is not None:
            breaker.on_failure()
        last_exc = exc.last_attempt.exception()
        if last_exc is None:
            raise RuntimeError("resilience: retry failed without exception") from exc
        raise last_exc from exc
    except Exception:
        if breaker is not None:
            breaker.on_failure()
        raise

    if breaker is not None:
        breaker.on_success()
    return result


__all__ = ["CircuitBreaker", "CircuitOpenError", "resilient_call"]
