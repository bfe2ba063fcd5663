# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Sliding-window request throttling for the unauthenticated account endpoints."""

from __future__ import annotations

import inspect
import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import jsonify, request

from catalog.shared.config import load_config
from catalog.shared.errors import error_envelope
from catalog.shared.logging import logger
from catalog.shared.utils.requests import client_ip


class InMemoryRateLimiter:
    """Per-key sliding window, kept in process memory."""

    def __init__(self, limit: int, window_seconds: float, *, clock=time.monotonic) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._hits)

    def retry_after(self, key: str) -> float:
        """Seconds until ``key`` may pass again, ``0`` when it may pass now."""

        now = self._clock()
        hits = self._hits.get(key)
        if hits is None:
            return 0.0
        while hits and now - hits[0] >= self.window:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return 0.0
        if len(hits) < self.limit:
            return 0.0
        return self.window - (now - hits[0])

    def _sweep(self, now: float) -> None:
        """Forget every key whose newest hit left the window."""

        if now - self._last_sweep < self.window:
            return
        self._last_sweep = now
        for key in [key for key, hits in self._hits.items() if now - hits[-1] >= self.window]:
            del self._hits[key]

    def allow(self, key: str) -> bool:
        self._sweep(self._clock())
        if self.retry_after(key) > 0:
            return False
        self._hits.setdefault(key, deque()).append(self._clock())
        return True


def _throttled(limiter: InMemoryRateLimiter, key: str):
    wait = limiter.retry_after(key)
    logger.warning(f"http.throttled: key={key} retry_after={wait:.1f}s")
    response = jsonify(error_envelope(429, "too many requests, please try again later"))
    response.headers["Retry-After"] = str(max(1, math.ceil(wait)))
    return response, 429


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Throttle a view per client address.

    Configuration is read once, when the decorated view is defined. With
    ``ENABLE_RATE_LIMIT`` off the view is returned untouched.
    """

    security = load_config().security
    limiter = InMemoryRateLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        def key() -> str:
            return f"{view.__name__}:{client_ip()}"

        if inspect.iscoroutinefunction(view):

            @wraps(view)
            async def async_limited(*args, **kwargs):
                bucket = key()
                if not limiter.allow(bucket):
                    return _throttled(limiter, bucket)
                return await view(*args, **kwargs)

            return async_limited

        @wraps(view)
        def limited(*args, **kwargs):
            bucket = key()
            if not limiter.allow(bucket):
                return _throttled(limiter, bucket)
            return view(*args, **kwargs)

        return limited

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
