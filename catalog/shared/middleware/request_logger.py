# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request correlation ids, access log lines and request metrics."""

from __future__ import annotations

import hashlib
import secrets
import time

from flask import Flask, Response, g, request

from catalog.infrastructure.observability import record_request
from catalog.shared.config import load_config
from catalog.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)
from catalog.shared.utils.requests import client_ip

CORRELATION_HEADER = "X-Request-ID"

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})
_SENSITIVE_ARGS = ("password", "token", "code", "secret")


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers() -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in request.headers.items()
    }


def _safe_args() -> dict[str, str]:
    return {
        key: "<redacted>" if any(word in key.lower() for word in _SENSITIVE_ARGS) else value
        for key, value in request.args.items()
    }


def _session_user() -> str | None:
    claims = g.get("user")
    return claims.username if claims is not None else None


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        set_correlation_id(request.headers.get(CORRELATION_HEADER) or secrets.token_hex(6))
        g.request_started = time.perf_counter()
        if verbose:
            logger.debug(
                f"http.request: {request.method} {request.path} ip={client_ip()} "
                f"args={_safe_args()} headers={_safe_headers()}"
            )

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        endpoint = request.endpoint or "unmatched"
        record_request(endpoint, response.status_code, elapsed)
        logger.info(
            f"http.response: {request.method} {request.path} status={response.status_code} "
            f"took={elapsed * 1000:.1f}ms user={_session_user()}"
        )
        response.headers.setdefault(CORRELATION_HEADER, get_correlation_id())
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(
                f"http.error: {type(exc).__name__} on {request.method} {request.path} "
                f"ip={client_ip()}"
            )
        clear_correlation_id()


__all__ = ["CORRELATION_HEADER", "configure_request_logging"]
