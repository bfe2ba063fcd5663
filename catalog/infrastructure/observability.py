# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Prometheus metrics for HTTP traffic and account operations."""

from __future__ import annotations

from http import HTTPStatus

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from catalog.shared.config import load_config

REQUEST_LATENCY = Histogram(
    "catalog_request_latency_seconds",
    "HTTP request latency by endpoint",
    labelnames=("endpoint",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "catalog_requests_total",
    "HTTP requests by endpoint and status",
    labelnames=("endpoint", "status"),
)
ACCOUNT_OPERATIONS = Counter(
    "catalog_account_operations_total",
    "Account operations by outcome",
    labelnames=("operation", "status"),
)


def _metrics_enabled() -> bool:
    return load_config().observability.metrics_enabled


def record_request(endpoint: str, status: int, elapsed_seconds: float) -> None:
    if not _metrics_enabled():
        return
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(elapsed_seconds)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def record_account_operation(operation: str, status: HTTPStatus) -> None:
    if _metrics_enabled():
        ACCOUNT_OPERATIONS.labels(operation=operation, status=str(int(status))).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "ACCOUNT_OPERATIONS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "record_account_operation",
    "record_request",
    "render_metrics",
]
