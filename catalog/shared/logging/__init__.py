# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Logging for the account service: loguru sinks, correlation ids and redaction."""

from .logger import (
    LogSettings,
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    logger,
    set_correlation_id,
    setup_logging,
)
from .sensitive_filter import sanitize_message, sanitize_record

__all__ = [
    "LogSettings",
    "clear_correlation_id",
    "correlation_scope",
    "get_correlation_id",
    "logger",
    "sanitize_message",
    "sanitize_record",
    "set_correlation_id",
    "setup_logging",
]
