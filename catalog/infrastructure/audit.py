# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Audit trail of security relevant account events."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from catalog.shared.logging import logger


class AuditAction(str, Enum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    SESSION_REFRESHED = "session_refreshed"

    REGISTER = "register"
    EMAIL_VERIFIED = "email_verified"
    ACCOUNT_DELETED = "account_deleted"

    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    EMAIL_CHANGE_REQUESTED = "email_change_requested"
    EMAIL_CHANGE_CONFIRMED = "email_change_confirmed"

    PROFILE_PICTURE_CHANGED = "profile_picture_changed"


_REDACTED_KEYS = ("password", "token", "code", "secret")


def redact(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(word in key.lower() for word in _REDACTED_KEYS) else value
        for key, value in details.items()
    }


@dataclass(frozen=True)
class AuditEvent:
    action: AuditAction
    username: str | None
    ip_address: str | None
    success: bool
    details: Mapping[str, Any] = field(default_factory=dict)
    at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def render(self) -> str:
        line = (
            f"audit.{self.action.value}: user={self.username} ip={self.ip_address} "
            f"success={self.success} at={self.at}"
        )
        if self.details:
            line += f" details={redact(self.details)}"
        return line


def audit_log(
    action: AuditAction,
    username: str | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> AuditEvent:
    event = AuditEvent(action, username, ip_address, success, details or {})
    if success:
        logger.info(event.render())
    else:
        logger.warning(event.render())
    return event


__all__ = ["AuditAction", "AuditEvent", "audit_log", "redact"]
