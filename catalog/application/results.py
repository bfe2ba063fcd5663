# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Structured results returned by every account operation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from catalog.shared.errors.base import AppError


@dataclass(slots=True, frozen=True)
class OperationResult:
    status: HTTPStatus
    message: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == HTTPStatus.OK

    @classmethod
    def success(cls, message: str, **payload: Any) -> OperationResult:
        return cls(status=HTTPStatus.OK, message=message, payload=payload)

    @classmethod
    def failure(cls, status: HTTPStatus, message: str, **payload: Any) -> OperationResult:
        return cls(status=status, message=message, payload=payload)

    @classmethod
    def server_error(cls, message: str = "server error") -> OperationResult:
        return cls(status=HTTPStatus.INTERNAL_SERVER_ERROR, message=message)

    @classmethod
    def from_error(cls, error: AppError) -> OperationResult:
        return cls(
            status=error.status,
            message=error.public_message,
            payload=dict(error.context or {}),
        )

    def to_envelope(self) -> dict[str, Any]:
        response: dict[str, Any] = {"message": self.message}
        response.update(self.payload)
        return {"status": int(self.status), "response": response}


class OperationFailedError(AppError):
    """Carries a failed collaborator result through a multi-step flow unchanged."""

    def __init__(self, result: OperationResult) -> None:
        super().__init__(
            code="operation_failed",
            status=result.status,
            context=dict(result.payload) or None,
            message=result.message,
        )
        self.result = result


__all__ = ["OperationFailedError", "OperationResult"]
