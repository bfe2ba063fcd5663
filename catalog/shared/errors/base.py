# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    """Error that renders as the ``{status, response: {message, ...}}`` envelope."""

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.public_message)

    @property
    def public_message(self) -> str:
        return self.message or self.code.replace("_", " ")

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {"message": self.public_message}
        response.update(self.context or {})
        return {"status": int(self.status), "response": response}


class DomainError(AppError):
    """Account rule violation.

    Subclasses declare ``code``, ``status`` and ``message`` as class
    attributes; keyword arguments override them per raise site.
    """

    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST
    message: str | None = None

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        cls = type(self)
        super().__init__(
            code=code or cls.code,
            status=status or cls.status,
            context=context,
            message=message or cls.message,
        )


class InfrastructureError(AppError):
    """A collaborator failed; the client only ever sees ``server error``."""

    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context, message="server error")


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
            message=message,
        )
