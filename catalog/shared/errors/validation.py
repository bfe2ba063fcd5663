# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Envelope context for a rejected request body: offending fields plus one entry per error."""

    errors = [
        {
            "field": _field_path(error.get("loc", ())),
            "type": error.get("type", "value_error"),
            "detail": error.get("msg", ""),
        }
        for error in exc.errors(include_url=False)
    ]
    return {"fields": sorted({entry["field"] for entry in errors}), "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(
        context=format_pydantic_errors(exc), message="invalid request payload"
    ) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
