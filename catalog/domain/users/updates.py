# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Closed set of single-field user updates.

Only the types below can be written through ``UserRepository.update``;
anything else is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ..exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class SetEmail:
    value: str
    column: ClassVar[str] = "email"


@dataclass(slots=True, frozen=True)
class SetPasswordHash:
    value: str
    column: ClassVar[str] = "password_hash"


@dataclass(slots=True, frozen=True)
class SetProfilePicture:
    value: str
    column: ClassVar[str] = "profile_picture_url"


@dataclass(slots=True, frozen=True)
class SetProfilePictureChangedAt:
    value: int | None
    column: ClassVar[str] = "profile_picture_changed_at"


@dataclass(slots=True, frozen=True)
class SetCanPost:
    value: bool
    column: ClassVar[str] = "can_post"


@dataclass(slots=True, frozen=True)
class SetAdmin:
    value: bool
    column: ClassVar[str] = "admin"


@dataclass(slots=True, frozen=True)
class SetLikedArticles:
    value: tuple[str, ...]
    column: ClassVar[str] = "liked_article_ids"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", tuple(str(item) for item in self.value))


@dataclass(slots=True, frozen=True)
class SetVerified:
    value: bool = True
    column: ClassVar[str] = "verified"

    def __post_init__(self) -> None:
        if self.value is not True:
            raise InvariantViolation("verification cannot be revoked", field="verified")


@dataclass(slots=True, frozen=True)
class SetLastPasswordChange:
    value: int
    column: ClassVar[str] = "last_password_change"


@dataclass(slots=True, frozen=True)
class SetLastEmailChange:
    value: int
    column: ClassVar[str] = "last_email_change"


UserFieldUpdate = (
    SetEmail
    | SetPasswordHash
    | SetProfilePicture
    | SetProfilePictureChangedAt
    | SetCanPost
    | SetAdmin
    | SetLikedArticles
    | SetVerified
    | SetLastPasswordChange
    | SetLastEmailChange
)

USER_FIELD_UPDATES: tuple[type, ...] = (
    SetEmail,
    SetPasswordHash,
    SetProfilePicture,
    SetProfilePictureChangedAt,
    SetCanPost,
    SetAdmin,
    SetLikedArticles,
    SetVerified,
    SetLastPasswordChange,
    SetLastEmailChange,
)


def column_value(change: Any) -> tuple[str, Any]:
    """Return ``(column, value)`` for an allowed update, ``TypeError`` otherwise."""

    if not isinstance(change, USER_FIELD_UPDATES):
        raise TypeError(f"{type(change).__name__} is not an updatable user field")
    return change.column, change.value
