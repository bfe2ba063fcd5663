# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Expiration value of tokens that never expire (initial email verification).
NO_EXPIRATION = 0


class TokenType(str, Enum):
    EMAIL_VERIFICATION = "email_verification"
    EMAIL_CHANGE = "email_change"
    PASSWORD_RESET = "password_reset"


@dataclass(slots=True, frozen=True)
class SessionClaims:
    """Public part of a user that is safe to sign into a session token."""

    username: str
    email: str
    admin: bool
    can_post: bool
    verified: bool
    account_created_at: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "Username": self.username,
            "Email": self.email,
            "Admin": self.admin,
            "CanPost": self.can_post,
            "Verified": self.verified,
            "AccountCreatedAt": self.account_created_at,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> SessionClaims:
        return cls(
            username=str(payload["Username"]),
            email=str(payload.get("Email", "")),
            admin=_as_bool(payload.get("Admin", False)),
            can_post=_as_bool(payload.get("CanPost", False)),
            verified=_as_bool(payload.get("Verified", False)),
            account_created_at=int(payload.get("AccountCreatedAt", 0)),
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


@dataclass(slots=True, frozen=True)
class User:

    username: str
    password_hash: str
    email: str
    profile_picture_url: str
    account_created_at: int
    admin: bool = False
    can_post: bool = True
    verified: bool = False
    last_password_change: int = 0
    last_email_change: int = 0
    liked_article_ids: tuple[str, ...] = ()
    profile_picture_changed_at: int | None = None

    def claims(self) -> SessionClaims:
        return SessionClaims(
            username=self.username,
            email=self.email,
            admin=self.admin,
            can_post=self.can_post,
            verified=self.verified,
            account_created_at=self.account_created_at,
        )

    def public_view(self) -> dict[str, Any]:
        """Everything but the password hash and the liked articles."""

        view = self.claims().to_payload()
        view.update(
            {
                "ProfilePic": self.profile_picture_url,
                "ProfilePicChange": self.profile_picture_changed_at,
                "LastPasswordChange": self.last_password_change,
                "LastEmailChange": self.last_email_change,
            }
        )
        return view


@dataclass(slots=True, frozen=True)
class VerificationToken:

    username: str
    value: str
    type: TokenType
    expiration: int = NO_EXPIRATION
    new_email: str | None = None

    def is_expired(self, now: int) -> bool:
        return self.expiration != NO_EXPIRATION and self.expiration < now

    def is_a(self, token_type: TokenType) -> bool:
        return self.type == token_type
