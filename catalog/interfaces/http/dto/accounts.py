# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("missing", "Username cannot be empty", {})
    if not _USERNAME_PATTERN.match(value):
        raise PydanticCustomError(
            "username_invalid_chars",
            "Username may contain only letters, digits, '.', '_' and '-'",
            {"pattern": _USERNAME_PATTERN.pattern},
        )
    return value


class _RequestDTO(BaseModel):
    model_config = ConfigDict(str_max_length=256, extra="ignore")


class RegisterRequestDTO(_RequestDTO):
    username: str = Field(min_length=1, max_length=64)
    # Length and shape rules live in the domain so the messages stay uniform.
    password: str = Field(max_length=128)
    email: str = Field(max_length=254)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip()


class LoginRequestDTO(_RequestDTO):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)


class ChangePasswordRequestDTO(_RequestDTO):
    old_password: str = Field(
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("old_password", "oldPassword"),
    )
    new_password: str = Field(
        max_length=128,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )


class EmailChangeRequestDTO(_RequestDTO):
    new_email: str = Field(
        min_length=1,
        max_length=254,
        validation_alias=AliasChoices("new_email", "newEmail", "email"),
    )
    password: str = Field(min_length=1, max_length=128)

    @field_validator("new_email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip()


class PasswordResetRequestDTO(_RequestDTO):
    username: str = Field(min_length=1, max_length=64)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)


class DeleteAccountRequestDTO(_RequestDTO):
    password: str = Field(min_length=1, max_length=128)


class RefreshRequestDTO(_RequestDTO):
    refresh_token: str | None = Field(
        None, validation_alias=AliasChoices("refresh_token", "refreshToken")
    )


__all__ = [
    "ChangePasswordRequestDTO",
    "DeleteAccountRequestDTO",
    "EmailChangeRequestDTO",
    "LoginRequestDTO",
    "PasswordResetRequestDTO",
    "RefreshRequestDTO",
    "RegisterRequestDTO",
]
