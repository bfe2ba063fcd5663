# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from catalog.shared.errors.base import DomainError


class InvalidEmailError(DomainError):
    code = "invalid_email"
    message = "invalid email address"


class PasswordTooShortError(DomainError):
    code = "password_too_short"
    message = "password must be at least 8 characters long"


class UsernameTakenError(DomainError):
    code = "username_taken"
    status = HTTPStatus.CONFLICT
    message = "username is already in use"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "invalid login credentials"


class InvalidPasswordError(DomainError):
    code = "invalid_password"
    status = HTTPStatus.UNAUTHORIZED
    message = "invalid password"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "user not found"


class UserNotVerifiedError(DomainError):
    code = "user_not_verified"
    status = HTTPStatus.FORBIDDEN
    message = "user is not verified"


class AlreadyVerifiedError(DomainError):
    code = "already_verified"
    status = HTTPStatus.GONE
    message = "account already verified"


class CooldownActiveError(DomainError):
    code = "cooldown_active"
    status = HTTPStatus.TOO_MANY_REQUESTS


class TokenNotFoundError(DomainError):
    code = "token_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "invalid or expired verification code"


class TokenGoneError(DomainError):
    code = "token_gone"
    status = HTTPStatus.GONE
    message = "verification code is invalid or has expired"
