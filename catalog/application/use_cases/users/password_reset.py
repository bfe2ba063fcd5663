# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from dataclasses import replace
from http import HTTPStatus

from catalog.application.interfaces import MailSender
from catalog.application.results import OperationResult
from catalog.domain.users.entities import TokenType, VerificationToken
from catalog.domain.users.exceptions import (
    CooldownActiveError,
    TokenGoneError,
    TokenNotFoundError,
    UserNotVerifiedError,
)
from catalog.domain.users.policies import (
    CHANGE_TOKEN_TTL,
    GENERATED_PASSWORD_SUFFIX_BYTES,
    PASSWORD_RESET_COOLDOWN,
    cooldown_active,
)
from catalog.domain.users.repositories import (
    AccessTokenIssuer,
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.domain.users.updates import SetLastPasswordChange, SetPasswordHash
from catalog.shared.utils.clock import Clock, unix_now

from .common import apply_update, deliver, new_verification_code, require_user


class SendPasswordResetEmailUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        access_tokens: AccessTokenIssuer,
        mail: MailSender,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._access_tokens = access_tokens
        self._mail = mail
        self._clock = clock

    async def execute(self, username: str) -> OperationResult:
        user = require_user(self._users, username)
        if not user.verified:
            raise UserNotVerifiedError()
        now = self._clock()
        if cooldown_active(user.last_password_change, PASSWORD_RESET_COOLDOWN, now):
            raise CooldownActiveError(
                status=HTTPStatus.TOO_MANY_REQUESTS,
                message="you have requested a password reset recently, try again later",
            )

        code = new_verification_code()
        self._tokens.create(
            VerificationToken(
                username=username,
                value=code,
                type=TokenType.PASSWORD_RESET,
                expiration=now + CHANGE_TOKEN_TTL,
            )
        )
        await deliver(
            "password_reset", username, self._mail.send_password_reset(user.email, username, code)
        )
        apply_update(self._users, username, SetLastPasswordChange(now))

        access = self._access_tokens.issue_access(replace(user, last_password_change=now).claims())
        return OperationResult.success(
            "password reset email sent",
            accessToken=access,
            user=self._access_tokens.decode(access).to_payload(),
        )


class ResetPasswordUseCase:
    """Replace the password with a generated one and mail it to the owner."""

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        mail: MailSender,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._mail = mail
        self._clock = clock

    async def execute(self, code: str) -> OperationResult:
        token = self._tokens.get(code)
        if token is None or not token.is_a(TokenType.PASSWORD_RESET):
            raise TokenNotFoundError()
        if token.is_expired(self._clock()):
            self._tokens.delete(code)
            raise TokenGoneError(
                message="verification code has expired, request a new password reset"
            )

        user = require_user(self._users, token.username)
        new_password = user.username + secrets.token_hex(GENERATED_PASSWORD_SUFFIX_BYTES)
        password_hash = self._password_hasher.hash(new_password)
        apply_update(self._users, user.username, SetPasswordHash(password_hash))
        self._tokens.delete(code)

        await deliver(
            "new_password",
            user.username,
            self._mail.send_new_password(user.email, user.username, new_password),
        )
        return OperationResult.success(
            "password reset successful, check your email for the new password"
        )
