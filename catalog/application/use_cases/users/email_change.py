# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace
from http import HTTPStatus

from catalog.application.interfaces import MailSender
from catalog.application.results import OperationResult
from catalog.domain.users.entities import TokenType, VerificationToken
from catalog.domain.users.exceptions import (
    CooldownActiveError,
    InvalidEmailError,
    InvalidPasswordError,
    TokenGoneError,
)
from catalog.domain.users.policies import (
    CHANGE_TOKEN_TTL,
    EMAIL_CHANGE_COOLDOWN,
    cooldown_active,
    is_valid_email,
)
from catalog.domain.users.repositories import (
    AccessTokenIssuer,
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.domain.users.updates import SetEmail, SetLastEmailChange
from catalog.shared.utils.clock import Clock, unix_now

from .common import apply_update, deliver, new_verification_code, require_user


class RequestEmailChangeUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        access_tokens: AccessTokenIssuer,
        mail: MailSender,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._access_tokens = access_tokens
        self._mail = mail
        self._clock = clock

    async def execute(self, username: str, new_email: str, password: str) -> OperationResult:
        user = require_user(self._users, username)
        now = self._clock()
        if cooldown_active(user.last_email_change, EMAIL_CHANGE_COOLDOWN, now):
            raise CooldownActiveError(
                status=HTTPStatus.TOO_MANY_REQUESTS,
                message="you have requested an email change recently, try again later",
            )
        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidPasswordError()
        if not is_valid_email(new_email):
            raise InvalidEmailError()

        code = new_verification_code()
        self._tokens.create(
            VerificationToken(
                username=username,
                value=code,
                type=TokenType.EMAIL_CHANGE,
                expiration=now + CHANGE_TOKEN_TTL,
                new_email=new_email,
            )
        )
        await deliver(
            "email_change",
            username,
            self._mail.send_email_change_verification(new_email, username, code),
        )
        apply_update(self._users, username, SetLastEmailChange(now))

        access = self._access_tokens.issue_access(replace(user, last_email_change=now).claims())
        return OperationResult.success(
            "verification email sent to new email address",
            accessToken=access,
            user=self._access_tokens.decode(access).to_payload(),
        )


class VerifyEmailChangeUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._clock = clock

    async def execute(self, code: str) -> OperationResult:
        token = self._tokens.get(code)
        if token is None or not token.is_a(TokenType.EMAIL_CHANGE) or not token.new_email:
            raise TokenGoneError()
        if token.is_expired(self._clock()):
            self._tokens.delete(code)
            raise TokenGoneError()

        require_user(self._users, token.username)
        apply_update(self._users, token.username, SetEmail(token.new_email))
        self._tokens.delete(code)
        return OperationResult.success("email address successfully updated")
