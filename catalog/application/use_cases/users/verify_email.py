# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.interfaces import MailSender
from catalog.application.results import OperationResult
from catalog.domain.users.entities import TokenType, VerificationToken
from catalog.domain.users.exceptions import AlreadyVerifiedError, TokenNotFoundError
from catalog.domain.users.repositories import UserRepository, VerificationTokenRepository
from catalog.domain.users.updates import SetVerified

from .common import apply_update, deliver, new_verification_code, require_user


class VerifyEmailUseCase:
    def __init__(self, *, users: UserRepository, tokens: VerificationTokenRepository) -> None:
        self._users = users
        self._tokens = tokens

    async def execute(self, code: str) -> OperationResult:
        token = self._tokens.get(code)
        if token is None or not token.is_a(TokenType.EMAIL_VERIFICATION):
            raise TokenNotFoundError()

        user = require_user(self._users, token.username)
        if user.verified:
            raise AlreadyVerifiedError()

        apply_update(self._users, user.username, SetVerified())
        self._tokens.delete(code)
        return OperationResult.success("email verified")


class ResendVerificationEmailUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        mail: MailSender,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._mail = mail

    async def execute(self, username: str) -> OperationResult:
        user = require_user(self._users, username)
        if user.verified:
            raise AlreadyVerifiedError()

        code = new_verification_code()
        self._tokens.create(
            VerificationToken(username=username, value=code, type=TokenType.EMAIL_VERIFICATION)
        )
        await deliver(
            "verification", username, self._mail.send_verification(user.email, username, code)
        )
        return OperationResult.success("verification email sent")
