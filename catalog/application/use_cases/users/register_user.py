# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.interfaces import MailSender
from catalog.application.results import OperationResult
from catalog.domain.users.entities import TokenType, User, VerificationToken
from catalog.domain.users.exceptions import (
    InvalidEmailError,
    PasswordTooShortError,
    UsernameTakenError,
)
from catalog.domain.users.policies import is_valid_email, is_valid_password
from catalog.domain.users.repositories import (
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.shared.utils.clock import Clock, unix_now

from .common import deliver, new_verification_code


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        mail: MailSender,
        default_picture_url: str,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._mail = mail
        self._default_picture_url = default_picture_url
        self._clock = clock

    async def execute(
        self,
        username: str,
        password: str,
        email: str,
        *,
        can_post: bool = True,
        admin: bool = False,
    ) -> OperationResult:
        if not is_valid_email(email):
            raise InvalidEmailError()
        if not is_valid_password(password):
            raise PasswordTooShortError()
        if self._users.find_by_username(username) is not None:
            raise UsernameTakenError()

        now = self._clock()
        user = User(
            username=username,
            password_hash=self._password_hasher.hash(password),
            email=email,
            profile_picture_url=self._default_picture_url,
            account_created_at=now,
            admin=admin,
            can_post=can_post,
            verified=False,
            last_password_change=now,
            last_email_change=now,
        )
        self._users.add(user)

        code = new_verification_code()
        self._tokens.create(
            VerificationToken(
                username=username, value=code, type=TokenType.EMAIL_VERIFICATION
            )
        )
        await deliver("verification", username, self._mail.send_verification(email, username, code))
        return OperationResult.success("user registered successfully")
