# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Single entry point for every account operation.

Each operation returns an ``OperationResult``. Domain rejections keep their
own status and message, anything unexpected is logged and reported as a
server error so no exception ever leaves the manager.
"""

from __future__ import annotations

from collections.abc import Awaitable

from catalog.application.interfaces import ArticleStore, MailSender, ObjectStore
from catalog.application.results import OperationResult
from catalog.application.use_cases.users import (
    AuthenticateUserUseCase,
    ChangePasswordUseCase,
    ChangeProfilePictureUseCase,
    DeleteAccountUseCase,
    GetProfileUseCase,
    RefreshSessionUseCase,
    RegisterUserUseCase,
    RequestEmailChangeUseCase,
    ResendVerificationEmailUseCase,
    ResetPasswordUseCase,
    SendPasswordResetEmailUseCase,
    VerifyEmailChangeUseCase,
    VerifyEmailUseCase,
)
from catalog.domain.users.entities import User
from catalog.domain.users.policies import default_profile_picture_url
from catalog.domain.users.repositories import (
    AccessTokenIssuer,
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.infrastructure.observability import record_account_operation
from catalog.shared.errors import AppError
from catalog.shared.logging import logger
from catalog.shared.utils.clock import Clock, unix_now


class AccountManager:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        access_tokens: AccessTokenIssuer,
        objects: ObjectStore,
        mail: MailSender,
        articles: ArticleStore,
        asset_base_url: str,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._register = RegisterUserUseCase(
            users=users,
            tokens=tokens,
            password_hasher=password_hasher,
            mail=mail,
            default_picture_url=default_profile_picture_url(asset_base_url),
            clock=clock,
        )
        self._authenticate = AuthenticateUserUseCase(
            users=users, password_hasher=password_hasher, access_tokens=access_tokens
        )
        self._refresh = RefreshSessionUseCase(users=users, access_tokens=access_tokens)
        self._change_password = ChangePasswordUseCase(
            users=users, password_hasher=password_hasher, clock=clock
        )
        self._change_profile_picture = ChangeProfilePictureUseCase(
            users=users,
            objects=objects,
            articles=articles,
            access_tokens=access_tokens,
            asset_base_url=asset_base_url,
            clock=clock,
        )
        self._verify_email = VerifyEmailUseCase(users=users, tokens=tokens)
        self._resend_verification = ResendVerificationEmailUseCase(
            users=users, tokens=tokens, mail=mail
        )
        self._request_email_change = RequestEmailChangeUseCase(
            users=users,
            tokens=tokens,
            password_hasher=password_hasher,
            access_tokens=access_tokens,
            mail=mail,
            clock=clock,
        )
        self._verify_email_change = VerifyEmailChangeUseCase(users=users, tokens=tokens, clock=clock)
        self._send_password_reset = SendPasswordResetEmailUseCase(
            users=users, tokens=tokens, access_tokens=access_tokens, mail=mail, clock=clock
        )
        self._reset_password = ResetPasswordUseCase(
            users=users, tokens=tokens, password_hasher=password_hasher, mail=mail, clock=clock
        )
        self._delete_account = DeleteAccountUseCase(
            users=users,
            tokens=tokens,
            password_hasher=password_hasher,
            objects=objects,
            articles=articles,
        )
        self._profile = GetProfileUseCase(users=users)

    async def register(
        self,
        username: str,
        password: str,
        email: str,
        *,
        can_post: bool = True,
        admin: bool = False,
    ) -> OperationResult:
        return await self._run(
            "register",
            self._register.execute(username, password, email, can_post=can_post, admin=admin),
        )

    async def authenticate(self, username: str, password: str) -> OperationResult:
        return await self._run("authenticate", self._authenticate.execute(username, password))

    async def refresh_access_token(self, refresh_token: str) -> OperationResult:
        return await self._run("refresh", self._refresh.execute(refresh_token))

    async def change_password(
        self, username: str, old_password: str, new_password: str
    ) -> OperationResult:
        return await self._run(
            "change_password",
            self._change_password.execute(username, old_password, new_password),
        )

    async def change_profile_picture(self, username: str, image_data: bytes) -> OperationResult:
        return await self._run(
            "change_profile_picture",
            self._change_profile_picture.execute(username, image_data),
        )

    async def verify_email(self, code: str) -> OperationResult:
        return await self._run("verify_email", self._verify_email.execute(code))

    async def resend_verification_email(self, username: str) -> OperationResult:
        return await self._run(
            "resend_verification", self._resend_verification.execute(username)
        )

    async def request_email_change(
        self, username: str, new_email: str, password: str
    ) -> OperationResult:
        return await self._run(
            "request_email_change",
            self._request_email_change.execute(username, new_email, password),
        )

    async def verify_email_change(self, code: str) -> OperationResult:
        return await self._run("verify_email_change", self._verify_email_change.execute(code))

    async def send_password_reset_email(self, username: str) -> OperationResult:
        return await self._run(
            "send_password_reset", self._send_password_reset.execute(username)
        )

    async def reset_password(self, code: str) -> OperationResult:
        return await self._run("reset_password", self._reset_password.execute(code))

    async def delete_account(self, username: str, password: str) -> OperationResult:
        return await self._run(
            "delete_account", self._delete_account.execute(username, password)
        )

    async def get_profile(self, username: str) -> OperationResult:
        return await self._run("get_profile", self._profile.execute(username))

    def get_user(self, username: str) -> User | None:
        return self._users.find_by_username(username)

    def is_liked_by_user(self, username: str, article_id: str) -> bool:
        return self._profile.is_liked_by_user(username, article_id)

    async def _run(self, operation: str, pending: Awaitable[OperationResult]) -> OperationResult:
        try:
            result = await pending
        except AppError as exc:
            logger.info(
                f"accounts.{operation}: rejected status={int(exc.status)} code={exc.code}"
            )
            result = OperationResult.from_error(exc)
        except Exception:
            logger.exception(f"accounts.{operation}: unexpected failure")
            result = OperationResult.server_error()
        record_account_operation(operation, result.status)
        return result


__all__ = ["AccountManager"]
