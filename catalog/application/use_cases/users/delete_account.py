# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from catalog.application.interfaces import ArticleStore, ObjectStore
from catalog.application.results import OperationFailedError, OperationResult
from catalog.application.saga import SagaStep, run_saga
from catalog.domain.users.exceptions import InvalidPasswordError, UserNotFoundError
from catalog.domain.users.policies import is_default_profile_picture, stored_image_id
from catalog.domain.users.repositories import (
    PasswordHasher,
    UserRepository,
    VerificationTokenRepository,
)
from catalog.shared.errors import InfrastructureError

from .profile_picture import ObjectStoreError


class AccountNotFoundError(UserNotFoundError):
    message = "account not found"


class DeleteAccountUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        objects: ObjectStore,
        articles: ArticleStore,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._objects = objects
        self._articles = articles

    async def execute(self, username: str, password: str) -> OperationResult:
        user = self._users.find_by_username(username)
        if user is None:
            raise AccountNotFoundError()
        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidPasswordError(status=HTTPStatus.FORBIDDEN)

        async def remove_picture() -> None:
            image_id = stored_image_id(user.profile_picture_url)
            if image_id is None or is_default_profile_picture(user.profile_picture_url):
                return
            if not await self._objects.remove(image_id):
                raise ObjectStoreError("remove", image_id)

        async def remove_tokens() -> None:
            if not self._tokens.delete_all_for_user(username):
                raise InfrastructureError("token_cleanup_failed")

        async def remove_articles() -> None:
            result = await self._articles.remove_all_by_user(username)
            if not result.ok:
                raise OperationFailedError(result)

        async def remove_user() -> None:
            if not self._users.delete(username):
                raise AccountNotFoundError()

        await run_saga(
            "delete_account",
            [
                SagaStep("remove_picture", remove_picture),
                SagaStep("remove_tokens", remove_tokens),
                SagaStep("remove_articles", remove_articles),
                SagaStep("remove_user", remove_user),
            ],
        )
        return OperationResult.success("account deleted successfully")
