# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.results import OperationResult
from catalog.domain.users.repositories import UserRepository

from .common import require_user


class GetProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    async def execute(self, username: str) -> OperationResult:
        user = require_user(self._users, username)
        return OperationResult.success("user found", user=user.public_view())

    def is_liked_by_user(self, username: str, article_id: str) -> bool:
        user = self._users.find_by_username(username)
        return user is not None and article_id in user.liked_article_ids
