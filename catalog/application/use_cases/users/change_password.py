# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.results import OperationResult
from catalog.domain.users.exceptions import InvalidPasswordError, PasswordTooShortError
from catalog.domain.users.policies import is_valid_password
from catalog.domain.users.repositories import PasswordHasher, UserRepository
from catalog.domain.users.updates import SetLastPasswordChange, SetPasswordHash
from catalog.shared.utils.clock import Clock, unix_now

from .common import apply_update, require_user


class ChangePasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock

    async def execute(self, username: str, old_password: str, new_password: str) -> OperationResult:
        user = require_user(self._users, username)
        if not self._password_hasher.verify(old_password, user.password_hash):
            raise InvalidPasswordError()
        if not is_valid_password(new_password):
            raise PasswordTooShortError()

        apply_update(self._users, username, SetPasswordHash(self._password_hasher.hash(new_password)))
        apply_update(self._users, username, SetLastPasswordChange(self._clock()))
        return OperationResult.success("password changed successfully")
