# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.results import OperationResult
from catalog.domain.users.exceptions import InvalidCredentialsError
from catalog.domain.users.repositories import AccessTokenIssuer, PasswordHasher, UserRepository


class AuthenticateUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        access_tokens: AccessTokenIssuer,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._access_tokens = access_tokens

    async def execute(self, username: str, password: str) -> OperationResult:
        user = self._users.find_by_username(username)
        # Unknown user and wrong password are indistinguishable to the caller.
        if user is None or not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        claims = user.claims()
        access = self._access_tokens.issue_access(claims)
        refresh = self._access_tokens.issue_refresh(claims)
        return OperationResult.success(
            "logged in successfully",
            accessToken=access,
            refreshToken=refresh,
            user=self._access_tokens.decode(access).to_payload(),
        )
