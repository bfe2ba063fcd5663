# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from catalog.application.results import OperationResult
from catalog.domain.users.repositories import AccessTokenIssuer, UserRepository

from .common import require_user


class RefreshSessionUseCase:
    """Exchange a refresh token for an access token built from current user data."""

    def __init__(self, *, users: UserRepository, access_tokens: AccessTokenIssuer) -> None:
        self._users = users
        self._access_tokens = access_tokens

    async def execute(self, refresh_token: str) -> OperationResult:
        claims = self._access_tokens.verify_refresh(refresh_token)
        user = require_user(self._users, claims.username)
        fresh = user.claims()
        return OperationResult.success(
            "session refreshed",
            accessToken=self._access_tokens.issue_access(fresh),
            user=fresh.to_payload(),
        )
