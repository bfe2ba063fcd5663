# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import SessionClaims, User, VerificationToken
from .updates import UserFieldUpdate


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update(self, username: str, change: UserFieldUpdate) -> bool: ...
    def delete(self, username: str) -> bool: ...


class VerificationTokenRepository(Protocol):
    def create(self, token: VerificationToken) -> None: ...
    def get(self, value: str) -> VerificationToken | None: ...
    def delete(self, value: str) -> None: ...
    def delete_all_for_user(self, username: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class AccessTokenIssuer(Protocol):
    def issue_access(self, claims: SessionClaims) -> str: ...
    def issue_refresh(self, claims: SessionClaims) -> str: ...
    def decode(self, token: str) -> SessionClaims: ...
    def verify(self, token: str) -> SessionClaims: ...
    def verify_refresh(self, token: str) -> SessionClaims: ...
