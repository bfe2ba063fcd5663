# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Awaitable

from catalog.domain.users.entities import User
from catalog.domain.users.exceptions import UserNotFoundError
from catalog.domain.users.policies import VERIFICATION_CODE_BYTES
from catalog.domain.users.repositories import UserRepository
from catalog.domain.users.updates import UserFieldUpdate
from catalog.shared.logging import logger


def new_verification_code() -> str:
    return secrets.token_hex(VERIFICATION_CODE_BYTES)


def require_user(users: UserRepository, username: str) -> User:
    user = users.find_by_username(username)
    if user is None:
        raise UserNotFoundError()
    return user


def apply_update(users: UserRepository, username: str, change: UserFieldUpdate) -> None:
    if not users.update(username, change):
        raise UserNotFoundError()


async def deliver(kind: str, username: str, sending: Awaitable[bool]) -> bool:
    """Await a mail delivery and only log when it does not go through."""

    try:
        delivered = bool(await sending)
    except Exception:
        logger.exception(f"accounts.mail: {kind} delivery raised username={username}")
        return False
    if not delivered:
        logger.warning(f"accounts.mail: {kind} not delivered username={username}")
    return delivered


__all__ = ["apply_update", "deliver", "new_verification_code", "require_user"]
