# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog.domain.users.entities import TokenType, User, VerificationToken
from catalog.domain.users.exceptions import UsernameTakenError
from catalog.domain.users.repositories import UserRepository, VerificationTokenRepository
from catalog.domain.users.updates import UserFieldUpdate, column_value
from catalog.infrastructure.db.models import UserRow, VerificationTokenRow
from catalog.infrastructure.db.session import SessionFactory, session_scope
from catalog.shared.logging import logger


def _to_domain_user(row: UserRow) -> User:
    return User(
        username=row.username,
        password_hash=row.password_hash,
        email=row.email,
        profile_picture_url=row.profile_picture_url,
        account_created_at=row.account_created_at,
        admin=bool(row.admin),
        can_post=bool(row.can_post),
        verified=bool(row.verified),
        last_password_change=row.last_password_change or 0,
        last_email_change=row.last_email_change or 0,
        liked_article_ids=tuple(row.liked_article_ids or ()),
        profile_picture_changed_at=row.profile_picture_changed_at,
    )


def _to_domain_token(row: VerificationTokenRow) -> VerificationToken:
    return VerificationToken(
        username=row.username,
        value=row.value,
        type=TokenType(row.type),
        expiration=row.expiration or 0,
        new_email=row.new_email,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> User | None:
        with session_scope(self._session_factory) as session:
            row = session.get(UserRow, username)
            return _to_domain_user(row) if row else None

    def add(self, user: User) -> User:
        try:
            with session_scope(self._session_factory) as session:
                session.add(
                    UserRow(
                        username=user.username,
                        password_hash=user.password_hash,
                        email=user.email,
                        profile_picture_url=user.profile_picture_url,
                        account_created_at=user.account_created_at,
                        admin=user.admin,
                        can_post=user.can_post,
                        verified=user.verified,
                        last_password_change=user.last_password_change,
                        last_email_change=user.last_email_change,
                        liked_article_ids=list(user.liked_article_ids),
                        profile_picture_changed_at=user.profile_picture_changed_at,
                    )
                )
        except IntegrityError as exc:
            raise UsernameTakenError() from exc
        logger.info(f"users.repo: added username={user.username}")
        return user

    def update(self, username: str, change: UserFieldUpdate) -> bool:
        column, value = column_value(change)
        if column == "liked_article_ids":
            value = list(value)
        with session_scope(self._session_factory) as session:
            row = session.get(UserRow, username)
            if row is None:
                return False
            setattr(row, column, value)
        logger.debug(f"users.repo: updated username={username} column={column}")
        return True

    def delete(self, username: str) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(UserRow).where(UserRow.username == username))
            removed = (result.rowcount or 0) > 0
        logger.info(f"users.repo: delete username={username} removed={removed}")
        return removed


class SqlAlchemyVerificationTokenRepository(VerificationTokenRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory

    def create(self, token: VerificationToken) -> None:
        # Same value replaces the stored token.
        with session_scope(self._session_factory) as session:
            session.merge(
                VerificationTokenRow(
                    value=token.value,
                    username=token.username,
                    type=token.type.value,
                    expiration=token.expiration,
                    new_email=token.new_email,
                )
            )
        logger.debug(
            f"tokens.repo: created type={token.type.value} username={token.username} "
            f"code={token.value[:8]}…"
        )

    def get(self, value: str) -> VerificationToken | None:
        with session_scope(self._session_factory) as session:
            row = session.get(VerificationTokenRow, value)
            return _to_domain_token(row) if row else None

    def delete(self, value: str) -> None:
        with session_scope(self._session_factory) as session:
            session.execute(delete(VerificationTokenRow).where(VerificationTokenRow.value == value))

    def delete_all_for_user(self, username: str) -> bool:
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(
                    delete(VerificationTokenRow).where(VerificationTokenRow.username == username)
                )
                removed = result.rowcount or 0
        except SQLAlchemyError:
            logger.exception(f"tokens.repo: purge failed username={username}")
            return False
        logger.info(f"tokens.repo: purged username={username} count={removed}")
        return True
