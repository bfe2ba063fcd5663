# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Article tables as seen by account operations.

Only the author related columns are touched here: listing an author's
articles, re-pointing their author picture and removing them all.
"""

from __future__ import annotations

import asyncio

from sqlalchemy import delete, select, update

from catalog.application.interfaces import ArticleCollection, ArticleStore
from catalog.application.results import OperationResult
from catalog.infrastructure.db.models import ArticlePublishedRow, ArticleUnpublishedRow
from catalog.infrastructure.db.session import SessionFactory, session_scope
from catalog.shared.logging import logger

_TABLES = {
    ArticleCollection.PUBLISHED: ArticlePublishedRow,
    ArticleCollection.UNPUBLISHED: ArticleUnpublishedRow,
}


class SqlAlchemyArticleStore(ArticleStore):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory

    async def query_by_author(self, collection: ArticleCollection, username: str) -> list[str]:
        return await asyncio.to_thread(self._query_by_author, collection, username)

    async def update_author_picture_link(
        self, collection: ArticleCollection, article_id: str, new_url: str
    ) -> None:
        await asyncio.to_thread(self._update_author_picture_link, collection, article_id, new_url)

    async def remove_all_by_user(self, username: str) -> OperationResult:
        removed = await asyncio.to_thread(self._remove_all_by_user, username)
        logger.info(f"articles.repo: removed username={username} count={removed}")
        return OperationResult.success("articles removed", removed=removed)

    def _query_by_author(self, collection: ArticleCollection, username: str) -> list[str]:
        table = _TABLES[collection]
        with session_scope(self._session_factory) as session:
            return list(session.scalars(select(table.id).where(table.author == username)).all())

    def _update_author_picture_link(
        self, collection: ArticleCollection, article_id: str, new_url: str
    ) -> None:
        table = _TABLES[collection]
        with session_scope(self._session_factory) as session:
            session.execute(
                update(table).where(table.id == article_id).values(author_profile_pic=new_url)
            )

    def _remove_all_by_user(self, username: str) -> int:
        removed = 0
        with session_scope(self._session_factory) as session:
            for table in _TABLES.values():
                result = session.execute(delete(table).where(table.author == username))
                removed += result.rowcount or 0
        return removed


__all__ = ["SqlAlchemyArticleStore"]
