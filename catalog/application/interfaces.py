# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum
from typing import Protocol

from .results import OperationResult


class ArticleCollection(str, Enum):
    PUBLISHED = "articles_published"
    UNPUBLISHED = "articles_unpublished"


class ObjectStore(Protocol):
    async def store(self, object_id: str, image_data: bytes, width: int, height: int) -> bool: ...

    async def remove(self, object_id: str) -> bool: ...


class MailSender(Protocol):
    async def send_verification(self, email: str, username: str, code: str) -> bool: ...

    async def send_email_change_verification(
        self, email: str, username: str, code: str
    ) -> bool: ...

    async def send_password_reset(self, email: str, username: str, code: str) -> bool: ...

    async def send_new_password(self, email: str, username: str, password: str) -> bool: ...


class ArticleStore(Protocol):
    async def query_by_author(
        self, collection: ArticleCollection, username: str
    ) -> list[str]: ...

    async def update_author_picture_link(
        self, collection: ArticleCollection, article_id: str, new_url: str
    ) -> None: ...

    async def remove_all_by_user(self, username: str) -> OperationResult: ...
