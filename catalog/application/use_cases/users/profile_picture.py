# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Profile picture replacement.

The change runs as an ordered flow without rollback: the cooldown stamp is
written first, so a failure in any later step still consumes the weekly
allowance.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import replace
from http import HTTPStatus

from catalog.application.interfaces import ArticleCollection, ArticleStore, ObjectStore
from catalog.application.results import OperationResult
from catalog.application.saga import SagaStep, run_saga
from catalog.domain.users.exceptions import CooldownActiveError
from catalog.domain.users.policies import (
    PROFILE_PICTURE_SIZE,
    profile_picture_change_allowed,
    profile_picture_url,
    replaceable_image_id,
)
from catalog.domain.users.repositories import AccessTokenIssuer, UserRepository
from catalog.domain.users.updates import SetProfilePicture, SetProfilePictureChangedAt
from catalog.shared.errors import InfrastructureError
from catalog.shared.utils.clock import Clock, unix_now

from .common import apply_update, require_user


class ObjectStoreError(InfrastructureError):
    def __init__(self, operation: str, object_id: str) -> None:
        super().__init__("object_store_failed")
        self.operation = operation
        self.object_id = object_id


async def relink_author_articles(articles: ArticleStore, username: str, new_url: str) -> int:
    """Point the author picture of every article by ``username`` at ``new_url``."""

    collections = tuple(ArticleCollection)
    found = await asyncio.gather(
        *(articles.query_by_author(collection, username) for collection in collections)
    )
    updates = [
        articles.update_author_picture_link(collection, article_id, new_url)
        for collection, article_ids in zip(collections, found)
        for article_id in article_ids
    ]
    await asyncio.gather(*updates)
    return len(updates)


class ChangeProfilePictureUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        objects: ObjectStore,
        articles: ArticleStore,
        access_tokens: AccessTokenIssuer,
        asset_base_url: str,
        clock: Clock = unix_now,
    ) -> None:
        self._users = users
        self._objects = objects
        self._articles = articles
        self._access_tokens = access_tokens
        self._asset_base_url = asset_base_url
        self._clock = clock

    async def execute(self, username: str, image_data: bytes) -> OperationResult:
        user = require_user(self._users, username)
        now = self._clock()
        if not profile_picture_change_allowed(user.profile_picture_changed_at, now):
            raise CooldownActiveError(
                status=HTTPStatus.FORBIDDEN,
                message="the user profile picture was changed in the last week",
            )

        image_id = str(uuid.uuid4())
        new_url = profile_picture_url(self._asset_base_url, image_id)

        async def stamp_cooldown() -> None:
            apply_update(self._users, username, SetProfilePictureChangedAt(now))

        async def remove_previous() -> None:
            previous_id = replaceable_image_id(user.profile_picture_url)
            if previous_id is not None and not await self._objects.remove(previous_id):
                raise ObjectStoreError("remove", previous_id)

        async def store_new() -> None:
            width, height = PROFILE_PICTURE_SIZE
            if not await self._objects.store(image_id, image_data, width, height):
                raise ObjectStoreError("store", image_id)

        async def relink_articles() -> None:
            if user.can_post or user.admin:
                await relink_author_articles(self._articles, username, new_url)

        async def point_user() -> None:
            apply_update(self._users, username, SetProfilePicture(new_url))

        await run_saga(
            "profile_picture",
            [
                SagaStep("stamp_cooldown", stamp_cooldown),
                SagaStep("remove_previous", remove_previous),
                SagaStep("store_new", store_new),
                SagaStep("relink_articles", relink_articles),
                SagaStep("point_user", point_user),
            ],
        )

        updated = replace(user, profile_picture_url=new_url, profile_picture_changed_at=now)
        return OperationResult.success(
            "profile picture updated",
            accessToken=self._access_tokens.issue_access(updated.claims()),
            user=updated.public_view(),
        )
