# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from sqlalchemy import JSON, BigInteger, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog.infrastructure.db.session import Base


class UserRow(Base):
    __tablename__ = "users"
    username: Mapped[str] = mapped_column(String(64), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    email: Mapped[str] = mapped_column(String(254), index=True)
    profile_picture_url: Mapped[str] = mapped_column(String(512))
    account_created_at: Mapped[int] = mapped_column(BigInteger)
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    can_post: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="1")
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    last_password_change: Mapped[int] = mapped_column(BigInteger, default=0)
    last_email_change: Mapped[int] = mapped_column(BigInteger, default=0)
    liked_article_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    profile_picture_changed_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class VerificationTokenRow(Base):
    __tablename__ = "verification_tokens"
    value: Mapped[str] = mapped_column(String(128), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), index=True)
    type: Mapped[str] = mapped_column(String(32))
    expiration: Mapped[int] = mapped_column(BigInteger, default=0)
    new_email: Mapped[str | None] = mapped_column(String(254), nullable=True)


class _ArticleColumns:
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    author: Mapped[str] = mapped_column(String(64), index=True)
    author_profile_pic: Mapped[str] = mapped_column(String(512))
    title: Mapped[str] = mapped_column(String(256), default="")
    body: Mapped[str] = mapped_column(Text, default="")


class ArticlePublishedRow(_ArticleColumns, Base):
    __tablename__ = "articles_published"


class ArticleUnpublishedRow(_ArticleColumns, Base):
    __tablename__ = "articles_unpublished"
