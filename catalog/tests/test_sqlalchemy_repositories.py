from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import func, select

from catalog.application.interfaces import ArticleCollection
from catalog.domain.users.entities import TokenType, User, VerificationToken
from catalog.domain.users.exceptions import UsernameTakenError
from catalog.domain.users.updates import (
    SetEmail,
    SetLikedArticles,
    SetProfilePictureChangedAt,
    SetVerified,
)
from catalog.infrastructure.db import build_engine, build_session_factory, init_db, session_scope
from catalog.infrastructure.db.models import (
    ArticlePublishedRow,
    ArticleUnpublishedRow,
    VerificationTokenRow,
)
from catalog.infrastructure.repositories.articles import SqlAlchemyArticleStore
from catalog.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
    SqlAlchemyVerificationTokenRepository,
)


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


def _user(username: str = "alice") -> User:
    return User(
        username=username,
        password_hash="hash",
        email=f"{username}@x.com",
        profile_picture_url="http://assets.test/static/images/pfp.png",
        account_created_at=1_700_000_000,
        last_password_change=1_700_000_000,
        last_email_change=1_700_000_000,
    )


def test_user_round_trip_and_updates(session_factory) -> None:
    users = SqlAlchemyUserRepository(session_factory)
    users.add(_user())

    stored = users.find_by_username("alice")
    assert stored == _user()
    assert stored.verified is False
    assert stored.can_post is True

    assert users.update("alice", SetVerified())
    assert users.update("alice", SetEmail("new@x.com"))
    assert users.update("alice", SetLikedArticles(["a1", "a2"]))
    assert users.update("alice", SetProfilePictureChangedAt(1_700_000_100))

    updated = users.find_by_username("alice")
    assert updated.verified is True
    assert updated.email == "new@x.com"
    assert updated.liked_article_ids == ("a1", "a2")
    assert updated.profile_picture_changed_at == 1_700_000_100
    assert updated.password_hash == "hash"


def test_user_update_and_delete_report_missing_rows(session_factory) -> None:
    users = SqlAlchemyUserRepository(session_factory)

    assert users.find_by_username("ghost") is None
    assert users.update("ghost", SetEmail("x@y.z")) is False
    assert users.delete("ghost") is False

    users.add(_user())
    assert users.delete("alice") is True
    assert users.find_by_username("alice") is None


def test_user_update_rejects_unknown_fields(session_factory) -> None:
    users = SqlAlchemyUserRepository(session_factory)
    users.add(_user())

    with pytest.raises(TypeError):
        users.update("alice", ("admin", True))


def test_duplicate_username_is_conflict(session_factory) -> None:
    users = SqlAlchemyUserRepository(session_factory)
    users.add(_user())

    with pytest.raises(UsernameTakenError):
        users.add(_user())


def test_verification_tokens(session_factory) -> None:
    tokens = SqlAlchemyVerificationTokenRepository(session_factory)
    tokens.create(VerificationToken("alice", "v1", TokenType.EMAIL_VERIFICATION))
    tokens.create(
        VerificationToken("alice", "c1", TokenType.EMAIL_CHANGE, 1_700_000_000, "new@x.com")
    )
    tokens.create(VerificationToken("bob", "r1", TokenType.PASSWORD_RESET, 1_700_000_000))

    assert tokens.get("c1") == VerificationToken(
        "alice", "c1", TokenType.EMAIL_CHANGE, 1_700_000_000, "new@x.com"
    )
    assert tokens.get("missing") is None

    tokens.delete("v1")
    assert tokens.get("v1") is None

    assert tokens.delete_all_for_user("alice") is True
    assert tokens.get("c1") is None
    assert tokens.get("r1") is not None


def test_creating_an_existing_code_replaces_it(session_factory) -> None:
    tokens = SqlAlchemyVerificationTokenRepository(session_factory)
    tokens.create(
        VerificationToken("alice", "c1", TokenType.EMAIL_CHANGE, 1_700_000_000, "new@x.com")
    )

    tokens.create(VerificationToken("bob", "c1", TokenType.PASSWORD_RESET, 99))

    assert tokens.get("c1") == VerificationToken("bob", "c1", TokenType.PASSWORD_RESET, 99)
    with session_scope(session_factory) as session:
        assert session.scalar(select(func.count()).select_from(VerificationTokenRow)) == 1


def test_token_purge_reports_storage_failure() -> None:
    engine = build_engine("sqlite://")
    # No tables: every statement fails.
    tokens = SqlAlchemyVerificationTokenRepository(build_session_factory(engine))

    assert tokens.delete_all_for_user("alice") is False
    engine.dispose()


def test_article_store(session_factory) -> None:
    with session_scope(session_factory) as session:
        session.add_all(
            [
                ArticlePublishedRow(id="p1", author="alice", author_profile_pic="old"),
                ArticlePublishedRow(id="p2", author="bob", author_profile_pic="old"),
                ArticleUnpublishedRow(id="u1", author="alice", author_profile_pic="old"),
            ]
        )
    store = SqlAlchemyArticleStore(session_factory)

    async def scenario():
        published = await store.query_by_author(ArticleCollection.PUBLISHED, "alice")
        unpublished = await store.query_by_author(ArticleCollection.UNPUBLISHED, "alice")
        await store.update_author_picture_link(ArticleCollection.PUBLISHED, "p1", "new")
        return published, unpublished

    published, unpublished = asyncio.run(scenario())

    assert published == ["p1"]
    assert unpublished == ["u1"]
    with session_scope(session_factory) as session:
        assert session.get(ArticlePublishedRow, "p1").author_profile_pic == "new"
        assert session.get(ArticlePublishedRow, "p2").author_profile_pic == "old"

    result = asyncio.run(store.remove_all_by_user("alice"))

    assert result.ok
    assert result.payload["removed"] == 2
    with session_scope(session_factory) as session:
        assert session.get(ArticleUnpublishedRow, "u1") is None
        assert session.get(ArticlePublishedRow, "p2") is not None
