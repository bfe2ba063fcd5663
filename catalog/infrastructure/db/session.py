# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.shared.config import load_config
from catalog.shared.logging import logger

SessionFactory = Callable[[], Session]


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(url: str | None = None) -> Engine:
    database = load_config().database
    url = url or database.url
    if _is_memory_sqlite(url):
        # One shared connection, otherwise every checkout sees an empty database.
        return create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": int(database.pool_timeout)}
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


ENGINE: Engine = build_engine()
SessionLocal = scoped_session(build_session_factory(ENGINE))


@contextmanager
def session_scope(factory: SessionFactory | None = None) -> Iterator[Session]:
    session = (factory or SessionLocal)()
    logger.debug("db.session: opened session")
    try:
        yield session
        session.commit()
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        if factory is None:
            SessionLocal.remove()
        logger.debug("db.session: closed session")


def init_db(engine: Engine | None = None) -> None:
    # Models must be registered on Base before create_all.
    from catalog.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")
