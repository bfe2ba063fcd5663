# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine

from catalog.application.account_manager import AccountManager
from catalog.application.interfaces import ArticleStore, MailSender, ObjectStore
from catalog.application.services.access_tokens import JwtAccessTokenIssuer, TokenSettings
from catalog.application.services.password_hashing import WerkzeugPasswordHasher
from catalog.auth import RequestGate
from catalog.infrastructure.db.session import (
    ENGINE,
    SessionFactory,
    SessionLocal,
    build_session_factory,
)
from catalog.infrastructure.mail import SmtpMailSender
from catalog.infrastructure.repositories.articles import SqlAlchemyArticleStore
from catalog.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
    SqlAlchemyVerificationTokenRepository,
)
from catalog.infrastructure.storage import LocalImageStore
from catalog.interfaces.http.controllers.accounts_controller import AccountsController
from catalog.interfaces.http.controllers.misc_controller import MiscController
from catalog.shared.config import AppConfig, load_config
from catalog.shared.utils.clock import Clock, unix_now


class Container:
    def __init__(
        self,
        *,
        config: AppConfig | None = None,
        engine: Engine | None = None,
        mail: MailSender | None = None,
        objects: ObjectStore | None = None,
        articles: ArticleStore | None = None,
        clock: Clock = unix_now,
    ) -> None:
        self._config = config
        self._engine = engine
        self._mail = mail
        self._objects = objects
        self._articles = articles
        self._clock = clock

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def engine(self) -> Engine:
        return self._engine or ENGINE

    @cached_property
    def session_factory(self) -> SessionFactory:
        if self._engine is None:
            return SessionLocal
        return build_session_factory(self._engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_settings(self) -> TokenSettings:
        return TokenSettings.from_config(
            self.config.tokens, allow_insecure=self.config.insecure_secrets_allowed()
        )

    @cached_property
    def access_tokens(self) -> JwtAccessTokenIssuer:
        return JwtAccessTokenIssuer(self.token_settings, clock=self._clock)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def verification_token_repository(self) -> SqlAlchemyVerificationTokenRepository:
        return SqlAlchemyVerificationTokenRepository(self.session_factory)

    @cached_property
    def article_store(self) -> ArticleStore:
        return self._articles or SqlAlchemyArticleStore(self.session_factory)

    @cached_property
    def object_store(self) -> ObjectStore:
        return self._objects or LocalImageStore(self.config.ensure_storage_dirs())

    @cached_property
    def mail_sender(self) -> MailSender:
        return self._mail or SmtpMailSender(self.config.mail)

    @cached_property
    def account_manager(self) -> AccountManager:
        return AccountManager(
            users=self.user_repository,
            tokens=self.verification_token_repository,
            password_hasher=self.password_hasher,
            access_tokens=self.access_tokens,
            objects=self.object_store,
            mail=self.mail_sender,
            articles=self.article_store,
            asset_base_url=self.config.storage.public_asset_url,
            clock=self._clock,
        )

    @cached_property
    def request_gate(self) -> RequestGate:
        return RequestGate(self.access_tokens)

    @cached_property
    def accounts_controller(self) -> AccountsController:
        return AccountsController(manager=self.account_manager, gate=self.request_gate)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(session_factory=self.session_factory)


container = Container()

__all__ = ["Container", "container"]
