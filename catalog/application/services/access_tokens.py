# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens.

Access and refresh tokens carry the same claims and differ only in their
signing secret and lifetime. ``decode`` reads claims without checking the
signature and must only be applied to tokens this process just issued.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import jwt

from catalog.domain.users.entities import SessionClaims
from catalog.domain.users.repositories import AccessTokenIssuer
from catalog.shared.config import INSECURE_DEFAULT_SECRET
from catalog.shared.config.settings import TokenConfig
from catalog.shared.errors.base import DomainError
from catalog.shared.logging import logger
from catalog.shared.utils.clock import Clock, unix_now


class TokenExpiredError(DomainError):
    code = "token_expired"
    status = HTTPStatus.UNAUTHORIZED
    message = "token expired"


class TokenInvalidError(DomainError):
    code = "token_invalid"
    status = HTTPStatus.FORBIDDEN
    message = "invalid token"


class MissingSigningSecretError(RuntimeError):
    pass


@dataclass(slots=True, frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: int = 30 * 60
    refresh_ttl: int = 3 * 24 * 60 * 60

    @classmethod
    def from_config(cls, config: TokenConfig, *, allow_insecure: bool) -> TokenSettings:
        access = config.access_secret
        refresh = config.refresh_secret
        if not access or not refresh:
            if not allow_insecure:
                raise MissingSigningSecretError(
                    "JWT_KEY and JWT_REFRESH_KEY must be set when insecure secrets are not allowed"
                )
            logger.warning(
                "tokens: signing secret missing, falling back to the insecure default secret"
            )
            access = access or INSECURE_DEFAULT_SECRET
            refresh = refresh or INSECURE_DEFAULT_SECRET
        return cls(
            access_secret=access,
            refresh_secret=refresh,
            algorithm=config.algorithm,
            access_ttl=config.access_ttl_seconds,
            refresh_ttl=config.refresh_ttl_seconds,
        )


class JwtAccessTokenIssuer(AccessTokenIssuer):
    def __init__(self, settings: TokenSettings, *, clock: Clock = unix_now) -> None:
        self._settings = settings
        self._clock = clock

    def issue_access(self, claims: SessionClaims) -> str:
        return self._sign(claims, self._settings.access_secret, self._settings.access_ttl)

    def issue_refresh(self, claims: SessionClaims) -> str:
        return self._sign(claims, self._settings.refresh_secret, self._settings.refresh_ttl)

    def decode(self, token: str) -> SessionClaims:
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError() from exc
        return _claims_from(payload)

    def verify(self, token: str) -> SessionClaims:
        return self._verify(token, self._settings.access_secret)

    def verify_refresh(self, token: str) -> SessionClaims:
        return self._verify(token, self._settings.refresh_secret)

    def _sign(self, claims: SessionClaims, secret: str, ttl: int) -> str:
        issued_at = self._clock()
        payload = claims.to_payload()
        payload["iat"] = issued_at
        payload["exp"] = issued_at + ttl
        return jwt.encode(payload, secret, algorithm=self._settings.algorithm)

    def _verify(self, token: str, secret: str) -> SessionClaims:
        try:
            payload = jwt.decode(token, secret, algorithms=[self._settings.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError() from exc
        return _claims_from(payload)


def _claims_from(payload: Mapping[str, Any]) -> SessionClaims:
    try:
        return SessionClaims.from_payload(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise TokenInvalidError() from exc


__all__ = [
    "JwtAccessTokenIssuer",
    "MissingSigningSecretError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenSettings",
]
