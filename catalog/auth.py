# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Cookie based request authentication for the HTTP layer."""

import inspect
from functools import wraps
from http import HTTPStatus

from flask import g, jsonify, request

from catalog.domain.users.entities import SessionClaims
from catalog.domain.users.repositories import AccessTokenIssuer
from catalog.shared.errors import AppError
from catalog.shared.errors.http import error_envelope
from catalog.shared.logging import logger

TOKEN_COOKIE = "token"
REFRESH_COOKIE = "refresh_token"


def _reject(status: HTTPStatus, message: str):
    return jsonify(error_envelope(status, message)), status


async def _call(view, args, kwargs):
    result = view(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def current_user() -> SessionClaims | None:
    """Claims attached by the gate, ``None`` for anonymous requests."""
    return g.get("user")


class RequestGate:
    def __init__(self, access_tokens: AccessTokenIssuer) -> None:
        self._access_tokens = access_tokens

    def required(self, *, verified: bool = True):
        def decorator(view):
            @wraps(view)
            async def inner(*args, **kwargs):
                token = request.cookies.get(TOKEN_COOKIE)
                if not token:
                    logger.warning(f"No token cookie on {request.method} {request.path}")
                    return _reject(HTTPStatus.BAD_REQUEST, "missing authentication token")

                try:
                    claims = self._access_tokens.verify(token)
                except AppError as exc:
                    logger.warning(
                        f"Auth failed ({exc.code}) on {request.method} {request.path}"
                    )
                    return _reject(exc.status, exc.public_message)

                if verified and not claims.verified:
                    logger.info(
                        f"Unverified account {claims.username} on {request.method} {request.path}"
                    )
                    return _reject(HTTPStatus.FORBIDDEN, "account not verified")

                g.user = claims
                logger.debug(f"Auth OK: user={claims.username} {request.method} {request.path}")
                return await _call(view, args, kwargs)

            return inner

        return decorator

    def optional(self, view):
        @wraps(view)
        async def inner(*args, **kwargs):
            token = request.cookies.get(TOKEN_COOKIE)
            if not token:
                g.user = None
                return await _call(view, args, kwargs)

            try:
                claims = self._access_tokens.verify(token)
            except AppError as exc:
                logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
                return _reject(exc.status, exc.public_message)

            g.user = claims
            return await _call(view, args, kwargs)

        return inner


__all__ = ["REFRESH_COOKIE", "TOKEN_COOKIE", "RequestGate", "current_user"]
