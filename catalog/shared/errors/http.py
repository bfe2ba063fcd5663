# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from catalog.shared.config import load_config
from catalog.shared.logging import logger
from catalog.shared.utils.requests import client_ip

from .base import AppError


def error_envelope(status: HTTPStatus | int, message: str) -> dict[str, object]:
    return {"status": int(status), "response": {"message": message}}


def handle_app_error(error: AppError) -> tuple[Response, int]:
    return jsonify(error.to_dict()), int(error.status)


def register_error_handler(app: Flask) -> None:
    """Render every failure leaving a view as the response envelope."""

    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.warning(f"http.rejected: {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code is not None and exc.code < 400:
            return exc
        status = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
        message = (exc.name or "error").lower()
        return jsonify(error_envelope(status, message)), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(
                f"http.unhandled: {request.method} {request.path} from {client_ip()} "
                f"body_size={request.content_length or 0}"
            )
        else:
            logger.error(f"http.unhandled: {type(exc).__name__} on {request.method} {request.path}")
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        return jsonify(error_envelope(status, "server error")), status
