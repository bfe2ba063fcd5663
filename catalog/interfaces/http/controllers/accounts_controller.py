# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP controller for user account endpoints."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from catalog.application.account_manager import AccountManager
from catalog.application.results import OperationResult
from catalog.auth import REFRESH_COOKIE, TOKEN_COOKIE, RequestGate, current_user
from catalog.infrastructure.audit import AuditAction, audit_log
from catalog.interfaces.http.dto.accounts import (
    ChangePasswordRequestDTO,
    DeleteAccountRequestDTO,
    EmailChangeRequestDTO,
    LoginRequestDTO,
    PasswordResetRequestDTO,
    RefreshRequestDTO,
    RegisterRequestDTO,
)
from catalog.shared.config import load_config
from catalog.shared.errors import error_envelope
from catalog.shared.errors.validation import raise_validation_error
from catalog.shared.logging import logger
from catalog.shared.middleware.rate_limit import rate_limit
from catalog.shared.utils.requests import client_ip


T = TypeVar("T", bound=BaseModel)


def _parse(dto_type: type[T]) -> T:
    try:
        return dto_type.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _code_hint(code: str) -> str:
    return f"{code[:8]}…"


class AccountsController:
    def __init__(self, *, manager: AccountManager, gate: RequestGate) -> None:
        self._manager = manager
        self._gate = gate

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("accounts", __name__, url_prefix="/api/v1/users")
        required = self._gate.required
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule(
            "/me", view_func=required(verified=False)(self.me), methods=["GET"], endpoint="me"
        )
        bp.add_url_rule(
            "/password",
            view_func=required(verified=True)(self.change_password),
            methods=["PUT"],
            endpoint="change_password",
        )
        bp.add_url_rule(
            "/email",
            view_func=required(verified=True)(self.request_email_change),
            methods=["PUT"],
            endpoint="request_email_change",
        )
        bp.add_url_rule(
            "/email/verify/<code>", view_func=self.verify_email_change, methods=["GET"]
        )
        bp.add_url_rule("/verify/<code>", view_func=self.verify_email, methods=["GET"])
        bp.add_url_rule(
            "/verify/resend",
            view_func=required(verified=False)(self.resend_verification),
            methods=["POST"],
            endpoint="resend_verification",
        )
        bp.add_url_rule(
            "/password/reset", view_func=self.send_password_reset, methods=["POST"]
        )
        bp.add_url_rule(
            "/password/reset/<code>", view_func=self.reset_password, methods=["GET"]
        )
        bp.add_url_rule(
            "/profile-picture",
            view_func=required(verified=True)(self.change_profile_picture),
            methods=["PUT"],
            endpoint="change_profile_picture",
        )
        bp.add_url_rule(
            "/account",
            view_func=required(verified=False)(self.delete_account),
            methods=["DELETE"],
            endpoint="delete_account",
        )
        return bp

    @staticmethod
    def _respond(result: OperationResult) -> tuple[Response, int]:
        response = jsonify(result.to_envelope())
        access_token = result.payload.get("accessToken") if result.ok else None
        if access_token:
            _set_session_cookie(response, TOKEN_COOKIE, access_token)
        return response, int(result.status)

    @rate_limit(limit=5, window_seconds=60.0)
    async def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)
        result = await self._manager.register(dto.username, dto.password, dto.email)
        audit_log(
            AuditAction.REGISTER,
            username=dto.username,
            ip_address=client_ip(),
            details={"status": int(result.status)},
            success=result.ok,
        )
        logger.info(f"accounts.register: status={int(result.status)} username={dto.username}")
        return self._respond(result)

    @rate_limit(limit=10, window_seconds=60.0)
    async def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        result = await self._manager.authenticate(dto.username, dto.password)
        audit_log(
            AuditAction.LOGIN_SUCCESS if result.ok else AuditAction.LOGIN_FAILED,
            username=dto.username,
            ip_address=client_ip(),
            success=result.ok,
        )
        response, status = self._respond(result)
        if result.ok:
            _set_session_cookie(response, REFRESH_COOKIE, result.payload["refreshToken"])
        logger.info(f"accounts.login: status={status} username={dto.username}")
        return response, status

    async def refresh(self) -> tuple[Response, int]:
        dto = _parse(RefreshRequestDTO)
        token = request.cookies.get(REFRESH_COOKIE) or dto.refresh_token
        if not token:
            return jsonify(error_envelope(HTTPStatus.BAD_REQUEST, "missing refresh token")), 400
        result = await self._manager.refresh_access_token(token)
        if result.ok:
            audit_log(
                AuditAction.SESSION_REFRESHED,
                username=result.payload["user"]["Username"],
                ip_address=client_ip(),
            )
        return self._respond(result)

    async def logout(self) -> tuple[Response, int]:
        audit_log(AuditAction.LOGOUT, ip_address=client_ip())
        response = jsonify(OperationResult.success("logged out").to_envelope())
        response.delete_cookie(TOKEN_COOKIE)
        response.delete_cookie(REFRESH_COOKIE)
        return response, 200

    async def me(self) -> tuple[Response, int]:
        return self._respond(await self._manager.get_profile(_username()))

    async def change_password(self) -> tuple[Response, int]:
        dto = _parse(ChangePasswordRequestDTO)
        username = _username()
        result = await self._manager.change_password(username, dto.old_password, dto.new_password)
        audit_log(
            AuditAction.PASSWORD_CHANGED,
            username=username,
            ip_address=client_ip(),
            success=result.ok,
        )
        return self._respond(result)

    async def request_email_change(self) -> tuple[Response, int]:
        dto = _parse(EmailChangeRequestDTO)
        username = _username()
        result = await self._manager.request_email_change(username, dto.new_email, dto.password)
        audit_log(
            AuditAction.EMAIL_CHANGE_REQUESTED,
            username=username,
            ip_address=client_ip(),
            success=result.ok,
        )
        return self._respond(result)

    async def verify_email_change(self, code: str) -> tuple[Response, int]:
        result = await self._manager.verify_email_change(code)
        audit_log(
            AuditAction.EMAIL_CHANGE_CONFIRMED,
            ip_address=client_ip(),
            details={"hint": _code_hint(code)},
            success=result.ok,
        )
        return self._respond(result)

    async def verify_email(self, code: str) -> tuple[Response, int]:
        result = await self._manager.verify_email(code)
        audit_log(
            AuditAction.EMAIL_VERIFIED,
            ip_address=client_ip(),
            details={"hint": _code_hint(code)},
            success=result.ok,
        )
        return self._respond(result)

    @rate_limit(limit=3, window_seconds=60.0)
    async def resend_verification(self) -> tuple[Response, int]:
        return self._respond(await self._manager.resend_verification_email(_username()))

    @rate_limit(limit=5, window_seconds=60.0)
    async def send_password_reset(self) -> tuple[Response, int]:
        dto = _parse(PasswordResetRequestDTO)
        result = await self._manager.send_password_reset_email(dto.username)
        audit_log(
            AuditAction.PASSWORD_RESET_REQUESTED,
            username=dto.username,
            ip_address=client_ip(),
            success=result.ok,
        )
        # The requester is not necessarily the account owner, so the session
        # issued by the reset request stays server side.
        public = OperationResult(status=result.status, message=result.message)
        return jsonify(public.to_envelope()), int(result.status)

    async def reset_password(self, code: str) -> tuple[Response, int]:
        result = await self._manager.reset_password(code)
        audit_log(
            AuditAction.PASSWORD_RESET_COMPLETED,
            ip_address=client_ip(),
            details={"hint": _code_hint(code)},
            success=result.ok,
        )
        return self._respond(result)

    async def change_profile_picture(self) -> tuple[Response, int]:
        upload = request.files.get("image")
        if upload is None:
            return jsonify(error_envelope(HTTPStatus.BAD_REQUEST, "missing image")), 400
        image_data = upload.read()
        if not image_data:
            return jsonify(error_envelope(HTTPStatus.BAD_REQUEST, "empty image")), 400

        username = _username()
        result = await self._manager.change_profile_picture(username, image_data)
        audit_log(
            AuditAction.PROFILE_PICTURE_CHANGED,
            username=username,
            ip_address=client_ip(),
            details={"bytes": len(image_data)},
            success=result.ok,
        )
        return self._respond(result)

    async def delete_account(self) -> tuple[Response, int]:
        dto = _parse(DeleteAccountRequestDTO)
        username = _username()
        result = await self._manager.delete_account(username, dto.password)
        audit_log(
            AuditAction.ACCOUNT_DELETED,
            username=username,
            ip_address=client_ip(),
            success=result.ok,
        )
        response = jsonify(result.to_envelope())
        if result.ok:
            response.delete_cookie(TOKEN_COOKIE)
            response.delete_cookie(REFRESH_COOKIE)
        return response, int(result.status)


def _username() -> str:
    claims = current_user()
    if claims is None:
        raise RuntimeError("authenticated view reached without claims")
    return claims.username


def _set_session_cookie(response: Response, name: str, value: Any) -> None:
    config = load_config()
    max_age = (
        config.tokens.refresh_ttl_seconds
        if name == REFRESH_COOKIE
        else config.tokens.access_ttl_seconds
    )
    response.set_cookie(
        name,
        str(value),
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
        max_age=max_age,
    )


__all__ = ["AccountsController"]
