# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account e-mails delivered over SMTP."""

from __future__ import annotations

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from catalog.application.interfaces import MailSender
from catalog.shared.config.settings import MailConfig
from catalog.shared.logging import logger

from .resilience import CircuitBreaker, resilient_call


class SmtpMailSender(MailSender):
    def __init__(self, config: MailConfig, *, breaker: CircuitBreaker | None = None) -> None:
        self._config = config
        self._breaker = breaker or CircuitBreaker.from_config("smtp")

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _link(self, path: str) -> str:
        return f"{self._config.frontend_base_url.rstrip('/')}/{path.lstrip('/')}"

    async def send_verification(self, email: str, username: str, code: str) -> bool:
        link = self._link(f"verify/{code}")
        return await self._send(
            email,
            "Verify your email address",
            f"Hi {username},\n\nconfirm your email address by opening the link below:\n{link}\n",
            kind="verification",
        )

    async def send_email_change_verification(self, email: str, username: str, code: str) -> bool:
        link = self._link(f"email/verify/{code}")
        return await self._send(
            email,
            "Confirm your new email address",
            f"Hi {username},\n\nconfirm the change of your account email here:\n{link}\n\n"
            "The link expires in 6 hours.\n",
            kind="email_change",
        )

    async def send_password_reset(self, email: str, username: str, code: str) -> bool:
        link = self._link(f"password/reset/{code}")
        return await self._send(
            email,
            "Password reset requested",
            f"Hi {username},\n\nopen the link below to receive a new password:\n{link}\n\n"
            "If you did not request a reset you can ignore this email.\n",
            kind="password_reset",
        )

    async def send_new_password(self, email: str, username: str, password: str) -> bool:
        return await self._send(
            email,
            "Your new password",
            f"Hi {username},\n\nyour password has been reset. Your new password is:\n"
            f"{password}\n\nChange it after logging in.\n",
            kind="new_password",
        )

    async def _send(self, to_email: str, subject: str, body: str, *, kind: str) -> bool:
        if not self.enabled:
            logger.info(f"mail.{kind}: smtp disabled, not sending to {to_email}")
            return True

        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self._config.from_name} <{self._config.from_email}>"
        message["To"] = to_email
        message.attach(MIMEText(body, "plain", "utf-8"))

        try:
            await resilient_call(self._deliver, message, breaker=self._breaker)
        except Exception:
            logger.exception(f"mail.{kind}: delivery failed to {to_email}")
            return False
        logger.info(f"mail.{kind}: sent to {to_email}")
        return True

    async def _deliver(self, message: MIMEMultipart) -> None:
        await asyncio.to_thread(self._deliver_sync, message)

    def _deliver_sync(self, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self._config.smtp_host, self._config.smtp_port) as server:
            server.starttls()
            if self._config.smtp_password:
                server.login(self._config.smtp_username, self._config.smtp_password)
            server.send_message(message)


__all__ = ["SmtpMailSender"]
