"""SMTP mail sender — newsletter transport over aiosmtplib."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiosmtplib

from clientdesk.application.interfaces import MailSender
from clientdesk.domain.exceptions import MailDeliveryError
from clientdesk.infrastructure.mail.message_builder import build_message

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SmtpMailSender(MailSender):
    """Infrastructure adapter — delivers one message per SMTP connection.

    Port 465 uses implicit TLS; any other port upgrades with STARTTLS.
    Without a host and credentials every send fails with
    ``MailDeliveryError`` instead of failing at construction.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_name: str,
        *,
        transport: Callable[..., Awaitable[Any]] = aiosmtplib.send,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_name = from_name
        self._transport = transport

        if not self.is_configured:
            logger.warning("SMTP credentials not configured; newsletter sends will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self._host and self._username and self._password)

    async def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        if not self.is_configured:
            raise MailDeliveryError(to, "Email service not configured")

        message = build_message(
            to=to,
            subject=subject,
            html=html,
            text=text,
            sender=self._username,
            sender_name=self._from_name,
        )
        implicit_tls = self._port == IMPLICIT_TLS_PORT
        try:
            await self._transport(
                message,
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                use_tls=implicit_tls,
                start_tls=not implicit_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(to, str(exc)) from exc

        logger.debug("SMTP message to %s accepted by %s", to, self._host)
