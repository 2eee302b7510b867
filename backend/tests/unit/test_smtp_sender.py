"""Unit tests for the SmtpMailSender."""

import aiosmtplib
import pytest

from clientdesk.domain.exceptions import MailDeliveryError
from clientdesk.infrastructure.mail.smtp_sender import SmtpMailSender


class FakeTransport:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[dict] = []

    async def __call__(self, message, **kwargs):
        if self.error:
            raise self.error
        self.calls.append({"message": message, **kwargs})


def _sender(transport: FakeTransport, port: int = 587, host: str = "smtp.example.com") -> SmtpMailSender:
    return SmtpMailSender(
        host, port, "news@firm.com", "app-password", "Acme Advocates", transport=transport
    )


@pytest.mark.asyncio
async def test_send_uses_starttls_on_submission_port():
    transport = FakeTransport()
    await _sender(transport).send(to="jane@example.com", subject="News", html="<p>Hi</p>", text="Hi")

    call = transport.calls[0]
    assert call["hostname"] == "smtp.example.com"
    assert call["port"] == 587
    assert call["start_tls"] is True
    assert call["use_tls"] is False
    assert call["username"] == "news@firm.com"

    message = call["message"]
    assert message["From"] == "Acme Advocates <news@firm.com>"
    assert message["To"] == "jane@example.com"
    assert message.get_content_type() == "multipart/alternative"
    assert [p.get_content_type() for p in message.iter_parts()] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_send_uses_implicit_tls_on_465():
    transport = FakeTransport()
    await _sender(transport, port=465).send(to="a@b.com", subject="S", html="h", text="t")

    assert transport.calls[0]["use_tls"] is True
    assert transport.calls[0]["start_tls"] is False


@pytest.mark.asyncio
async def test_unconfigured_sender_fails_each_send():
    transport = FakeTransport()
    sender = _sender(transport, host="")

    assert sender.is_configured is False
    with pytest.raises(MailDeliveryError) as exc_info:
        await sender.send(to="a@b.com", subject="S", html="h", text="t")
    assert exc_info.value.message == "Email service not configured"
    assert transport.calls == []


@pytest.mark.asyncio
async def test_smtp_errors_become_delivery_errors():
    transport = FakeTransport(error=aiosmtplib.SMTPRecipientRefused(550, "No such user", "a@b.com"))

    with pytest.raises(MailDeliveryError) as exc_info:
        await _sender(transport).send(to="a@b.com", subject="S", html="h", text="t")
    assert exc_info.value.recipient == "a@b.com"
