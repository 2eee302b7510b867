"""MIME construction shared by the SMTP and Gmail transports."""

from email.message import EmailMessage
from email.utils import formataddr


def build_message(
    *,
    to: str,
    subject: str,
    html: str,
    text: str,
    sender: str | None = None,
    sender_name: str | None = None,
) -> EmailMessage:
    """multipart/alternative with a plain-text part followed by the HTML part."""
    msg = EmailMessage()
    if sender:
        msg["From"] = formataddr((sender_name, sender)) if sender_name else sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")
    return msg
