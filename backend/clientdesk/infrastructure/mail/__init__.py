"""Outbound mail transports for newsletters."""

from .gmail_sender import GmailMailSender
from .smtp_sender import SmtpMailSender

__all__ = ["GmailMailSender", "SmtpMailSender"]
