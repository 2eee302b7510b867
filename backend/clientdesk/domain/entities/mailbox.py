"""Domain entities for the mailbox (Gmail) integration."""

from dataclasses import dataclass, field, asdict
from typing import Any


@dataclass
class MailboxTokens:
    """OAuth2 token set persisted on a user's account."""

    access_token: str | None = None
    refresh_token: str | None = None
    expiry_date: int | None = None  # epoch milliseconds
    scope: str | None = None
    token_type: str = "Bearer"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MailboxTokens | None":
        if not data:
            return None
        return cls(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            expiry_date=data.get("expiry_date"),
            scope=data.get("scope"),
            token_type=data.get("token_type") or "Bearer",
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MailboxProfile:
    email_address: str
    messages_total: int | None = None
    threads_total: int | None = None
    history_id: str | None = None


@dataclass
class MailMessage:
    """A decoded mailbox message."""

    id: str
    thread_id: str | None = None
    subject: str = ""
    sender: str = ""
    to: str = ""
    cc: str = ""
    date: str = ""
    snippet: str = ""
    body: str = ""
    html_body: str = ""
    labels: list[str] = field(default_factory=list)
    internal_date: str | None = None


@dataclass
class MailboxPage:
    emails: list[MailMessage]
    next_page_token: str | None = None
    result_size_estimate: int | None = None
