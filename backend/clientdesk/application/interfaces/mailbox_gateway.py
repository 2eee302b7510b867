"""Mailbox provider port — OAuth2 consent flow and per-call authenticated sessions."""

from abc import ABC, abstractmethod

from clientdesk.domain.entities import MailboxPage, MailboxProfile, MailboxTokens


class MailboxSession(ABC):
    """An authenticated client bound to one caller's tokens.

    Never shared across requests. If the provider rotates the tokens while
    the session is in use, the new set is exposed via ``rotated_tokens``
    and the caller decides whether to persist it.
    """

    @property
    @abstractmethod
    def rotated_tokens(self) -> MailboxTokens | None:
        ...

    @abstractmethod
    async def fetch_emails(
        self,
        *,
        query: str = "",
        max_results: int = 50,
        page_token: str | None = None,
    ) -> MailboxPage:
        ...

    @abstractmethod
    async def get_user_profile(self) -> MailboxProfile:
        ...

    @abstractmethod
    async def send_message(
        self, *, to: str, subject: str, html: str, text: str
    ) -> str:
        """Send a message from the mailbox. Returns the provider message id."""
        ...


class MailboxGateway(ABC):
    """Port for the external mailbox provider."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    def get_auth_url(self) -> str:
        ...

    @abstractmethod
    async def exchange_code(self, code: str) -> MailboxTokens:
        ...

    @abstractmethod
    def open_session(self, tokens: MailboxTokens | None) -> MailboxSession:
        ...
