"""Abstract repository interface (port) for staff users and their mailbox tokens."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from clientdesk.domain.entities import MailboxTokens


@dataclass
class StaffUser:
    id: str
    law_firm_id: str
    role: str
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True


class UserRepository(ABC):
    """Port for user lookups and mailbox token persistence."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> StaffUser | None:
        ...

    @abstractmethod
    async def get_mailbox_tokens(self, user_id: str) -> MailboxTokens | None:
        ...

    @abstractmethod
    async def save_mailbox_tokens(self, user_id: str, tokens: MailboxTokens) -> None:
        ...

    @abstractmethod
    async def list_emails_by_roles(self, law_firm_id: str, roles: list[str]) -> list[str]:
        """Emails of a firm's users holding any of ``roles``."""
        ...
