"""Abstract repository interface (port) for tenant-scoped Client persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from clientdesk.domain.entities import Client, ClientStats, Recipient

LIST_SEARCH_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "company_name",
    "id_number",
)


@dataclass
class ClientFilter:
    """Query criteria; every query is scoped to one law firm."""

    law_firm_id: str
    status: str | None = None
    client_type: str | None = None
    department_id: str | None = None
    search: str | None = None
    search_fields: tuple[str, ...] = LIST_SEARCH_FIELDS
    client_ids: list[str] | None = None
    has_email: bool | None = None


@dataclass
class ClientSort:
    field: str = "created_at"
    descending: bool = True


class ClientRepository(ABC):
    """Port for client persistence — implemented in the infrastructure layer.

    ``get_by_id`` does not filter by tenant: callers compare the owning
    firm themselves before using the record.
    """

    @abstractmethod
    async def get_by_id(self, client_id: str) -> Client | None:
        """Retrieve a single client by its UUID, with references resolved."""
        ...

    @abstractmethod
    async def find_by_email(
        self, law_firm_id: str, email: str, *, exclude_id: str | None = None
    ) -> Client | None:
        """Find the client of a firm holding an (already normalized) email."""
        ...

    @abstractmethod
    async def find_page(
        self,
        criteria: ClientFilter,
        sort: ClientSort | list[ClientSort],
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Client], int]:
        """Return one page of matching clients and the total match count."""
        ...

    @abstractmethod
    async def create(self, client: Client) -> Client:
        """Persist a new client. Raises DuplicateEmailError on collision."""
        ...

    @abstractmethod
    async def update(self, client: Client) -> Client:
        """Persist changes to a client. Raises DuplicateEmailError on collision."""
        ...

    @abstractmethod
    async def delete(self, client_id: str) -> bool:
        """Delete a client permanently. Returns True if deleted."""
        ...

    @abstractmethod
    async def aggregate_stats(self, law_firm_id: str, since: datetime) -> ClientStats:
        """Counts by status/type/department, plus clients created since ``since``."""
        ...

    @abstractmethod
    async def count_case_references(self, client_id: str) -> int:
        """Number of cases that still point at the client."""
        ...

    @abstractmethod
    async def find_recipients(
        self, law_firm_id: str, client_ids: list[str] | None = None
    ) -> list[Recipient]:
        """Emailable clients: the given ids (any status) or all active ones."""
        ...

    @abstractmethod
    async def find_emailable(self, law_firm_id: str) -> list[Recipient]:
        """All clients of a firm with an email, any status, sorted by name."""
        ...
