"""In-memory fakes of the application ports, shared by the unit tests."""

import copy
from collections import Counter
from datetime import datetime

import pytest

from clientdesk.application.interfaces import (
    ClientFilter,
    ClientRepository,
    ClientSort,
    MailSender,
    StaffUser,
    UserRepository,
)
from clientdesk.domain.entities import (
    Actor,
    Client,
    ClientStats,
    ClientStatus,
    ClientType,
    DepartmentCount,
    MailboxTokens,
    Recipient,
)
from clientdesk.domain.exceptions import DuplicateEmailError, MailDeliveryError

FIRM_A = "firm-a"
FIRM_B = "firm-b"


class FakeClientRepository(ClientRepository):
    """In-memory fake repository; normalizes and enforces per-firm email uniqueness."""

    def __init__(self):
        self.clients: dict[str, Client] = {}
        self.case_references: dict[str, int] = {}
        self.departments: dict[str, str] = {}

    async def get_by_id(self, client_id: str) -> Client | None:
        client = self.clients.get(client_id)
        return copy.deepcopy(client) if client else None

    async def find_by_email(self, law_firm_id, email, *, exclude_id=None):
        for client in self.clients.values():
            if client.law_firm_id == law_firm_id and client.email == email and client.id != exclude_id:
                return copy.deepcopy(client)
        return None

    async def find_page(self, criteria: ClientFilter, sort, *, skip=0, limit=10):
        matches = [c for c in self.clients.values() if self._matches(c, criteria)]
        sorts = sort if isinstance(sort, list) else [sort]
        for item in reversed(sorts):
            matches.sort(key=lambda c: getattr(c, item.field) or "", reverse=item.descending)
        return [copy.deepcopy(c) for c in matches[skip:skip + limit]], len(matches)

    async def create(self, client: Client) -> Client:
        client.normalize()
        self._check_unique(client)
        self.clients[client.id] = copy.deepcopy(client)
        return copy.deepcopy(client)

    async def update(self, client: Client) -> Client:
        if client.id not in self.clients:
            raise ValueError(f"Client {client.id} not found")
        client.normalize()
        self._check_unique(client)
        self.clients[client.id] = copy.deepcopy(client)
        return copy.deepcopy(client)

    async def delete(self, client_id: str) -> bool:
        return self.clients.pop(client_id, None) is not None

    async def aggregate_stats(self, law_firm_id: str, since: datetime) -> ClientStats:
        firm = [c for c in self.clients.values() if c.law_firm_id == law_firm_id]
        departments = Counter(
            c.preferred_department_id if c.preferred_department_id in self.departments else None
            for c in firm
        )
        return ClientStats(
            total_clients=len(firm),
            active_clients=sum(c.status == ClientStatus.ACTIVE for c in firm),
            inactive_clients=sum(c.status == ClientStatus.INACTIVE for c in firm),
            individual_clients=sum(c.client_type == ClientType.INDIVIDUAL for c in firm),
            corporate_clients=sum(c.client_type == ClientType.CORPORATE for c in firm),
            clients_by_department=[
                DepartmentCount(department=self.departments.get(dept_id, "Unassigned"), count=count)
                for dept_id, count in departments.most_common()
            ],
            recent_clients=sum(c.created_at >= since for c in firm),
        )

    async def count_case_references(self, client_id: str) -> int:
        return self.case_references.get(client_id, 0)

    async def find_recipients(self, law_firm_id, client_ids=None):
        criteria = ClientFilter(
            law_firm_id=law_firm_id,
            client_ids=client_ids,
            status=None if client_ids else ClientStatus.ACTIVE.value,
            has_email=True,
        )
        return [_recipient(c) for c in self.clients.values() if self._matches(c, criteria)]

    async def find_emailable(self, law_firm_id):
        criteria = ClientFilter(law_firm_id=law_firm_id, has_email=True)
        matches = [c for c in self.clients.values() if self._matches(c, criteria)]
        matches.sort(key=lambda c: (c.first_name, c.last_name))
        return [_recipient(c) for c in matches]

    def _check_unique(self, client: Client) -> None:
        if client.email is None:
            return
        for other in self.clients.values():
            if (
                other.id != client.id
                and other.law_firm_id == client.law_firm_id
                and other.email == client.email
            ):
                raise DuplicateEmailError(client.email)

    @staticmethod
    def _matches(client: Client, criteria: ClientFilter) -> bool:
        if client.law_firm_id != criteria.law_firm_id:
            return False
        if criteria.status and client.status.value != criteria.status:
            return False
        if criteria.client_type and client.client_type.value != criteria.client_type:
            return False
        if criteria.department_id and client.preferred_department_id != criteria.department_id:
            return False
        if criteria.client_ids is not None and client.id not in criteria.client_ids:
            return False
        if criteria.has_email and not client.email:
            return False
        if criteria.search:
            term = criteria.search.lower()
            return any(
                term in (getattr(client, name) or "").lower() for name in criteria.search_fields
            )
        return True


class FakeUserRepository(UserRepository):
    def __init__(self):
        self.users: dict[str, StaffUser] = {}
        self.tokens: dict[str, MailboxTokens] = {}
        self.saved: list[MailboxTokens] = []

    async def get_by_id(self, user_id: str) -> StaffUser | None:
        return self.users.get(user_id)

    async def get_mailbox_tokens(self, user_id: str) -> MailboxTokens | None:
        return self.tokens.get(user_id)

    async def save_mailbox_tokens(self, user_id: str, tokens: MailboxTokens) -> None:
        self.tokens[user_id] = tokens
        self.saved.append(tokens)

    async def list_emails_by_roles(self, law_firm_id: str, roles: list[str]) -> list[str]:
        return [
            u.email
            for u in self.users.values()
            if u.law_firm_id == law_firm_id and u.role in roles and u.email
        ]


class RecordingSender(MailSender):
    """Records every message; raises for addresses in ``fail_for``."""

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.sent: list[dict[str, str]] = []

    async def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        if to in self.fail_for:
            raise MailDeliveryError(to, "Mailbox unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


def _recipient(client: Client) -> Recipient:
    return Recipient(
        client_id=client.id,
        email=client.email,
        first_name=client.first_name,
        last_name=client.last_name,
        company_name=client.company_name,
        client_type=client.client_type.value,
        status=client.status.value,
    )


def make_client(law_firm_id: str = FIRM_A, **overrides) -> Client:
    values = {
        "law_firm_id": law_firm_id,
        "first_name": "Jane",
        "last_name": "Doe",
        "phone_number": "+254700000000",
        "created_by": "user-1",
    }
    values.update(overrides)
    return Client(**values)


@pytest.fixture
def client_repository() -> FakeClientRepository:
    return FakeClientRepository()


@pytest.fixture
def user_repository() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id="admin-1", law_firm_id=FIRM_A, role="law_firm_admin")


@pytest.fixture
def advocate() -> Actor:
    return Actor(user_id="advocate-1", law_firm_id=FIRM_A, role="advocate")


@pytest.fixture
def outsider() -> Actor:
    return Actor(user_id="admin-2", law_firm_id=FIRM_B, role="law_firm_admin")


@pytest.fixture
def new_client():
    """Factory for unsaved client entities (defaults to the admin's firm)."""
    return make_client


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
