"""Application service (use case) for tenant-scoped client operations."""

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from clientdesk.application.interfaces import ClientFilter, ClientRepository, ClientSort
from clientdesk.application.schemas.client import (
    AddressSchema,
    ClientCreate,
    ClientDocumentSchema,
    ClientListQuery,
    ClientUpdate,
    EmergencyContactSchema,
)
from clientdesk.domain.entities import (
    Actor,
    Address,
    Client,
    ClientDocument,
    ClientStats,
    ClientStatus,
    EmergencyContact,
)
from clientdesk.domain.entities.client import normalize_email
from clientdesk.domain.exceptions import (
    ClientHasCasesError,
    DomainValidationError,
    DuplicateEmailError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidIdError,
    InvalidQueryError,
    MissingFieldsError,
)

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset({
    "created_at",
    "updated_at",
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "company_name",
    "client_type",
    "status",
})
SEARCH_FIELDS = ("first_name", "last_name", "email", "phone_number", "company_name")
MIN_SEARCH_LENGTH = 2

# Fields that cannot be cleared by sending null in a patch
_NON_NULLABLE_PATCH_FIELDS = frozenset({"client_type", "status", "tags", "documents"})


@dataclass
class ClientPage:
    clients: list[Client]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class ClientDirectoryService:
    """Exposes client business operations with tenancy checks on every path.

    Records fetched by id are compared against the actor's firm before
    they are returned or mutated.
    """

    def __init__(self, repository: ClientRepository, *, recent_days: int = 30):
        self._repository = repository
        self._recent_days = recent_days

    # ── Create ──────────────────────────────────────────────────────

    async def create_client(self, actor: Actor, data: ClientCreate) -> Client:
        self._require_manager(actor)

        missing = [
            name
            for name in ("first_name", "last_name", "phone_number")
            if not (getattr(data, name) or "").strip()
        ]
        if missing:
            raise MissingFieldsError(
                "First name, last name, and phone number are required", missing
            )

        # Fast path only; the unique constraint in the store is authoritative
        email = normalize_email(data.email)
        if email and await self._repository.find_by_email(actor.law_firm_id, email):
            raise DuplicateEmailError(email)

        client = Client(
            law_firm_id=actor.law_firm_id,
            created_by=actor.user_id,
            first_name=data.first_name or "",
            last_name=data.last_name or "",
            phone_number=data.phone_number or "",
            email=email,
            client_type=data.client_type,
            company_name=data.company_name,
            registration_number=data.registration_number,
            business_type=data.business_type,
            id_number=data.id_number,
            date_of_birth=data.date_of_birth,
            address=_to_address(data.address),
            preferred_department_id=data.preferred_department_id,
            notes=data.notes,
            emergency_contact=_to_emergency_contact(data.emergency_contact),
            tags=list(data.tags),
            profile_image=data.profile_image,
            documents=[_to_document(d, actor) for d in data.documents],
        )
        created = await self._repository.create(client)
        logger.info(
            "Client %s created in firm %s by %s", created.id, actor.law_firm_id, actor.user_id
        )
        return created

    # ── Read ────────────────────────────────────────────────────────

    async def list_clients(self, actor: Actor, query: ClientListQuery) -> ClientPage:
        if query.sort_by not in SORTABLE_FIELDS:
            raise DomainValidationError(f"Cannot sort clients by '{query.sort_by}'")

        criteria = ClientFilter(
            law_firm_id=actor.law_firm_id,
            status=None if query.status == "all" else query.status,
            client_type=query.client_type.value if query.client_type else None,
            department_id=query.department or None,
            search=query.search or None,
        )
        sort = ClientSort(field=query.sort_by, descending=query.sort_order == "desc")
        clients, total = await self._repository.find_page(
            criteria,
            sort,
            skip=(query.page - 1) * query.limit,
            limit=query.limit,
        )
        return ClientPage(clients=clients, page=query.page, limit=query.limit, total=total)

    async def get_client(self, actor: Actor, client_id: str) -> Client:
        return await self._get_owned(actor, client_id)

    async def search_clients(self, actor: Actor, q: str | None, limit: int = 10) -> list[Client]:
        if len("".join((q or "").split())) < MIN_SEARCH_LENGTH:
            raise InvalidQueryError("Search query must be at least 2 characters long")

        criteria = ClientFilter(
            law_firm_id=actor.law_firm_id,
            status=ClientStatus.ACTIVE.value,
            search=q.strip(),
            search_fields=SEARCH_FIELDS,
        )
        clients, _ = await self._repository.find_page(
            criteria,
            [ClientSort("first_name", descending=False), ClientSort("last_name", descending=False)],
            skip=0,
            limit=limit,
        )
        return clients

    async def get_stats(self, actor: Actor) -> ClientStats:
        since = datetime.now(timezone.utc) - timedelta(days=self._recent_days)
        return await self._repository.aggregate_stats(actor.law_firm_id, since)

    # ── Update / delete ─────────────────────────────────────────────

    async def update_client(self, actor: Actor, client_id: str, patch: ClientUpdate) -> Client:
        self._require_manager(actor)
        client = await self._get_owned(actor, client_id)

        changes: dict[str, Any] = patch.model_dump(exclude_unset=True)

        if "email" in changes:
            email = normalize_email(changes.pop("email"))
            if email and email != client.email:
                if await self._repository.find_by_email(
                    client.law_firm_id, email, exclude_id=client.id
                ):
                    raise DuplicateEmailError(email)
            client.email = email

        for name, value in changes.items():
            if value is None and name in _NON_NULLABLE_PATCH_FIELDS:
                continue
            if name == "address":
                value = _to_address(patch.address)
            elif name == "emergency_contact":
                value = _to_emergency_contact(patch.emergency_contact)
            elif name == "documents":
                value = [_to_document(d, actor) for d in patch.documents or []]
            elif name in ("client_type", "status"):
                value = getattr(patch, name)
            setattr(client, name, value)

        client.touch(actor.user_id)
        updated = await self._repository.update(client)
        logger.info("Client %s updated by %s", client_id, actor.user_id)
        return updated

    async def delete_client(self, actor: Actor, client_id: str) -> None:
        if not actor.is_admin:
            raise ForbiddenError("Only administrators can delete clients")
        client = await self._get_owned(actor, client_id)

        # Refuse rather than orphan case records
        references = await self._repository.count_case_references(client.id)
        if references:
            raise ClientHasCasesError(client.id, references)

        await self._repository.delete(client.id)
        logger.info("Client %s deleted by %s", client_id, actor.user_id)

    # ── Helpers ─────────────────────────────────────────────────────

    async def _get_owned(self, actor: Actor, client_id: str) -> Client:
        try:
            uuid.UUID(str(client_id))
        except ValueError:
            raise InvalidIdError("Client", client_id)

        client = await self._repository.get_by_id(str(client_id))
        if client is None:
            raise EntityNotFoundError("Client", client_id)
        if not actor.owns(client.law_firm_id):
            logger.warning(
                "Actor %s (firm %s) denied access to client %s",
                actor.user_id,
                actor.law_firm_id,
                client_id,
            )
            raise ForbiddenError()
        return client

    @staticmethod
    def _require_manager(actor: Actor) -> None:
        if not actor.can_manage_clients:
            raise ForbiddenError("You don't have permission to manage clients")


def _to_address(schema: AddressSchema | None) -> Address | None:
    return Address(**schema.model_dump()) if schema else None


def _to_emergency_contact(schema: EmergencyContactSchema | None) -> EmergencyContact | None:
    return EmergencyContact(**schema.model_dump()) if schema else None


def _to_document(schema: ClientDocumentSchema, actor: Actor) -> ClientDocument:
    document = ClientDocument(
        name=schema.name,
        path=schema.path,
        uploaded_by=schema.uploaded_by or actor.user_id,
    )
    if schema.uploaded_at is not None:
        document.uploaded_at = schema.uploaded_at
    return document
