"""Concrete repository implementation for Client backed by SQLAlchemy."""

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.application.interfaces import ClientFilter, ClientRepository, ClientSort
from clientdesk.domain.entities import (
    Address,
    Client,
    ClientDocument,
    ClientStats,
    ClientStatus,
    ClientType,
    DepartmentCount,
    DepartmentRef,
    EmergencyContact,
    Recipient,
    UserRef,
)
from clientdesk.domain.exceptions import DomainValidationError, DuplicateEmailError
from clientdesk.infrastructure.database.models import CaseModel, ClientModel, DepartmentModel

logger = logging.getLogger(__name__)

UNASSIGNED_DEPARTMENT = "Unassigned"

_SORT_COLUMNS = {
    "created_at": ClientModel.created_at,
    "updated_at": ClientModel.updated_at,
    "first_name": ClientModel.first_name,
    "last_name": ClientModel.last_name,
    "email": ClientModel.email,
    "phone_number": ClientModel.phone_number,
    "company_name": ClientModel.company_name,
    "client_type": ClientModel.client_type,
    "status": ClientModel.status,
}


class SQLAlchemyClientRepository(ClientRepository):
    """Implements the ClientRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    # ── Mapping ──────────────────────────────────────────────────────

    def _to_entity(self, model: ClientModel) -> Client:
        """Map ORM model → domain entity, including resolved references."""
        department = model.preferred_department
        return Client(
            id=model.id,
            law_firm_id=model.law_firm_id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=model.email,
            phone_number=model.phone_number,
            client_type=ClientType(model.client_type),
            status=ClientStatus(model.status),
            company_name=model.company_name,
            registration_number=model.registration_number,
            business_type=model.business_type,
            id_number=model.id_number,
            date_of_birth=model.date_of_birth,
            address=Address(**model.address) if model.address else None,
            preferred_department_id=model.preferred_department_id,
            notes=model.notes,
            emergency_contact=(
                EmergencyContact(**model.emergency_contact) if model.emergency_contact else None
            ),
            tags=list(model.tags or []),
            profile_image=model.profile_image,
            documents=[_document_from_json(d) for d in model.documents or []],
            total_cases=model.total_cases,
            active_cases=model.active_cases,
            completed_cases=model.completed_cases,
            created_by=model.created_by,
            updated_by=model.updated_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
            preferred_department=(
                DepartmentRef(id=department.id, name=department.name, code=department.code)
                if department
                else None
            ),
            created_by_user=_user_ref(model.creator),
            updated_by_user=_user_ref(model.updater),
        )

    def _apply(self, entity: Client, model: ClientModel) -> None:
        """Copy mutable entity state onto the ORM model."""
        model.first_name = entity.first_name
        model.last_name = entity.last_name
        model.email = entity.email
        model.phone_number = entity.phone_number
        model.client_type = ClientType(entity.client_type).value
        model.status = ClientStatus(entity.status).value
        model.company_name = entity.company_name
        model.registration_number = entity.registration_number
        model.business_type = entity.business_type
        model.id_number = entity.id_number
        model.date_of_birth = entity.date_of_birth
        model.address = asdict(entity.address) if entity.address else None
        model.preferred_department_id = entity.preferred_department_id
        model.notes = entity.notes
        model.emergency_contact = (
            asdict(entity.emergency_contact) if entity.emergency_contact else None
        )
        model.tags = list(entity.tags)
        model.profile_image = entity.profile_image
        model.documents = [_document_to_json(d) for d in entity.documents]
        model.total_cases = entity.total_cases
        model.active_cases = entity.active_cases
        model.completed_cases = entity.completed_cases
        model.updated_by = entity.updated_by
        model.updated_at = entity.updated_at

    # ── Reads ────────────────────────────────────────────────────────

    async def get_by_id(self, client_id: str) -> Client | None:
        model = await self._load(client_id)
        return self._to_entity(model) if model else None

    async def find_by_email(
        self, law_firm_id: str, email: str, *, exclude_id: str | None = None
    ) -> Client | None:
        stmt = select(ClientModel).where(
            ClientModel.law_firm_id == law_firm_id,
            ClientModel.email == email,
        )
        if exclude_id is not None:
            stmt = stmt.where(ClientModel.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def find_page(
        self,
        criteria: ClientFilter,
        sort: ClientSort | list[ClientSort],
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Client], int]:
        conditions = self._conditions(criteria)

        count_stmt = select(func.count()).select_from(ClientModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(ClientModel)
            .where(*conditions)
            .order_by(*self._order_by(sort))
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.unique().scalars().all()], total

    async def aggregate_stats(self, law_firm_id: str, since: datetime) -> ClientStats:
        def _count_where(condition: Any):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        totals_stmt = select(
            func.count(ClientModel.id),
            _count_where(ClientModel.status == ClientStatus.ACTIVE.value),
            _count_where(ClientModel.status == ClientStatus.INACTIVE.value),
            _count_where(ClientModel.client_type == ClientType.INDIVIDUAL.value),
            _count_where(ClientModel.client_type == ClientType.CORPORATE.value),
            _count_where(ClientModel.created_at >= since),
        ).where(ClientModel.law_firm_id == law_firm_id)
        total, active, inactive, individual, corporate, recent = (
            await self._session.execute(totals_stmt)
        ).one()

        count_col = func.count(ClientModel.id).label("client_count")
        department_stmt = (
            select(DepartmentModel.id, DepartmentModel.name, count_col)
            .select_from(ClientModel)
            .outerjoin(DepartmentModel, ClientModel.preferred_department_id == DepartmentModel.id)
            .where(ClientModel.law_firm_id == law_firm_id)
            .group_by(DepartmentModel.id, DepartmentModel.name)
            .order_by(count_col.desc(), DepartmentModel.name, DepartmentModel.id)
        )
        rows = (await self._session.execute(department_stmt)).all()

        return ClientStats(
            total_clients=total or 0,
            active_clients=int(active),
            inactive_clients=int(inactive),
            individual_clients=int(individual),
            corporate_clients=int(corporate),
            clients_by_department=[
                DepartmentCount(department=name or UNASSIGNED_DEPARTMENT, count=count)
                for _, name, count in rows
            ],
            recent_clients=int(recent),
        )

    async def count_case_references(self, client_id: str) -> int:
        stmt = select(func.count()).select_from(CaseModel).where(CaseModel.client_id == client_id)
        return (await self._session.execute(stmt)).scalar_one()

    async def find_recipients(
        self, law_firm_id: str, client_ids: list[str] | None = None
    ) -> list[Recipient]:
        if client_ids:
            criteria = ClientFilter(law_firm_id=law_firm_id, client_ids=client_ids, has_email=True)
        else:
            criteria = ClientFilter(
                law_firm_id=law_firm_id, status=ClientStatus.ACTIVE.value, has_email=True
            )
        stmt = (
            select(ClientModel)
            .where(*self._conditions(criteria))
            .order_by(ClientModel.created_at, ClientModel.id)
        )
        result = await self._session.execute(stmt)
        return [_to_recipient(m) for m in result.unique().scalars().all()]

    async def find_emailable(self, law_firm_id: str) -> list[Recipient]:
        criteria = ClientFilter(law_firm_id=law_firm_id, has_email=True)
        stmt = (
            select(ClientModel)
            .where(*self._conditions(criteria))
            .order_by(ClientModel.first_name, ClientModel.last_name)
        )
        result = await self._session.execute(stmt)
        return [_to_recipient(m) for m in result.unique().scalars().all()]

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, client: Client) -> Client:
        client.normalize()
        model = ClientModel(
            id=client.id,
            law_firm_id=client.law_firm_id,
            created_by=client.created_by,
            created_at=client.created_at,
        )
        self._apply(client, model)
        self._session.add(model)
        await self._flush(client.email)
        return await self._reload(client.id)

    async def update(self, client: Client) -> Client:
        model = await self._load(client.id)
        if model is None:
            raise ValueError(f"Client {client.id} not found in database")
        client.normalize()
        self._apply(client, model)
        await self._flush(client.email)
        return await self._reload(client.id)

    async def delete(self, client_id: str) -> bool:
        model = await self._load(client_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    # ── Helpers ──────────────────────────────────────────────────────

    async def _load(self, client_id: str, *, refresh: bool = False) -> ClientModel | None:
        stmt = select(ClientModel).where(ClientModel.id == client_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.unique().scalars().first()

    async def _reload(self, client_id: str) -> Client:
        model = await self._load(client_id, refresh=True)
        return self._to_entity(model)

    async def _flush(self, email: str | None) -> None:
        """Flush pending changes, mapping the per-firm email constraint to a domain error."""
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            message = str(exc.orig)
            if email and ("uq_clients_firm_email" in message or "clients.email" in message):
                logger.info("Duplicate client email rejected by constraint: %s", email)
                raise DuplicateEmailError(email) from exc
            raise

    @staticmethod
    def _conditions(criteria: ClientFilter) -> list[Any]:
        conditions: list[Any] = [ClientModel.law_firm_id == criteria.law_firm_id]
        if criteria.status:
            conditions.append(ClientModel.status == criteria.status)
        if criteria.client_type:
            conditions.append(ClientModel.client_type == criteria.client_type)
        if criteria.department_id:
            conditions.append(ClientModel.preferred_department_id == criteria.department_id)
        if criteria.client_ids is not None:
            conditions.append(ClientModel.id.in_(criteria.client_ids))
        if criteria.has_email:
            conditions.append(ClientModel.email.is_not(None))
            conditions.append(ClientModel.email != "")
        if criteria.search:
            conditions.append(
                or_(
                    *(
                        getattr(ClientModel, name).icontains(criteria.search, autoescape=True)
                        for name in criteria.search_fields
                    )
                )
            )
        return conditions

    @staticmethod
    def _order_by(sort: ClientSort | list[ClientSort]) -> list[Any]:
        sorts = sort if isinstance(sort, list) else [sort]
        clauses = []
        for item in sorts:
            column = _SORT_COLUMNS.get(item.field)
            if column is None:
                raise DomainValidationError(f"Cannot sort clients by '{item.field}'")
            clauses.append(column.desc() if item.descending else column.asc())
        # Stable paging when the sort key ties
        clauses.append(ClientModel.id)
        return clauses


def _user_ref(model) -> UserRef | None:
    if model is None:
        return None
    return UserRef(
        id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
    )


def _to_recipient(model: ClientModel) -> Recipient:
    return Recipient(
        client_id=model.id,
        email=model.email,
        first_name=model.first_name,
        last_name=model.last_name,
        company_name=model.company_name,
        client_type=model.client_type,
        status=model.status,
    )


def _document_to_json(document: ClientDocument) -> dict[str, Any]:
    return {
        "name": document.name,
        "path": document.path,
        "uploaded_at": document.uploaded_at.isoformat() if document.uploaded_at else None,
        "uploaded_by": document.uploaded_by,
    }


def _document_from_json(data: dict[str, Any]) -> ClientDocument:
    document = ClientDocument(
        name=data["name"],
        path=data["path"],
        uploaded_by=data.get("uploaded_by"),
    )
    if data.get("uploaded_at"):
        document.uploaded_at = datetime.fromisoformat(data["uploaded_at"])
    return document
