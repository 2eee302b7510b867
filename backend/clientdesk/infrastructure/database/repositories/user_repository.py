"""Concrete repository implementation for staff users backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.application.interfaces import StaffUser, UserRepository
from clientdesk.domain.entities import MailboxTokens
from clientdesk.infrastructure.database.models import UserModel


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: UserModel) -> StaffUser:
        return StaffUser(
            id=model.id,
            law_firm_id=model.law_firm_id,
            role=model.role,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            is_active=model.is_active,
        )

    async def get_by_id(self, user_id: str) -> StaffUser | None:
        model = await self._session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    async def get_mailbox_tokens(self, user_id: str) -> MailboxTokens | None:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return None
        return MailboxTokens.from_dict(model.mailbox_tokens)

    async def save_mailbox_tokens(self, user_id: str, tokens: MailboxTokens) -> None:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            raise ValueError(f"User {user_id} not found in database")
        # Reassign so the JSON column is marked dirty
        model.mailbox_tokens = tokens.to_dict()
        await self._session.flush()

    async def list_emails_by_roles(self, law_firm_id: str, roles: list[str]) -> list[str]:
        stmt = (
            select(UserModel.email)
            .where(
                UserModel.law_firm_id == law_firm_id,
                UserModel.role.in_(roles),
                UserModel.email.is_not(None),
            )
            .order_by(UserModel.email)
        )
        result = await self._session.execute(stmt)
        return [email for email in result.scalars().all() if email]
