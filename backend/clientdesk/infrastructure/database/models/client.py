"""SQLAlchemy ORM model for the Client entity."""

from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clientdesk.infrastructure.database.base import Base
from clientdesk.infrastructure.database.models.department import DepartmentModel
from clientdesk.infrastructure.database.models.user import UserModel


class ClientModel(Base):
    """ORM model — maps to the 'clients' table.

    ``(law_firm_id, email)`` is unique; NULL emails never collide.
    """

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    law_firm_id: Mapped[str] = mapped_column(String(36), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    client_type: Mapped[str] = mapped_column(String(20), nullable=False, default="individual")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    business_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    id_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    address: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    preferred_department_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_cases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active_cases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_cases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    preferred_department: Mapped[DepartmentModel | None] = relationship(lazy="joined")
    creator: Mapped[UserModel] = relationship(foreign_keys=[created_by], lazy="joined")
    updater: Mapped[UserModel | None] = relationship(foreign_keys=[updated_by], lazy="joined")

    __table_args__ = (
        UniqueConstraint("law_firm_id", "email", name="uq_clients_firm_email"),
        Index("ix_clients_firm_status", "law_firm_id", "status"),
        Index("ix_clients_firm_type", "law_firm_id", "client_type"),
        Index("ix_clients_firm_created", "law_firm_id", "created_at"),
        Index("ix_clients_department", "preferred_department_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ClientModel(id={self.id}, firm={self.law_firm_id}, "
            f"name='{self.first_name} {self.last_name}')>"
        )
