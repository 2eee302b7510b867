"""SQLAlchemy ORM model for firm departments."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from clientdesk.infrastructure.database.base import Base


class DepartmentModel(Base):
    """ORM model — maps to the 'departments' table."""

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    law_firm_id: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        Index("ix_departments_firm", "law_firm_id"),
    )

    def __repr__(self) -> str:
        return f"<DepartmentModel(id={self.id}, name='{self.name}')>"
