"""SQLAlchemy ORM model for cases, as far as client deletion needs them."""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from clientdesk.infrastructure.database.base import Base


class CaseModel(Base):
    """ORM model — maps to the 'cases' table."""

    __tablename__ = "cases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    law_firm_id: Mapped[str] = mapped_column(String(36), nullable=False)
    client_id: Mapped[str] = mapped_column(String(36), ForeignKey("clients.id"), nullable=False)
    case_number: Mapped[str] = mapped_column(String(50), nullable=False)
    case_type: Mapped[str] = mapped_column(String(20), nullable=False, default="legal")
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="open")

    __table_args__ = (
        Index("ix_cases_client", "client_id"),
    )

    def __repr__(self) -> str:
        return f"<CaseModel(id={self.id}, number='{self.case_number}')>"
