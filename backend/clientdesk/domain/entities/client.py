"""Domain entity — a person or organization served by one law firm."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from uuid import uuid4

from clientdesk.domain.exceptions import DomainValidationError, MissingFieldsError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_MAX_LENGTH = 50


class ClientType(str, Enum):
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


def title_case(value: str) -> str:
    """Upper-case the first letter of each space-separated word, lower-case the rest."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


def normalize_email(value: str | None) -> str | None:
    """Trim and lower-case an email; blank becomes None."""
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


@dataclass
class Address:
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = "Kenya"


@dataclass
class EmergencyContact:
    name: str | None = None
    phone: str | None = None
    relationship: str | None = None


@dataclass
class ClientDocument:
    """A file attached to a client record."""

    name: str
    path: str
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    uploaded_by: str | None = None


@dataclass
class DepartmentRef:
    """Display subset of a department."""

    id: str
    name: str
    code: str | None = None


@dataclass
class UserRef:
    """Display subset of a staff user."""

    id: str
    first_name: str
    last_name: str
    email: str | None = None


@dataclass
class Client:
    """Core domain entity for a law-firm client.

    A client belongs to exactly one law firm for its whole lifetime.
    ``normalize`` is applied by the record store on every write.
    """

    law_firm_id: str
    first_name: str
    last_name: str
    phone_number: str
    created_by: str
    email: str | None = None
    client_type: ClientType = ClientType.INDIVIDUAL
    status: ClientStatus = ClientStatus.ACTIVE
    company_name: str | None = None
    registration_number: str | None = None
    business_type: str | None = None
    id_number: str | None = None
    date_of_birth: date | None = None
    address: Address | None = None
    preferred_department_id: str | None = None
    notes: str | None = None
    emergency_contact: EmergencyContact | None = None
    tags: list[str] = field(default_factory=list)
    profile_image: str | None = None
    documents: list[ClientDocument] = field(default_factory=list)
    total_cases: int = 0
    active_cases: int = 0
    completed_cases: int = 0
    updated_by: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Resolved references, filled in by the repository on read
    preferred_department: DepartmentRef | None = None
    created_by_user: UserRef | None = None
    updated_by_user: UserRef | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def display_name(self) -> str:
        if self.client_type == ClientType.CORPORATE and self.company_name:
            return self.company_name
        return self.full_name

    def normalize(self) -> None:
        """Validate required fields and apply write-time normalization.

        Raises:
            MissingFieldsError: first name, last name or phone number blank.
            DomainValidationError: malformed email or over-long name.
        """
        self.first_name = (self.first_name or "").strip()
        self.last_name = (self.last_name or "").strip()
        self.phone_number = (self.phone_number or "").strip()

        missing = [
            name
            for name, value in (
                ("first_name", self.first_name),
                ("last_name", self.last_name),
                ("phone_number", self.phone_number),
            )
            if not value
        ]
        if missing:
            raise MissingFieldsError(
                "First name, last name, and phone number are required", missing
            )

        if len(self.first_name) > NAME_MAX_LENGTH:
            raise DomainValidationError("First name cannot exceed 50 characters")
        if len(self.last_name) > NAME_MAX_LENGTH:
            raise DomainValidationError("Last name cannot exceed 50 characters")

        self.first_name = title_case(self.first_name)
        self.last_name = title_case(self.last_name)

        if self.company_name is not None:
            self.company_name = self.company_name.strip() or None
        if self.client_type == ClientType.CORPORATE and self.company_name:
            self.company_name = title_case(self.company_name)

        self.email = normalize_email(self.email)
        if self.email is not None and not is_valid_email(self.email):
            raise DomainValidationError("Please enter a valid email")

        # Tags form a set; keep first-seen order
        seen: dict[str, None] = {}
        for tag in self.tags:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
        self.tags = list(seen)

    def touch(self, updated_by: str) -> None:
        """Stamp the editor and refresh the updated_at timestamp."""
        self.updated_by = updated_by
        self.updated_at = datetime.now(timezone.utc)


@dataclass
class DepartmentCount:
    department: str
    count: int


@dataclass
class ClientStats:
    """Firm-level aggregate over client records."""

    total_clients: int = 0
    active_clients: int = 0
    inactive_clients: int = 0
    individual_clients: int = 0
    corporate_clients: int = 0
    clients_by_department: list[DepartmentCount] = field(default_factory=list)
    recent_clients: int = 0
