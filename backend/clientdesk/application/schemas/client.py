"""Pydantic DTOs (Data Transfer Objects) for the Client feature."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from clientdesk.domain.entities import ClientStatus, ClientType


class AddressSchema(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = "Kenya"

    model_config = {"from_attributes": True}


class EmergencyContactSchema(BaseModel):
    name: str | None = None
    phone: str | None = None
    relationship: str | None = None

    model_config = {"from_attributes": True}


class ClientDocumentSchema(BaseModel):
    name: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None

    model_config = {"from_attributes": True}


class ClientCreate(BaseModel):
    """Schema for creating a client.

    Name and phone presence is checked by the directory service so that
    blank strings and absent fields produce the same error.
    """

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    client_type: ClientType = ClientType.INDIVIDUAL
    company_name: str | None = None
    registration_number: str | None = None
    business_type: str | None = None
    id_number: str | None = None
    date_of_birth: date | None = None
    address: AddressSchema | None = None
    preferred_department_id: str | None = None
    notes: str | None = None
    emergency_contact: EmergencyContactSchema | None = None
    tags: list[str] = Field(default_factory=list)
    profile_image: str | None = None
    documents: list[ClientDocumentSchema] = Field(default_factory=list)


class ClientUpdate(BaseModel):
    """Schema for a partial client update — only fields sent are applied."""

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    client_type: ClientType | None = None
    status: ClientStatus | None = None
    company_name: str | None = None
    registration_number: str | None = None
    business_type: str | None = None
    id_number: str | None = None
    date_of_birth: date | None = None
    address: AddressSchema | None = None
    preferred_department_id: str | None = None
    notes: str | None = None
    emergency_contact: EmergencyContactSchema | None = None
    tags: list[str] | None = None
    profile_image: str | None = None
    documents: list[ClientDocumentSchema] | None = None


class ClientListQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: str | None = None
    client_type: ClientType | None = None
    status: str = "active"
    department: str | None = None
    sort_by: str = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class DepartmentRefSchema(BaseModel):
    id: str
    name: str
    code: str | None = None

    model_config = {"from_attributes": True}


class UserRefSchema(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str | None = None

    model_config = {"from_attributes": True}


class ClientResponse(BaseModel):
    """Expanded client record returned to the caller."""

    id: str
    law_firm_id: str
    first_name: str
    last_name: str
    full_name: str
    display_name: str
    phone_number: str
    email: str | None
    client_type: ClientType
    status: ClientStatus
    company_name: str | None
    registration_number: str | None
    business_type: str | None
    id_number: str | None
    date_of_birth: date | None
    address: AddressSchema | None
    preferred_department_id: str | None
    preferred_department: DepartmentRefSchema | None
    notes: str | None
    emergency_contact: EmergencyContactSchema | None
    tags: list[str]
    profile_image: str | None
    documents: list[ClientDocumentSchema]
    total_cases: int
    active_cases: int
    completed_cases: int
    created_by: str
    created_by_user: UserRefSchema | None
    updated_by: str | None
    updated_by_user: UserRefSchema | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClientSearchResult(BaseModel):
    """Typeahead projection of a client."""

    id: str
    first_name: str
    last_name: str
    email: str | None
    phone_number: str
    company_name: str | None
    client_type: ClientType
    display_name: str

    model_config = {"from_attributes": True}


class DepartmentCountSchema(BaseModel):
    department: str
    count: int

    model_config = {"from_attributes": True}


class ClientStatsResponse(BaseModel):
    total_clients: int
    active_clients: int
    inactive_clients: int
    individual_clients: int
    corporate_clients: int
    clients_by_department: list[DepartmentCountSchema]
    recent_clients: int

    model_config = {"from_attributes": True}
