"""Pydantic DTOs for the newsletter and mailbox endpoints."""

from pydantic import BaseModel, Field

from clientdesk.domain.entities import DeliveryStatus


class NewsletterSendRequest(BaseModel):
    subject: str | None = None
    content: str | None = None
    client_ids: list[str] | None = None


class FetchEmailsRequest(BaseModel):
    query: str | None = None
    max_results: int = Field(50, ge=1)
    page_token: str | None = None


class AuthUrlResponse(BaseModel):
    auth_url: str


class TokenPresence(BaseModel):
    has_access_token: bool
    has_refresh_token: bool


class AuthCallbackResponse(BaseModel):
    email: str
    tokens: TokenPresence


class ConnectionStatusResponse(BaseModel):
    connected: bool
    email: str | None = None
    message: str | None = None


class MailMessageSchema(BaseModel):
    id: str
    thread_id: str | None
    subject: str
    sender: str
    to: str
    cc: str
    date: str
    snippet: str
    body: str
    html_body: str
    labels: list[str]
    internal_date: str | None

    model_config = {"from_attributes": True}


class MailboxPageResponse(BaseModel):
    emails: list[MailMessageSchema]
    next_page_token: str | None
    result_size_estimate: int | None

    model_config = {"from_attributes": True}


class NewsletterClientSchema(BaseModel):
    client_id: str
    first_name: str
    last_name: str
    email: str
    company_name: str | None
    client_type: str | None
    status: str | None

    model_config = {"from_attributes": True}


class NewsletterClientsResponse(BaseModel):
    clients: list[NewsletterClientSchema]
    total: int


class DeliveryDetailSchema(BaseModel):
    client: str
    email: str
    status: DeliveryStatus
    error: str | None = None

    model_config = {"from_attributes": True}


class NewsletterSummaryResponse(BaseModel):
    total: int
    sent: int
    failed: int
    details: list[DeliveryDetailSchema]

    model_config = {"from_attributes": True}
