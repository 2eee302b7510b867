from .common import ApiResponse, ErrorResponse, PaginatedResponse, PaginationMeta
from .client import (
    AddressSchema,
    ClientCreate,
    ClientDocumentSchema,
    ClientListQuery,
    ClientResponse,
    ClientSearchResult,
    ClientStatsResponse,
    ClientUpdate,
    EmergencyContactSchema,
)
from .newsletter import (
    AuthCallbackResponse,
    AuthUrlResponse,
    ConnectionStatusResponse,
    FetchEmailsRequest,
    MailboxPageResponse,
    NewsletterClientsResponse,
    NewsletterSendRequest,
    NewsletterSummaryResponse,
    TokenPresence,
)

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "AddressSchema",
    "ClientCreate",
    "ClientDocumentSchema",
    "ClientListQuery",
    "ClientResponse",
    "ClientSearchResult",
    "ClientStatsResponse",
    "ClientUpdate",
    "EmergencyContactSchema",
    "AuthCallbackResponse",
    "AuthUrlResponse",
    "ConnectionStatusResponse",
    "FetchEmailsRequest",
    "MailboxPageResponse",
    "NewsletterClientsResponse",
    "NewsletterSendRequest",
    "NewsletterSummaryResponse",
    "TokenPresence",
]
