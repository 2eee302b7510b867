from .actor import Actor, ADMIN_ROLES, STAFF_ROLES
from .client import (
    Address,
    Client,
    ClientDocument,
    ClientStats,
    ClientStatus,
    ClientType,
    DepartmentCount,
    DepartmentRef,
    EmergencyContact,
    UserRef,
    title_case,
)
from .mailbox import MailboxPage, MailboxProfile, MailboxTokens, MailMessage
from .newsletter import DeliveryDetail, DeliveryStatus, NewsletterSummary, Recipient

__all__ = [
    "Actor",
    "ADMIN_ROLES",
    "STAFF_ROLES",
    "Address",
    "Client",
    "ClientDocument",
    "ClientStats",
    "ClientStatus",
    "ClientType",
    "DepartmentCount",
    "DepartmentRef",
    "EmergencyContact",
    "UserRef",
    "title_case",
    "MailboxPage",
    "MailboxProfile",
    "MailboxTokens",
    "MailMessage",
    "DeliveryDetail",
    "DeliveryStatus",
    "NewsletterSummary",
    "Recipient",
]
