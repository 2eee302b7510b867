from .client_repository import ClientFilter, ClientRepository, ClientSort, LIST_SEARCH_FIELDS
from .user_repository import StaffUser, UserRepository
from .mailbox_gateway import MailboxGateway, MailboxSession
from .mail_sender import MailSender

__all__ = [
    "ClientFilter",
    "ClientRepository",
    "ClientSort",
    "LIST_SEARCH_FIELDS",
    "StaffUser",
    "UserRepository",
    "MailboxGateway",
    "MailboxSession",
    "MailSender",
]
