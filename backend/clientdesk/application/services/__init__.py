from .client_directory_service import ClientDirectoryService, ClientPage
from .mailbox_service import AuthorizationResult, ConnectionStatus, MailboxService
from .newsletter_dispatcher import NewsletterDispatcher

__all__ = [
    "ClientDirectoryService",
    "ClientPage",
    "AuthorizationResult",
    "ConnectionStatus",
    "MailboxService",
    "NewsletterDispatcher",
]
