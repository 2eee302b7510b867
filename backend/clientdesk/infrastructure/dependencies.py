"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.application.interfaces import MailboxGateway, MailSender
from clientdesk.application.services import (
    ClientDirectoryService,
    MailboxService,
    NewsletterDispatcher,
)
from clientdesk.config import get_settings
from clientdesk.domain.entities import Actor
from clientdesk.infrastructure.database.repositories import (
    SQLAlchemyClientRepository,
    SQLAlchemyUserRepository,
)
from clientdesk.infrastructure.database.session import get_db_session
from clientdesk.infrastructure.google.gmail_gateway import GmailGateway, GmailOAuthConfig
from clientdesk.infrastructure.mail.gmail_sender import GmailMailSender
from clientdesk.infrastructure.mail.smtp_sender import SmtpMailSender


def build_gmail_gateway() -> GmailGateway:
    """Construct the process-wide gateway from settings (called by ``create_app``)."""
    settings = get_settings()
    config = None
    if settings.google_client_id and settings.google_client_secret:
        config = GmailOAuthConfig(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.resolved_google_redirect_uri,
        )
    return GmailGateway(config)


def get_gmail_gateway(request: Request) -> MailboxGateway:
    """The gateway built at startup and stored on ``app.state``."""
    return request.app.state.gmail_gateway


async def get_current_actor(
    x_user_id: str | None = Header(default=None),
    session: AsyncSession = Depends(get_db_session),
) -> Actor:
    """Resolve the caller from the user id set by the upstream auth layer."""
    if not x_user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    user = await SQLAlchemyUserRepository(session).get_by_id(x_user_id)
    if user is None or not user.is_active:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    return Actor(
        user_id=user.id,
        law_firm_id=user.law_firm_id,
        role=user.role,
        email=user.email,
    )


async def get_client_directory_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ClientDirectoryService, None]:
    """Provides a ClientDirectoryService with its repository wired up."""
    settings = get_settings()
    yield ClientDirectoryService(
        SQLAlchemyClientRepository(session),
        recent_days=settings.recent_clients_days,
    )


async def get_mailbox_service(
    session: AsyncSession = Depends(get_db_session),
    gateway: MailboxGateway = Depends(get_gmail_gateway),
) -> AsyncGenerator[MailboxService, None]:
    """Provides a MailboxService bound to the shared gateway."""
    yield MailboxService(gateway, SQLAlchemyUserRepository(session))


async def get_mail_sender(
    session: AsyncSession = Depends(get_db_session),
    gateway: MailboxGateway = Depends(get_gmail_gateway),
    actor: Actor = Depends(get_current_actor),
) -> AsyncGenerator[MailSender, None]:
    """SMTP or the actor's Gmail mailbox, per ``newsletter_transport``."""
    settings = get_settings()
    if settings.newsletter_transport == "gmail":
        yield GmailMailSender(gateway, SQLAlchemyUserRepository(session), actor.user_id)
        return
    yield SmtpMailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password,
        from_name=settings.smtp_from_name,
    )


async def get_newsletter_dispatcher(
    session: AsyncSession = Depends(get_db_session),
    sender: MailSender = Depends(get_mail_sender),
) -> AsyncGenerator[NewsletterDispatcher, None]:
    """Provides a NewsletterDispatcher with the configured transport."""
    settings = get_settings()
    yield NewsletterDispatcher(
        SQLAlchemyClientRepository(session),
        sender,
        batch_size=settings.newsletter_batch_size,
        batch_delay=settings.newsletter_batch_delay_seconds,
    )
