"""Mailbox service — connects a staff user's Gmail account and reads from it."""

import logging
from dataclasses import dataclass

from clientdesk.application.interfaces import MailboxGateway, MailboxSession, UserRepository
from clientdesk.domain.entities import Actor, MailboxPage
from clientdesk.domain.exceptions import (
    ForbiddenError,
    MailboxNotAuthenticatedError,
    MailboxProviderError,
    MissingFieldsError,
)

logger = logging.getLogger(__name__)

# Staff whose correspondence is shown when no explicit query is given
CORRESPONDENT_ROLES = ["debt_collector", "credit_head", "advocate", "legal_head"]


@dataclass
class AuthorizationResult:
    email: str
    has_access_token: bool
    has_refresh_token: bool


@dataclass
class ConnectionStatus:
    connected: bool
    email: str | None = None
    message: str | None = None


class MailboxService:
    """Orchestrates the OAuth consent flow and mailbox reads for one actor.

    Tokens live on the user record. Each call opens its own session from
    the stored tokens and persists any rotated set before returning.
    """

    def __init__(self, gateway: MailboxGateway, user_repository: UserRepository):
        self._gateway = gateway
        self._users = user_repository

    def get_auth_url(self, actor: Actor) -> str:
        _require_admin(actor, "Only administrators can access Gmail integration")
        return self._gateway.get_auth_url()

    async def complete_authorization(self, actor: Actor, code: str | None) -> AuthorizationResult:
        if not code:
            raise MissingFieldsError("Authorization code is required", ["code"])

        tokens = await self._gateway.exchange_code(code)
        await self._users.save_mailbox_tokens(actor.user_id, tokens)

        session = self._gateway.open_session(tokens)
        try:
            profile = await session.get_user_profile()
        finally:
            await self._persist_rotation(actor, session)

        logger.info("Mailbox %s connected for user %s", profile.email_address, actor.user_id)
        return AuthorizationResult(
            email=profile.email_address,
            has_access_token=bool(tokens.access_token),
            has_refresh_token=bool(tokens.refresh_token),
        )

    async def connection_status(self, actor: Actor) -> ConnectionStatus:
        _require_admin(actor, "Only administrators can check connection status")

        tokens = await self._users.get_mailbox_tokens(actor.user_id)
        if tokens is None or not tokens.access_token:
            return ConnectionStatus(connected=False, message="Gmail account not connected")

        session = self._gateway.open_session(tokens)
        try:
            profile = await session.get_user_profile()
        except (MailboxNotAuthenticatedError, MailboxProviderError) as exc:
            logger.info("Mailbox profile check failed for user %s: %s", actor.user_id, exc)
            return ConnectionStatus(
                connected=False, message="Gmail connection expired. Please reconnect."
            )
        except Exception:
            # Network errors and malformed replies also mean "not connected"
            logger.warning(
                "Mailbox profile check errored for user %s", actor.user_id, exc_info=True
            )
            return ConnectionStatus(
                connected=False, message="Gmail connection expired. Please reconnect."
            )
        finally:
            await self._persist_rotation(actor, session)

        return ConnectionStatus(connected=True, email=profile.email_address)

    async def fetch_emails(
        self,
        actor: Actor,
        query: str | None = None,
        max_results: int = 50,
        page_token: str | None = None,
    ) -> MailboxPage:
        _require_admin(actor, "Only administrators can fetch emails")

        tokens = await self._users.get_mailbox_tokens(actor.user_id)
        if tokens is None or not tokens.access_token:
            raise MailboxNotAuthenticatedError()

        if not query:
            query = await self._default_query(actor.law_firm_id)

        session = self._gateway.open_session(tokens)
        try:
            return await session.fetch_emails(
                query=query, max_results=max_results, page_token=page_token
            )
        finally:
            await self._persist_rotation(actor, session)

    async def _default_query(self, law_firm_id: str) -> str:
        emails = await self._users.list_emails_by_roles(law_firm_id, CORRESPONDENT_ROLES)
        return f"from:({' OR '.join(emails)})" if emails else ""

    async def _persist_rotation(self, actor: Actor, session: MailboxSession) -> None:
        if session.rotated_tokens is not None:
            await self._users.save_mailbox_tokens(actor.user_id, session.rotated_tokens)
            logger.debug("Persisted rotated mailbox tokens for user %s", actor.user_id)


def _require_admin(actor: Actor, message: str) -> None:
    if not actor.is_admin:
        raise ForbiddenError(message)
