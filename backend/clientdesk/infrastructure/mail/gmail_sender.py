"""Gmail mail sender — newsletter transport through the actor's connected mailbox."""

import asyncio
import logging

from clientdesk.application.interfaces import (
    MailboxGateway,
    MailboxSession,
    MailSender,
    UserRepository,
)
from clientdesk.domain.entities import MailboxTokens
from clientdesk.domain.exceptions import (
    MailboxNotAuthenticatedError,
    MailboxNotConfiguredError,
    MailboxProviderError,
    MailDeliveryError,
)

logger = logging.getLogger(__name__)


class GmailMailSender(MailSender):
    """Sends through the Gmail API using one user's stored tokens.

    Tokens are loaded on first send. Concurrent sends share the cached
    copy; token loading and rotation are serialized behind a lock so the
    user record is written by one send at a time. A rotated set replaces
    the cached copy and is written back to the user record.
    """

    def __init__(self, gateway: MailboxGateway, user_repository: UserRepository, user_id: str):
        self._gateway = gateway
        self._users = user_repository
        self._user_id = user_id
        self._tokens: MailboxTokens | None = None
        self._loaded = False
        self._lock = asyncio.Lock()

    async def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        tokens = await self._current_tokens()

        try:
            session = self._gateway.open_session(tokens)
        except (MailboxNotConfiguredError, MailboxNotAuthenticatedError) as exc:
            raise MailDeliveryError(to, _reason(exc)) from exc

        try:
            await session.send_message(to=to, subject=subject, html=html, text=text)
        except (MailboxNotAuthenticatedError, MailboxProviderError) as exc:
            raise MailDeliveryError(to, _reason(exc)) from exc
        finally:
            await self._keep_rotated(session)

    async def _current_tokens(self) -> MailboxTokens | None:
        async with self._lock:
            if not self._loaded:
                self._tokens = await self._users.get_mailbox_tokens(self._user_id)
                self._loaded = True
            return self._tokens

    async def _keep_rotated(self, session: MailboxSession) -> None:
        """Cache and persist a rotated token set; never fails the send."""
        rotated = session.rotated_tokens
        if rotated is None:
            return
        async with self._lock:
            if rotated == self._tokens:
                return
            self._tokens = rotated
            try:
                await self._users.save_mailbox_tokens(self._user_id, rotated)
            except Exception:
                logger.exception("Could not persist rotated mailbox tokens for user %s", self._user_id)
                return
        logger.debug("Persisted rotated mailbox tokens for user %s", self._user_id)


def _reason(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)
