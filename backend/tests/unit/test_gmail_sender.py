"""Unit tests for the GmailMailSender."""

import asyncio

import pytest

from clientdesk.application.interfaces import MailboxGateway, MailboxSession, UserRepository
from clientdesk.domain.entities import MailboxTokens
from clientdesk.domain.exceptions import (
    MailboxNotAuthenticatedError,
    MailboxProviderError,
    MailDeliveryError,
)
from clientdesk.infrastructure.mail.gmail_sender import GmailMailSender


class StubSession(MailboxSession):
    def __init__(self, outbox: list, error: Exception | None, rotated: MailboxTokens | None):
        self._outbox = outbox
        self._error = error
        self._rotated = rotated

    @property
    def rotated_tokens(self):
        return self._rotated

    async def fetch_emails(self, *, query="", max_results=50, page_token=None):
        raise NotImplementedError

    async def get_user_profile(self):
        raise NotImplementedError

    async def send_message(self, *, to, subject, html, text) -> str:
        if self._error:
            raise self._error
        self._outbox.append(to)
        return "id"


class StubGateway(MailboxGateway):
    def __init__(self, error: Exception | None = None, rotated: MailboxTokens | None = None):
        self.outbox: list[str] = []
        self.error = error
        self.rotated = rotated

    @property
    def is_configured(self) -> bool:
        return True

    def get_auth_url(self) -> str:
        return ""

    async def exchange_code(self, code):
        raise NotImplementedError

    def open_session(self, tokens):
        if tokens is None:
            raise MailboxNotAuthenticatedError()
        return StubSession(self.outbox, self.error, self.rotated)


@pytest.mark.asyncio
async def test_sends_through_stored_mailbox(user_repository):
    user_repository.tokens["admin-1"] = MailboxTokens(access_token="t")
    gateway = StubGateway()

    await GmailMailSender(gateway, user_repository, "admin-1").send(
        to="jane@example.com", subject="S", html="h", text="t"
    )

    assert gateway.outbox == ["jane@example.com"]


@pytest.mark.asyncio
async def test_missing_tokens_fail_delivery(user_repository):
    with pytest.raises(MailDeliveryError):
        await GmailMailSender(StubGateway(), user_repository, "admin-1").send(
            to="jane@example.com", subject="S", html="h", text="t"
        )


@pytest.mark.asyncio
async def test_provider_errors_fail_delivery(user_repository):
    user_repository.tokens["admin-1"] = MailboxTokens(access_token="t")
    gateway = StubGateway(error=MailboxProviderError("gmail", 429, "Quota exceeded"))

    with pytest.raises(MailDeliveryError) as exc_info:
        await GmailMailSender(gateway, user_repository, "admin-1").send(
            to="jane@example.com", subject="S", html="h", text="t"
        )
    assert exc_info.value.message == "Quota exceeded"


@pytest.mark.asyncio
async def test_rotated_tokens_saved_once(user_repository):
    user_repository.tokens["admin-1"] = MailboxTokens(access_token="old", refresh_token="r")
    rotated = MailboxTokens(access_token="new", refresh_token="r")
    sender = GmailMailSender(StubGateway(rotated=rotated), user_repository, "admin-1")

    for to in ("a@x.com", "b@x.com"):
        await sender.send(to=to, subject="S", html="h", text="t")

    assert user_repository.saved == [rotated]


class RotatingGateway(StubGateway):
    """Every session refreshes and comes back with a new token set."""

    def __init__(self):
        super().__init__()
        self.refreshes = 0

    def open_session(self, tokens):
        self.refreshes += 1
        rotated = MailboxTokens(access_token=f"fresh-{self.refreshes}", refresh_token="r")
        return StubSession(self.outbox, None, rotated)


class TokenStore(UserRepository):
    def __init__(self):
        self.tokens: dict[str, MailboxTokens] = {}
        self.saved: list[MailboxTokens] = []

    async def get_by_id(self, user_id):
        return None

    async def get_mailbox_tokens(self, user_id):
        return self.tokens.get(user_id)

    async def save_mailbox_tokens(self, user_id, tokens):
        self.tokens[user_id] = tokens
        self.saved.append(tokens)

    async def list_emails_by_roles(self, law_firm_id, roles):
        return []


class ExclusiveSaveRepository(TokenStore):
    """Fails like a shared DB session would if two saves overlap."""

    def __init__(self):
        super().__init__()
        self._saving = False

    async def save_mailbox_tokens(self, user_id, tokens):
        if self._saving:
            raise RuntimeError("Session is already flushing")
        self._saving = True
        try:
            await asyncio.sleep(0)
            await super().save_mailbox_tokens(user_id, tokens)
        finally:
            self._saving = False


class BrokenSaveRepository(TokenStore):
    async def save_mailbox_tokens(self, user_id, tokens):
        raise RuntimeError("database is locked")


@pytest.mark.asyncio
async def test_concurrent_rotations_are_saved_one_at_a_time():
    users = ExclusiveSaveRepository()
    users.tokens["admin-1"] = MailboxTokens(access_token="expired", refresh_token="r")
    gateway = RotatingGateway()
    sender = GmailMailSender(gateway, users, "admin-1")

    await asyncio.gather(
        *(
            sender.send(to=f"c{i}@example.com", subject="S", html="h", text="t")
            for i in range(5)
        )
    )

    assert len(gateway.outbox) == 5
    assert len(users.saved) == 5
    assert users.tokens["admin-1"].access_token.startswith("fresh-")


@pytest.mark.asyncio
async def test_token_save_failure_does_not_fail_delivered_message():
    users = BrokenSaveRepository()
    users.tokens["admin-1"] = MailboxTokens(access_token="expired", refresh_token="r")
    gateway = RotatingGateway()

    await GmailMailSender(gateway, users, "admin-1").send(
        to="jane@example.com", subject="S", html="h", text="t"
    )

    assert gateway.outbox == ["jane@example.com"]
