"""Gmail gateway — implements the MailboxGateway port over Google's REST APIs.

Talks to the Google OAuth2 endpoints and the Gmail v1 API with httpx.
The gateway itself only holds the OAuth app credentials; every caller
gets its own ``GmailSession`` bound to a copy of its tokens.
"""

import asyncio
import base64
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlencode

import httpx

from clientdesk.application.interfaces import MailboxGateway, MailboxSession
from clientdesk.domain.entities import MailboxPage, MailboxProfile, MailboxTokens
from clientdesk.domain.exceptions import (
    AuthExchangeFailedError,
    MailboxNotAuthenticatedError,
    MailboxNotConfiguredError,
    MailboxProviderError,
)
from clientdesk.infrastructure.google.message_parser import parse_message
from clientdesk.infrastructure.mail.message_builder import build_message

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GMAIL_API_URL = "https://gmail.googleapis.com/gmail/v1/users/me"

SCOPES = (
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
)
MAX_RESULTS_LIMIT = 500
EXPIRED_MESSAGE = "Gmail connection expired. Please reconnect."


@dataclass(frozen=True)
class GmailOAuthConfig:
    client_id: str
    client_secret: str
    redirect_uri: str


class GmailGateway(MailboxGateway):
    """Infrastructure adapter — Google OAuth2 consent flow and Gmail sessions.

    Built once at startup. With no config it stays usable as an object
    but every operation raises ``MailboxNotConfiguredError``.
    """

    def __init__(
        self,
        config: GmailOAuthConfig | None,
        http_client: httpx.AsyncClient | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self._config = config
        self._http_client = http_client
        self._clock = clock

        if not self.is_configured:
            logger.warning("Google OAuth credentials not configured; Gmail integration disabled")

    @property
    def provider_name(self) -> str:
        return "gmail"

    @property
    def is_configured(self) -> bool:
        return bool(
            self._config
            and self._config.client_id
            and self._config.client_secret
            and self._config.redirect_uri
        )

    def get_auth_url(self) -> str:
        config = self._require_config()
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "include_granted_scopes": "true",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> MailboxTokens:
        config = self._require_config()
        form = {
            "code": code,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": config.redirect_uri,
            "grant_type": "authorization_code",
        }
        response = await self._post_token(form)
        if response.status_code != 200:
            message = _error_message(response)
            logger.warning("Authorization code exchange rejected: %s", message)
            raise AuthExchangeFailedError(f"Failed to exchange authorization code: {message}")
        return self._tokens_from_response(response.json())

    def open_session(self, tokens: MailboxTokens | None) -> "GmailSession":
        self._require_config()
        if tokens is None or not tokens.access_token:
            raise MailboxNotAuthenticatedError()
        return GmailSession(self, replace(tokens))

    # ── Internal (used by GmailSession) ──────────────────────────────

    async def refresh(self, tokens: MailboxTokens) -> MailboxTokens:
        """Obtain a new access token; keeps the refresh token if Google omits it."""
        config = self._require_config()
        if not tokens.refresh_token:
            raise MailboxNotAuthenticatedError(EXPIRED_MESSAGE)

        form = {
            "refresh_token": tokens.refresh_token,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "grant_type": "refresh_token",
        }
        response = await self._post_token(form)
        if response.status_code != 200:
            logger.info("Token refresh rejected: %s", _error_message(response))
            raise MailboxNotAuthenticatedError(EXPIRED_MESSAGE)

        refreshed = self._tokens_from_response(response.json())
        if not refreshed.refresh_token:
            refreshed.refresh_token = tokens.refresh_token
        if not refreshed.scope:
            refreshed.scope = tokens.scope
        return refreshed

    def get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=30.0)

    @property
    def owns_clients(self) -> bool:
        return self._http_client is None

    async def _post_token(self, form: dict[str, str]) -> httpx.Response:
        client = self.get_client()
        try:
            return await client.post(GOOGLE_TOKEN_URL, data=form)
        finally:
            if self.owns_clients:
                await client.aclose()

    def _tokens_from_response(self, data: dict[str, Any]) -> MailboxTokens:
        expires_in = data.get("expires_in")
        return MailboxTokens(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            expiry_date=(
                int(self._clock() * 1000) + int(expires_in) * 1000 if expires_in else None
            ),
            scope=data.get("scope"),
            token_type=data.get("token_type") or "Bearer",
        )

    def _require_config(self) -> GmailOAuthConfig:
        if not self.is_configured:
            raise MailboxNotConfiguredError()
        return self._config


class GmailSession(MailboxSession):
    """Per-call Gmail API client bound to one user's tokens.

    On a 401 the access token is refreshed once and the request retried;
    the new token set is then available from ``rotated_tokens``.
    """

    def __init__(self, gateway: GmailGateway, tokens: MailboxTokens):
        self._gateway = gateway
        self._tokens = tokens
        self._rotated: MailboxTokens | None = None

    @property
    def rotated_tokens(self) -> MailboxTokens | None:
        return self._rotated

    async def fetch_emails(
        self,
        *,
        query: str = "",
        max_results: int = 50,
        page_token: str | None = None,
    ) -> MailboxPage:
        params: dict[str, Any] = {
            "q": query or "",
            "maxResults": max(1, min(max_results, MAX_RESULTS_LIMIT)),
        }
        if page_token:
            params["pageToken"] = page_token

        client = self._gateway.get_client()
        try:
            listing = await self._request(client, "GET", "/messages", params=params)
            ids = [m["id"] for m in listing.get("messages") or []]
            messages = await asyncio.gather(
                *(
                    self._request(client, "GET", f"/messages/{message_id}", params={"format": "full"})
                    for message_id in ids
                )
            )
        finally:
            if self._gateway.owns_clients:
                await client.aclose()

        logger.debug("Fetched %d message(s) for query %r", len(messages), query)
        return MailboxPage(
            emails=[parse_message(m) for m in messages],
            next_page_token=listing.get("nextPageToken"),
            result_size_estimate=listing.get("resultSizeEstimate"),
        )

    async def get_user_profile(self) -> MailboxProfile:
        client = self._gateway.get_client()
        try:
            data = await self._request(client, "GET", "/profile")
        finally:
            if self._gateway.owns_clients:
                await client.aclose()

        return MailboxProfile(
            email_address=data.get("emailAddress", ""),
            messages_total=data.get("messagesTotal"),
            threads_total=data.get("threadsTotal"),
            history_id=data.get("historyId"),
        )

    async def send_message(self, *, to: str, subject: str, html: str, text: str) -> str:
        message = build_message(to=to, subject=subject, html=html, text=text)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")

        client = self._gateway.get_client()
        try:
            data = await self._request(client, "POST", "/messages/send", json={"raw": raw})
        finally:
            if self._gateway.owns_clients:
                await client.aclose()
        return data.get("id", "")

    async def _request(
        self, client: httpx.AsyncClient, method: str, path: str, **kwargs: Any
    ) -> dict[str, Any]:
        url = f"{GMAIL_API_URL}{path}"
        response = await client.request(method, url, headers=self._headers(), **kwargs)

        if response.status_code == 401:
            await self._refresh()
            response = await client.request(method, url, headers=self._headers(), **kwargs)
            if response.status_code == 401:
                raise MailboxNotAuthenticatedError(EXPIRED_MESSAGE)

        if not response.is_success:
            raise MailboxProviderError(
                provider=self._gateway.provider_name,
                status_code=response.status_code,
                message=_error_message(response),
            )
        return response.json()

    async def _refresh(self) -> None:
        # One refresh per session; later 401s retry with the rotated token
        if self._rotated is not None:
            return
        self._tokens = await self._gateway.refresh(self._tokens)
        self._rotated = replace(self._tokens)
        logger.info("Gmail access token refreshed")

    def _headers(self) -> dict[str, str]:
        token_type = self._tokens.token_type or "Bearer"
        return {"Authorization": f"{token_type} {self._tokens.access_token}"}


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message from a Google error body."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return error.get("message") or response.text
    if isinstance(error, str):
        return data.get("error_description") or error
    return response.text
