"""Decoding of Gmail API ``format=full`` message resources."""

import base64
import re
from typing import Any

from clientdesk.domain.entities import MailMessage

_TAG_RE = re.compile(r"<[^>]*>")


def decode_body_data(data: str) -> str:
    """Decode a base64url body payload as UTF-8 (Gmail omits the padding)."""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def parse_message(message: dict[str, Any]) -> MailMessage:
    """Flatten a Gmail message resource into a ``MailMessage``.

    ``text/plain`` parts are concatenated into ``body`` and ``text/html``
    parts into ``html_body``, walking nested multiparts depth-first. Each
    falls back to the other when missing.
    """
    payload = message.get("payload") or {}
    headers = {
        (h.get("name") or "").lower(): h.get("value") or ""
        for h in payload.get("headers") or []
    }

    plain: list[str] = []
    html: list[str] = []

    if payload.get("parts"):
        for part in payload["parts"]:
            _collect_parts(part, plain, html)
    elif (payload.get("body") or {}).get("data"):
        content = decode_body_data(payload["body"]["data"])
        if payload.get("mimeType") == "text/html":
            html.append(content)
        else:
            plain.append(content)

    body = "".join(plain)
    html_body = "".join(html)

    return MailMessage(
        id=message["id"],
        thread_id=message.get("threadId"),
        subject=headers.get("subject", ""),
        sender=headers.get("from", ""),
        to=headers.get("to", ""),
        cc=headers.get("cc", ""),
        date=headers.get("date", ""),
        snippet=message.get("snippet") or "",
        body=body or _TAG_RE.sub("", html_body),
        html_body=html_body or body,
        labels=list(message.get("labelIds") or []),
        internal_date=message.get("internalDate"),
    )


def _collect_parts(part: dict[str, Any], plain: list[str], html: list[str]) -> None:
    data = (part.get("body") or {}).get("data")
    if data:
        mime_type = part.get("mimeType")
        if mime_type == "text/html":
            html.append(decode_body_data(data))
        elif mime_type == "text/plain":
            plain.append(decode_body_data(data))
    for child in part.get("parts") or []:
        _collect_parts(child, plain, html)
