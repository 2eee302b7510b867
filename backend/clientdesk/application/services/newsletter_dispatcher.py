"""Newsletter dispatcher — personalized, batched, best-effort sends to clients."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable

from clientdesk.application.interfaces import ClientRepository, MailSender
from clientdesk.domain.entities import (
    Actor,
    DeliveryDetail,
    DeliveryStatus,
    NewsletterSummary,
    Recipient,
)
from clientdesk.domain.exceptions import ForbiddenError, MissingFieldsError, NoRecipientsError
from clientdesk.infrastructure.logging.colored_logger import DispatchLogger, DispatchStage

logger = logging.getLogger(__name__)
dlog = DispatchLogger("NewsletterDispatcher")

_TAG_RE = re.compile(r"<[^>]*>")


def personalize(content: str, recipient: Recipient) -> str:
    """Fill the ``{firstName}``, ``{lastName}``, ``{name}`` and ``{companyName}`` placeholders."""
    first = recipient.first_name or ""
    last = recipient.last_name or ""
    return (
        content.replace("{firstName}", first)
        .replace("{lastName}", last)
        .replace("{name}", f"{first} {last}".strip() or "Client")
        .replace("{companyName}", recipient.company_name or "")
    )


def strip_tags(html: str) -> str:
    return _TAG_RE.sub("", html)


class NewsletterDispatcher:
    """Sends a subject/body to a firm's clients in fixed-size concurrent batches.

    Failures are recorded per recipient and never abort the run. The
    pause between batches is the only rate limiting.
    """

    def __init__(
        self,
        repository: ClientRepository,
        sender: MailSender,
        *,
        batch_size: int = 10,
        batch_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._repository = repository
        self._sender = sender
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay
        self._sleep = sleep

    async def select_recipients(
        self, actor: Actor, client_ids: list[str] | None = None
    ) -> list[Recipient]:
        """Explicit ids (any status) or every active client, always within the actor's firm."""
        recipients = await self._repository.find_recipients(
            actor.law_firm_id, client_ids or None
        )
        dlog.step_complete(
            DispatchStage.SELECT,
            f"Selected {len(recipients)} recipient(s)",
            explicit=bool(client_ids),
        )
        return recipients

    async def list_emailable_clients(self, actor: Actor) -> list[Recipient]:
        self._require_admin(actor, "Only administrators can access client list")
        return await self._repository.find_emailable(actor.law_firm_id)

    async def send(
        self,
        actor: Actor,
        subject: str | None,
        content: str | None,
        client_ids: list[str] | None = None,
    ) -> NewsletterSummary:
        self._require_admin(actor, "Only administrators can send newsletters")

        missing = [name for name, value in (("subject", subject), ("content", content)) if not value]
        if missing:
            raise MissingFieldsError("Subject and content are required", missing)

        recipients = await self.select_recipients(actor, client_ids)
        if not recipients:
            raise NoRecipientsError()

        logger.info(
            "Newsletter '%s' queued by %s for %d recipient(s) in firm %s",
            subject, actor.user_id, len(recipients), actor.law_firm_id,
        )
        summary = NewsletterSummary(total=len(recipients))
        batches = [
            recipients[i:i + self._batch_size]
            for i in range(0, len(recipients), self._batch_size)
        ]

        dlog.separator(f"Newsletter: {subject}")
        for index, batch in enumerate(batches, start=1):
            with dlog.timed_step(
                DispatchStage.BATCH, f"Batch {index}/{len(batches)}", size=len(batch)
            ):
                details = await asyncio.gather(
                    *(self._deliver(recipient, subject, content) for recipient in batch)
                )
            for detail in details:
                summary.record(detail)

            if index < len(batches):
                dlog.step_start(DispatchStage.PAUSE, f"Waiting {self._batch_delay}s")
                await self._sleep(self._batch_delay)

        dlog.step_complete(
            DispatchStage.COMPLETE,
            f"Newsletter sent. {summary.sent} succeeded, {summary.failed} failed.",
        )
        dlog.stats(total=summary.total, sent=summary.sent, failed=summary.failed)
        return summary

    async def _deliver(self, recipient: Recipient, subject: str, content: str) -> DeliveryDetail:
        html = personalize(content, recipient)
        try:
            await self._sender.send(
                to=recipient.email,
                subject=subject,
                html=html,
                text=strip_tags(html),
            )
        except Exception as exc:
            dlog.step_error(DispatchStage.SEND, f"Delivery to {recipient.email} failed", error=exc)
            return DeliveryDetail(
                client=recipient.name,
                email=recipient.email,
                status=DeliveryStatus.FAILED,
                error=getattr(exc, "message", None) or str(exc),
            )
        return DeliveryDetail(
            client=recipient.name, email=recipient.email, status=DeliveryStatus.SENT
        )

    @staticmethod
    def _require_admin(actor: Actor, message: str) -> None:
        if not actor.is_admin:
            raise ForbiddenError(message)
