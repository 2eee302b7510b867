"""Domain entities for newsletter dispatch."""

from dataclasses import dataclass, field
from enum import Enum


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass
class Recipient:
    """Projection of a client that can receive a newsletter."""

    client_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    company_name: str | None = None
    client_type: str | None = None
    status: str | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class DeliveryDetail:
    client: str
    email: str
    status: DeliveryStatus
    error: str | None = None


@dataclass
class NewsletterSummary:
    """Result of a best-effort newsletter run."""

    total: int = 0
    sent: int = 0
    failed: int = 0
    details: list[DeliveryDetail] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.sent > 0

    def record(self, detail: DeliveryDetail) -> None:
        if detail.status == DeliveryStatus.SENT:
            self.sent += 1
        else:
            self.failed += 1
        self.details.append(detail)
