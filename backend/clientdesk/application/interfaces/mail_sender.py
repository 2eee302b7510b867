"""Outbound mail port used by the newsletter dispatcher."""

from abc import ABC, abstractmethod


class MailSender(ABC):
    """Sends one message to one recipient.

    Implementations raise ``MailDeliveryError`` when the message could not
    be handed to the transport.
    """

    @abstractmethod
    async def send(self, *, to: str, subject: str, html: str, text: str) -> None:
        ...
