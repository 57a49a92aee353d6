"""Port definition for outbound email delivery."""

from typing import Protocol


class MailerPort(Protocol):
    def send(self, from_name: str, to: str, message: bytes) -> None:
        """Deliver a fully formatted RFC 5322 message. Raise DeliveryError on failure."""
        ...
