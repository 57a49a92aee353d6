"""In-memory implementation of MailerPort for testing."""

from domain.model.errors import DeliveryError


class FakeMailer:
    """Records sent messages; fails every send when `fail` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    def send(self, from_name: str, to: str, message: bytes) -> None:
        if self.fail:
            raise DeliveryError("mailbox unavailable")
        self.sent.append({
            "from_name": from_name,
            "to": to,
            "message": message,
        })
