"""Email verification issuer: stores a fresh code and mails its link.

Flow: generate code → persist EmailVerification → compose message → mailer.send
"""

import logging
import random
import secrets
from datetime import datetime, timezone
from email.message import EmailMessage
from email.policy import SMTP
from email.utils import formataddr
from typing import Callable

from domain.model.email_verification import EmailVerification
from domain.model.errors import DeliveryError, StorageError
from port.mailer import MailerPort
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

CODE_ALPHABET = 'abcdefghijklmnopqrstuvwxyz0123456789'
CODE_LENGTH = 6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmailVerificationIssuer:
    def __init__(
        self,
        repo: UserRepository,
        mailer: MailerPort,
        sender_name: str,
        sender_address: str,
        endpoint: str,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repo = repo
        self.mailer = mailer
        self.sender_name = sender_name
        self.sender_address = sender_address
        self.endpoint = endpoint
        self._rng = rng or secrets.SystemRandom()
        self._clock = clock

    def send(self, user_id: str, username: str, to: str) -> EmailVerification:
        """Issue a verification code for user_id and mail it to `to`.

        Returns the persisted EmailVerification.

        Raises:
            StorageError: verification record could not be stored
            DeliveryError: message could not be built or the mailer rejected it
        """
        verification = EmailVerification.create(self.generate_code(), user_id, now=self._clock())

        try:
            self.repo.insert_email_verification(verification)
        except StorageError as e:
            raise StorageError(f"Could not insert email verification: {e}") from e

        # ValueError: an address the message headers cannot encode
        try:
            message = self.compose(username, to, verification.code)
            self.mailer.send(self.sender_name, to, message)
        except (DeliveryError, ValueError) as e:
            raise DeliveryError(f"Could not send email verification: {e}") from e

        logger.info("Email verification sent", extra={"userId": user_id})
        return verification

    def generate_code(self) -> str:
        return ''.join(self._rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))

    def verification_link(self, code: str) -> str:
        return f"{self.endpoint.rstrip('/')}/{code}"

    def compose(self, username: str, to: str, code: str) -> bytes:
        """Build the plain-text verification message."""
        msg = EmailMessage(policy=SMTP)
        msg['From'] = formataddr((self.sender_name, self.sender_address))
        msg['To'] = to
        msg['Subject'] = f"{self.sender_name} Email Verification"
        # link on its own line keeps the body within 78 columns (7bit, not quoted-printable)
        msg.set_content(
            f"Hi {username},\n"
            f"\n"
            f"Please click the following link to verify your email address:\n"
            f"{self.verification_link(code)}\n"
            f"\n"
            f"The link expires in 24 hours.\n"
        )
        return msg.as_bytes()
