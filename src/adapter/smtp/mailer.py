"""SMTP implementation of MailerPort."""

import logging
import smtplib

from domain.model.errors import DeliveryError

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Delivers pre-formatted messages over SMTP (STARTTLS by default)."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = '',
        password: str = '',
        envelope_from: str = '',
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.envelope_from = envelope_from
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, from_name: str, to: str, message: bytes) -> None:
        if not self.host:
            raise DeliveryError("SMTP host not configured")

        # UnicodeError: non-ASCII address on a server without SMTPUTF8
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(self.envelope_from, [to], message)
        except (smtplib.SMTPException, OSError, UnicodeError) as e:
            logger.error(
                "Failed to send email",
                extra={"sender": from_name, "error": str(e)},
            )
            raise DeliveryError(str(e)) from e

        logger.debug("Email sent", extra={"sender": from_name})
