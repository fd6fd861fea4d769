"""Mailer — plain-text transactional mail over SMTP.

Invariants:
    - smtplib runs in a worker thread; the event loop never blocks on SMTP
    - Empty smtp_host means "log only": nothing is sent, nothing fails
    - SMTP failures raise ExternalServiceError
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from kringp.config import get_settings
from kringp.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(
        self, host: str, port: int, username: str, password: str, sender: str,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender

    async def send(self, to: str, subject: str, body: str) -> bool:
        """Send a message; returns False when SMTP is not configured."""
        if not self.host:
            logger.info(f"SMTP not configured, skipping mail '{subject}'")
            return False
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise ExternalServiceError("mail", str(e))
        return True

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)


def get_mailer() -> Mailer:
    """FastAPI dependency — overridden in tests."""
    s = get_settings()
    return Mailer(s.smtp_host, s.smtp_port, s.smtp_username, s.smtp_password, s.mail_from)
