"""
SMTP mail dispatcher adapter - Implements MailDispatcher protocol.

Sends the signup code as a plain-text message over SMTP with STARTTLS.
Transport failures are raised as MailDeliveryError; the registration flow
decides whether they are fatal.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.domain.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "OTP for SignUp"


class SmtpMailDispatcher:
    """Implements MailDispatcher protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        sender: str = "no-reply@otpgate.local",
        use_tls: bool = True,
        timeout: float = 15.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    def send_otp(self, email: str, code: str) -> None:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self.sender
        message["To"] = email
        message.set_content(f"Your OTP for signup is: {code}")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as conn:
                conn.ehlo()
                if self.use_tls:
                    conn.starttls()
                    conn.ehlo()
                if self.username and self.password:
                    conn.login(self.username, self.password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Could not deliver OTP to {email}") from e

        logger.info("OTP email sent to %s", email)
