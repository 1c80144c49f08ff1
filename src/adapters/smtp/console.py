"""
Console mail dispatcher adapter - Implements MailDispatcher protocol.

This module provides a console-based implementation of the domain's
mail dispatcher port, logging one-time codes for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleMailDispatcher:
    """
    Implements MailDispatcher protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Used when no SMTP host is configured.
    """

    def send_otp(self, email: str, code: str) -> None:
        """
        Log the one-time code (simulates email delivery).

        Args:
            email: Recipient email address
            code: Numeric one-time code
        """
        logger.info("[OTP] Email: %s Code: %s", email, code)
