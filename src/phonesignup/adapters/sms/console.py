"""
Console SMS gateway adapter - Implements SmsGateway protocol.

This module provides a console-based implementation of the domain's
SMS gateway port, logging messages to stdout for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleSmsGateway:
    """
    Implements SmsGateway protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints messages instead of sending them.
    """

    def send_sms(self, phone: str, message: str) -> None:
        """
        Log the message to console (simulates SMS delivery).

        In production, this would be replaced with a gateway adapter.

        Args:
            phone: Recipient phone number
            message: Message body
        """
        logger.info("[SMS] To: %s Message: %s", phone, message)
