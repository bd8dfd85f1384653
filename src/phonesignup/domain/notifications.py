"""
Welcome notification dispatch.

Delivery is best-effort: any transport failure is logged and swallowed
so that account creation never depends on the SMS gateway.
"""

import logging
from dataclasses import dataclass, field

from .messages import PlainTranslator
from .models import Registration
from .ports import SmsGateway, Translator

logger = logging.getLogger(__name__)


@dataclass
class WelcomeNotifier:
    """Sends the welcome SMS for a freshly provisioned registration."""

    sms_gateway: SmsGateway
    product_name: str = "Twiga Cloud"
    translator: Translator = field(default_factory=PlainTranslator)

    def send_welcome_sms(self, registration: Registration) -> bool:
        """
        Send the welcome message to the registration's phone.

        Returns:
            True if the gateway accepted the message, False if it failed
        """
        message = self.translator.t(
            "Welcome to %s! %s", self.product_name, registration.username
        )
        try:
            self.sms_gateway.send_sms(registration.phone, message)
        except Exception as e:
            # Admins see this in the logs; the user still gets an account.
            logger.error(
                "Unable to send the welcome sms for registration %s",
                registration.id,
                exc_info=e,
            )
            return False
        return True
