"""
Phone number validation.

Parsing and validity checks are delegated to the ``phonenumbers``
library. Parser error detail is never surfaced to the caller.
"""

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumber, PhoneNumberFormat

from .exceptions import InvalidPhoneNumber, MissingCountryCode
from .messages import PlainTranslator
from .ports import Translator

_plain = PlainTranslator()


def validate_phone_number(
    phone: str, default_region: str = "", translator: Translator = _plain
) -> PhoneNumber:
    """
    Parse and validate a phone number.

    Without a default region only international numbers (leading ``+``)
    are accepted.

    Args:
        phone: Raw phone number as typed by the user
        default_region: ISO 3166 region code used as parse hint, or ""
        translator: Formatter for the user-facing messages

    Returns:
        The parsed phone number

    Raises:
        MissingCountryCode: If no region is configured and the number is local
        InvalidPhoneNumber: If the number cannot be parsed or is not valid
    """
    region = default_region or None
    if region is None and not phone.startswith("+"):
        raise MissingCountryCode(translator.t("The phone number needs to contain the country code."))

    try:
        number = phonenumbers.parse(phone, region)
    except NumberParseException:
        raise InvalidPhoneNumber(translator.t("The phone number is invalid.")) from None

    if not phonenumbers.is_valid_number(number):
        raise InvalidPhoneNumber(translator.t("The phone number is invalid."))
    return number


def normalize_phone_number(number: PhoneNumber) -> str:
    """Format a parsed number as E.164 for storage and lookups."""
    return phonenumbers.format_number(number, PhoneNumberFormat.E164)


def canonical_phone_number(phone: str, default_region: str = "") -> str:
    """E.164 form of ``phone`` if it is a valid number, otherwise ``phone`` unchanged."""
    try:
        return normalize_phone_number(validate_phone_number(phone, default_region))
    except InvalidPhoneNumber:
        return phone
