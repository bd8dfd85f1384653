"""
Policy validation for registration input.

Each check raises a ValidationError subclass carrying a user-facing
message. Checks are independent; callers decide which ones to run
before writing a pending registration.
"""

import re
from dataclasses import dataclass, field

from phonenumbers import PhoneNumber

from .exceptions import (
    InvalidDisplayName,
    InvalidUsername,
    PhoneAlreadyClaimed,
    RegistrationNotFound,
    UsernameTaken,
)
from .messages import PlainTranslator
from .models import Registration, RegistrationPolicy
from .phone import normalize_phone_number, validate_phone_number
from .ports import AccountBackend, RegistrationRepository, Translator


@dataclass
class PolicyValidator:
    """Validates phone, username and display name against the policy."""

    repository: RegistrationRepository
    accounts: AccountBackend
    policy: RegistrationPolicy
    translator: Translator = field(default_factory=PlainTranslator)

    def validate_phone_number(self, phone: str) -> PhoneNumber:
        """Format and validity check only, using the configured region."""
        return validate_phone_number(phone, self.policy.default_phone_region, self.translator)

    def validate_phone(self, phone: str) -> str:
        """
        Validate a phone number and make sure no registration holds it.

        The error does not reveal whether the phone belongs to a pending
        registration or a provisioned account.

        Returns:
            The phone number in E.164 format

        Raises:
            InvalidPhoneNumber: If the number is malformed
            PhoneAlreadyClaimed: If a registration already uses the number
        """
        canonical = normalize_phone_number(self.validate_phone_number(phone))

        try:
            self.repository.find(canonical)
        except RegistrationNotFound:
            return canonical
        raise self.phone_taken()

    def phone_taken(self) -> PhoneAlreadyClaimed:
        return PhoneAlreadyClaimed(
            self.translator.t("A user has already taken this phone, maybe you already have an account?"),
            self.translator.t("You can log in now: %s", self.policy.login_url),
        )

    def validate_display_name(self, display_name: str | None) -> None:
        if not display_name:
            raise InvalidDisplayName(self.translator.t("Please provide a valid display name."))

    def validate_username(self, username: str | None, registration: Registration | None = None) -> None:
        """
        Check a login name against the policy and both namespaces.

        When provisioning, the registration being consumed is passed so its
        own proposed username does not count as pending.

        Raises:
            InvalidUsername: If empty or not matching username_policy_regex
            UsernameTaken: If pending in a registration or owned by an account
        """
        if not username:
            raise InvalidUsername(self.translator.t("Please provide a valid login name."))

        regex = self.policy.username_policy_regex
        if regex and re.search(regex, username) is None:
            raise InvalidUsername(self.translator.t("Please provide a valid login name."))

        exclude_id = registration.id if registration is not None else None
        if self.repository.username_is_pending(username, exclude_id) or self.accounts.get(username) is not None:
            raise UsernameTaken(self.translator.t("The login name you have chosen already exists."))
