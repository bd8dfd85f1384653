"""
Registration domain service - pending signups and account provisioning.

Lifecycle of a registration
===========================

    PENDING -> CONFIRMED      (confirm_email, optional)
    PENDING -> PROVISIONED    (create_account)
    CONFIRMED -> PROVISIONED  (create_account)
    any non-terminal -> DELETED (delete_registration)

create_account runs its steps strictly in order. Some failures are fatal
and propagate to the caller; others are contained and logged:

    fatal       missing password, username/display name/phone validation,
                missing enforced phone, backend refusing the user, backend
                errors while setting display name or phone property
    contained   missing registered-user group, welcome SMS failure,
                admin notification failure

No rollback is attempted: when a fatal step fails after the backend has
created the user, the account stays in place.
"""

import logging
from dataclasses import dataclass, field

from . import tokens
from .exceptions import AccountBackendFailure, MissingPassword, MissingPhone, RegistrationNotFound
from .messages import PlainTranslator
from .models import (
    PROPERTY_PHONE,
    Registration,
    RegistrationPolicy,
    RegistrationState,
    VerificationState,
)
from .notifications import WelcomeNotifier
from .phone import canonical_phone_number, normalize_phone_number
from .ports import (
    Account,
    AccountBackend,
    AccountPropertyStore,
    AdminNotifier,
    Crypto,
    GroupManager,
    RegistrationRepository,
    Translator,
    UserConfig,
)
from .validation import PolicyValidator

logger = logging.getLogger(__name__)

APP_ID = "phonesignup"
SEND_WELCOME_ON_ENABLE = "send_welcome_sms_on_enable"
WELCOME_PHONE = "welcome_sms_phone"
NO_GROUP = "none"


@dataclass
class RegistrationService:
    """
    Domain service for phone registrations.

    Orchestrates the registration flow: writing pending registrations,
    confirming them and provisioning the account they describe.
    ``account_properties`` is optional; when it is None the directory has
    no property support and phone properties are not written.
    """

    repository: RegistrationRepository
    accounts: AccountBackend
    groups: GroupManager
    user_config: UserConfig
    crypto: Crypto
    notifier: WelcomeNotifier
    admin_notifier: AdminNotifier
    policy: RegistrationPolicy = field(default_factory=RegistrationPolicy)
    account_properties: AccountPropertyStore | None = None
    translator: Translator = field(default_factory=PlainTranslator)
    validator: PolicyValidator = field(init=False)

    def __post_init__(self) -> None:
        self.validator = PolicyValidator(
            repository=self.repository,
            accounts=self.accounts,
            policy=self.policy,
            translator=self.translator,
        )

    def create_registration(
        self, phone: str, username: str = "", password: str = "", display_name: str = ""
    ) -> Registration:
        """
        Write a new pending registration.

        No validation happens here; run the PolicyValidator checks first.
        A phone that parses as a valid number is stored in E.164 form so
        lookups and the uniqueness claim see one spelling per number.

        Args:
            phone: Phone number, as returned by validate_phone
            username: Proposed login name
            password: Plaintext password, encrypted before storage
            display_name: Proposed display name

        Returns:
            The stored registration with id and both secrets set

        Raises:
            PhoneAlreadyClaimed: If another registration claimed the phone
        """
        phone = canonical_phone_number(phone, self.policy.default_phone_region)
        registration = Registration(phone=phone, username=username, display_name=display_name)
        if password != "":
            registration.password = self.crypto.encrypt(password)
        registration.confirmation_token = tokens.generate_confirmation_token()
        registration.client_secret = tokens.generate_client_secret()

        if not self.repository.insert(registration):
            raise self.validator.phone_taken()

        logger.info("Registration %s created for user '%s'", registration.id, username)
        return registration

    def confirm_email(self, registration: Registration) -> None:
        registration.email_confirmed = True
        self.repository.update(registration)

    def generate_new_token(self, registration: Registration) -> None:
        """Replace the confirmation token, e.g. to resend a confirmation SMS."""
        registration.confirmation_token = tokens.generate_confirmation_token()
        self.repository.update(registration)

    def generate_new_client_secret(self, registration: Registration) -> None:
        registration.client_secret = tokens.generate_client_secret()
        self.repository.update(registration)

    def get_registration_for_phone(self, phone: str) -> Registration:
        return self.repository.find(phone)

    def get_registration_for_secret(self, secret: str) -> Registration:
        return self.repository.find_by_secret(secret)

    def get_registration_by_user_id(self, user_id: str) -> Registration:
        return self.repository.find_by_user_id(user_id)

    def delete_registration(self, registration: Registration) -> None:
        self.repository.delete(registration)
        logger.info("Registration %s is %s", registration.id, RegistrationState.DELETED.value)

    def create_account(
        self,
        registration: Registration,
        login_name: str | None = None,
        full_name: str | None = None,
        phone: str | None = None,
        password: str | None = None,
    ) -> Account:
        """
        Provision the account described by a registration.

        A password stored on the registration always wins over the
        ``password`` argument.

        Args:
            registration: The registration being consumed
            login_name: Login name, defaults to the registration's username
            full_name: Display name for the account
            phone: Phone number written to the account properties
            password: Password used when the registration stores none

        Returns:
            The created account

        Raises:
            MissingPassword: If no password is available
            ValidationError: If login name, display name or phone is invalid
            MissingPhone: If the phone is enforced but not supplied
            AccountBackendFailure: If the backend did not create the user
        """
        if login_name is None:
            login_name = registration.username

        if registration.password is not None:
            password = self.crypto.decrypt(registration.password)

        if not password:
            raise MissingPassword(self.translator.t("Please provide a password."))

        self.validator.validate_username(login_name, registration)

        if self.policy.show_fullname and self.policy.enforce_fullname:
            self.validator.validate_display_name(full_name)

        if self.policy.show_phone:
            if phone:
                phone = normalize_phone_number(self.validator.validate_phone_number(phone))
            elif self.policy.enforce_phone:
                raise MissingPhone(self.translator.t("Please provide a valid phone number."))

        account = self.accounts.create_user(login_name, password)
        if not account:
            raise AccountBackendFailure(
                self.translator.t("Unable to create user, there are problems with the user backend.")
            )
        user_id = account.get_uid()

        if full_name and self.policy.show_fullname:
            account.set_display_name(full_name)

        if self.account_properties is not None and phone and self.policy.show_phone:
            self._set_phone_property(account, phone)

        group_id = self._add_to_registered_user_group(account)

        if self.policy.admin_approval_required:
            account.set_enabled(False)
            self.user_config.set_user_value(user_id, APP_ID, SEND_WELCOME_ON_ENABLE, "yes")
            # The registration is usually deleted before the account is enabled.
            self.user_config.set_user_value(user_id, APP_ID, WELCOME_PHONE, registration.phone)
            logger.info("Account '%s' disabled until an administrator approves it", user_id)
        else:
            self.notifier.send_welcome_sms(registration)

        self._notify_admins(account, group_id)
        logger.info(
            "Registration %s is %s as account '%s'",
            registration.id,
            RegistrationState.PROVISIONED.value,
            user_id,
        )
        return account

    def send_deferred_welcome(self, user_id: str) -> bool:
        """
        Send the welcome SMS held back by admin approval.

        This is the hook for whatever enables accounts on behalf of an
        administrator; nothing in this package calls it. The recipient is
        the phone recorded when the account was gated, falling back to a
        registration still stored for the user. The per-user flag is
        cleared before sending so the message goes out at most once; it is
        kept when no recipient can be found.

        Returns:
            True if a welcome SMS was dispatched
        """
        if self.user_config.get_user_value(user_id, APP_ID, SEND_WELCOME_ON_ENABLE, "no") != "yes":
            return False

        recipient = self._deferred_welcome_recipient(user_id)
        if recipient is None:
            logger.error("No phone number on record for the deferred welcome sms of '%s'", user_id)
            return False

        self.user_config.delete_user_value(user_id, APP_ID, SEND_WELCOME_ON_ENABLE)
        self.user_config.delete_user_value(user_id, APP_ID, WELCOME_PHONE)
        return self.notifier.send_welcome_sms(recipient)

    def _deferred_welcome_recipient(self, user_id: str) -> Registration | None:
        phone = self.user_config.get_user_value(user_id, APP_ID, WELCOME_PHONE, "")
        if phone:
            return Registration(phone=phone, username=user_id)
        try:
            return self.repository.find_by_user_id(user_id)
        except RegistrationNotFound:
            return None

    def _set_phone_property(self, account: Account, phone: str) -> None:
        account_data = self.account_properties.get_account(account)
        existing = account_data.get_property(PROPERTY_PHONE)
        account_data.set_property(
            PROPERTY_PHONE,
            phone,
            existing.scope,
            VerificationState.NOT_VERIFIED,
        )
        self.account_properties.update_account(account_data)

    def _add_to_registered_user_group(self, account: Account) -> str:
        group_name = self.policy.registered_user_group
        if group_name == NO_GROUP:
            return ""

        group = self.groups.get(group_name)
        if group is None:
            # The group may have been deleted after it was configured.
            logger.error(
                "Newly registered users should be added to the '%s' group, but it does not exist",
                group_name,
            )
            return ""

        group.add_user(account)
        return group.get_gid()

    def _notify_admins(self, account: Account, group_id: str) -> None:
        user_id = account.get_uid()
        try:
            self.admin_notifier.notify_admins(
                user_id, account.get_email_address(), account.is_enabled(), group_id
            )
        except Exception:
            logger.error("Unable to notify administrators about account '%s'", user_id, exc_info=True)
