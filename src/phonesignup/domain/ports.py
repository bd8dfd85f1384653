"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols through
structural subtyping; none of them inherit from the protocols.
"""

from typing import Protocol

from .models import (
    AccountProperty,
    PropertyScope,
    Registration,
    TokenType,
    VerificationState,
)


class RegistrationRepository(Protocol):
    """Port interface for pending registration persistence."""

    def find(self, phone: str) -> Registration:
        """
        Fetch the registration for a phone number.

        Raises:
            RegistrationNotFound: If no registration holds this phone
        """
        ...

    def find_by_secret(self, secret: str) -> Registration:
        """
        Fetch the registration owning a client secret.

        Raises:
            RegistrationNotFound: If the secret is unknown
        """
        ...

    def find_by_user_id(self, user_id: str) -> Registration:
        """
        Fetch the registration whose username is the given user id.

        Raises:
            RegistrationNotFound: If no registration proposed this user id
        """
        ...

    def insert(self, registration: Registration) -> bool:
        """
        Atomically claim the registration's phone number and persist it.

        On success the store assigns ``id`` and ``created_at`` on the
        passed registration.

        Returns:
            True if the record was inserted, False if a registration for
            the same phone already exists
        """
        ...

    def update(self, registration: Registration) -> None:
        """Persist all mutable fields of an existing registration."""
        ...

    def delete(self, registration: Registration) -> None:
        """Remove a registration."""
        ...

    def username_is_pending(self, username: str, exclude_id: int | None = None) -> bool:
        """
        Return True if a stored registration proposes this username.

        Args:
            username: Proposed login name
            exclude_id: Registration id to leave out of the check
        """
        ...


class Account(Protocol):
    """A provisioned user account owned by the account backend."""

    def get_uid(self) -> str: ...

    def get_email_address(self) -> str | None: ...

    def is_enabled(self) -> bool: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def set_display_name(self, display_name: str) -> bool: ...


class AccountBackend(Protocol):
    """Port interface for the user directory."""

    def create_user(self, login_name: str, password: str) -> Account | None:
        """
        Create a login-capable account.

        Returns:
            The created account, or None if the backend could not create it
        """
        ...

    def get(self, username: str) -> Account | None:
        """Return the account for a username, or None if it does not exist."""
        ...


class AccountData(Protocol):
    """Directory properties attached to one account."""

    def get_property(self, name: str) -> AccountProperty: ...

    def set_property(
        self,
        name: str,
        value: str,
        scope: PropertyScope,
        verified: VerificationState,
    ) -> None: ...


class AccountPropertyStore(Protocol):
    """
    Optional capability: account property persistence.

    Composed into the registration service only when the directory
    supports it; the service skips phone-property updates otherwise.
    """

    def get_account(self, account: Account) -> AccountData: ...

    def update_account(self, account_data: AccountData) -> None: ...


class Group(Protocol):
    def get_gid(self) -> str: ...

    def add_user(self, account: Account) -> None: ...


class GroupManager(Protocol):
    """Port interface for group lookup."""

    def get(self, name: str) -> Group | None:
        """Return the group, or None if it does not exist."""
        ...


class UserConfig(Protocol):
    """Per-user key/value settings scoped by application id."""

    def get_user_value(self, user_id: str, app_id: str, key: str, default: str = "") -> str: ...

    def set_user_value(self, user_id: str, app_id: str, key: str, value: str) -> None: ...

    def delete_user_value(self, user_id: str, app_id: str, key: str) -> None: ...


class Crypto(Protocol):
    """Reversible symmetric encryption for stored registration passwords."""

    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, ciphertext: str) -> str: ...


class SmsGateway(Protocol):
    """Port interface for SMS delivery."""

    def send_sms(self, phone: str, message: str) -> None:
        """
        Deliver a text message.

        Args:
            phone: Recipient phone number
            message: Message body
        """
        ...


class AdminNotifier(Protocol):
    """Port interface for telling administrators about new accounts."""

    def notify_admins(
        self, user_id: str, email: str | None, enabled: bool, group_id: str
    ) -> None: ...


class Translator(Protocol):
    """Formats a message key with positional arguments into user-facing text."""

    def t(self, message: str, *args: object) -> str: ...


class SessionToken(Protocol):
    def get_login_name(self) -> str: ...


class SessionProvider(Protocol):
    def get_id(self) -> str:
        """
        Return the current session id.

        Raises:
            SessionNotAvailable: If there is no session
        """
        ...


class TokenProvider(Protocol):
    def get_token(self, token_id: str) -> SessionToken:
        """
        Raises:
            InvalidToken: If the token is unknown, invalid or expired
        """
        ...

    def get_password(self, token: SessionToken, token_id: str) -> str:
        """
        Raises:
            PasswordlessToken: If the token stores no password
        """
        ...

    def generate_token(
        self,
        token: str,
        uid: str,
        login_name: str,
        password: str | None,
        name: str,
        token_type: TokenType,
    ) -> None: ...


class UserSession(Protocol):
    def login(self, username: str, password: str) -> bool: ...

    def create_session_token(self, user_id: str, username: str, password: str) -> bool: ...
