"""
Domain models - Registration record and provisioning policy.

These are plain dataclasses; persistence adapters map them to and
from their own storage formats.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum


class RegistrationState(str, Enum):
    """
    Lifecycle states of a registration.

    State Transitions:
    - PENDING -> CONFIRMED (confirm_email)
    - PENDING / CONFIRMED -> PROVISIONED (create_account)
    - PENDING / CONFIRMED -> DELETED (delete_registration)

    Only PENDING and CONFIRMED are derived from a stored record. PROVISIONED
    and DELETED describe what happened to a record and are reported by
    RegistrationService in its provisioning and deletion log lines.
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROVISIONED = "PROVISIONED"
    DELETED = "DELETED"


@dataclass
class Registration:
    """A pending signup keyed by phone number."""

    phone: str
    username: str = ""
    display_name: str = ""
    password: str | None = None  # ciphertext, never plaintext
    email_confirmed: bool = False
    confirmation_token: str = ""
    client_secret: str = ""
    id: int | None = None
    created_at: datetime | None = None

    @property
    def state(self) -> RegistrationState:
        if self.email_confirmed:
            return RegistrationState.CONFIRMED
        return RegistrationState.PENDING

    def __repr__(self) -> str:
        # Secrets stay out of reprs so they never reach a log line.
        return (
            f"Registration(id={self.id!r}, phone={self.phone!r}, "
            f"username={self.username!r}, state={self.state.value})"
        )


PROPERTY_PHONE = "phone"


class PropertyScope(str, Enum):
    """Visibility of an account property in the directory."""

    PRIVATE = "v2-private"
    LOCAL = "v2-local"
    FEDERATED = "v2-federated"
    PUBLISHED = "v2-published"


class VerificationState(IntEnum):
    NOT_VERIFIED = 0
    VERIFICATION_IN_PROGRESS = 1
    VERIFIED = 2


@dataclass
class AccountProperty:
    """A single directory property such as the phone number."""

    name: str
    value: str = ""
    scope: PropertyScope = PropertyScope.LOCAL
    verified: VerificationState = VerificationState.NOT_VERIFIED


class TokenType(IntEnum):
    TEMPORARY = 0
    PERMANENT = 1


@dataclass(frozen=True)
class RegistrationPolicy:
    """
    Provisioning rules read from configuration.

    Built from Settings by the bootstrap module so the domain layer
    never imports the configuration framework.
    """

    default_phone_region: str = ""
    username_policy_regex: str = ""
    show_fullname: bool = False
    enforce_fullname: bool = False
    show_phone: bool = False
    enforce_phone: bool = False
    registered_user_group: str = "none"
    admin_approval_required: bool = False
    login_url: str = "/"
    product_name: str = "Twiga Cloud"

    def __post_init__(self) -> None:
        if self.username_policy_regex:
            try:
                re.compile(self.username_policy_regex)
            except re.error as e:
                raise ValueError(f"Invalid username_policy_regex: {e}") from e
