"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Every registration error carries a user-facing message and an
optional hint (for example a link to the login page).
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ValidationError(RegistrationError):
    """User input fails a business rule; the caller can re-prompt."""

    pass


class InvalidPhoneNumber(ValidationError):
    """Phone number could not be parsed or is not a valid number."""

    pass


class MissingCountryCode(InvalidPhoneNumber):
    """No default region is configured and the number lacks a '+' prefix."""

    pass


class PhoneAlreadyClaimed(ValidationError):
    """A registration for this phone number already exists."""

    pass


class InvalidUsername(ValidationError):
    """Login name is empty or does not match the username policy."""

    pass


class UsernameTaken(ValidationError):
    """Login name is pending in a registration or owned by an account."""

    pass


class InvalidDisplayName(ValidationError):
    """Display name is required but empty."""

    pass


class MissingPassword(ValidationError):
    """No password was stored in the registration nor supplied."""

    pass


class MissingPhone(ValidationError):
    """Phone number is enforced by configuration but was not supplied."""

    pass


class AccountBackendFailure(RegistrationError):
    """The account backend refused to create the user."""

    pass


class AppTokenGenerationFailed(RegistrationError):
    """Session or token subsystem unavailable while issuing an app password."""

    pass


class RegistrationNotFound(RegistrationError):
    """No registration matches the lookup key."""

    pass


# Collaborator-side signals raised by session and token providers.


class SessionNotAvailable(Exception):
    """There is no active session for the current request."""

    pass


class InvalidToken(Exception):
    """The session token is unknown, invalid or expired."""

    pass


class PasswordlessToken(Exception):
    """The session token carries no recoverable password."""

    pass
