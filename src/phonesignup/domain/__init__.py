"""
Domain layer - Registration workflow with no infrastructure imports.

This package contains the business logic for phone-keyed account
registration. It defines its own port interfaces for infrastructure
abstraction; adapters live in phonesignup.adapters.
"""

from .credentials import CredentialService
from .exceptions import (
    AccountBackendFailure,
    AppTokenGenerationFailed,
    InvalidDisplayName,
    InvalidPhoneNumber,
    InvalidToken,
    InvalidUsername,
    MissingCountryCode,
    MissingPassword,
    MissingPhone,
    PasswordlessToken,
    PhoneAlreadyClaimed,
    RegistrationError,
    RegistrationNotFound,
    SessionNotAvailable,
    UsernameTaken,
    ValidationError,
)
from .messages import PlainTranslator
from .models import (
    AccountProperty,
    PropertyScope,
    Registration,
    RegistrationPolicy,
    RegistrationState,
    TokenType,
    VerificationState,
)
from .notifications import WelcomeNotifier
from .phone import normalize_phone_number, validate_phone_number
from .registration import RegistrationService
from .validation import PolicyValidator

__all__ = [
    "AccountBackendFailure",
    "AccountProperty",
    "AppTokenGenerationFailed",
    "CredentialService",
    "InvalidDisplayName",
    "InvalidPhoneNumber",
    "InvalidToken",
    "InvalidUsername",
    "MissingCountryCode",
    "MissingPassword",
    "MissingPhone",
    "PasswordlessToken",
    "PhoneAlreadyClaimed",
    "PlainTranslator",
    "PolicyValidator",
    "PropertyScope",
    "Registration",
    "RegistrationError",
    "RegistrationNotFound",
    "RegistrationPolicy",
    "RegistrationService",
    "RegistrationState",
    "SessionNotAvailable",
    "TokenType",
    "UsernameTaken",
    "ValidationError",
    "VerificationState",
    "WelcomeNotifier",
    "normalize_phone_number",
    "validate_phone_number",
]
