"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Registration policies
- Mocked ports for domain service tests
"""

from unittest.mock import Mock

import pytest

from phonesignup.domain.exceptions import RegistrationNotFound
from phonesignup.domain.models import Registration, RegistrationPolicy
from phonesignup.domain.notifications import WelcomeNotifier
from phonesignup.domain.registration import RegistrationService


class ReversingCrypto:
    """Deterministic Crypto stand-in: 'enc:' + reversed text."""

    def encrypt(self, plaintext: str) -> str:
        return "enc:" + plaintext[::-1]

    def decrypt(self, ciphertext: str) -> str:
        assert ciphertext.startswith("enc:")
        return ciphertext[4:][::-1]


@pytest.fixture
def policy() -> RegistrationPolicy:
    return RegistrationPolicy(default_phone_region="KE")


@pytest.fixture
def repo() -> Mock:
    """Repository mock with no stored registrations."""
    repo = Mock()
    repo.find.side_effect = RegistrationNotFound("phone")
    repo.username_is_pending.return_value = False
    repo.insert.return_value = True
    return repo


@pytest.fixture
def account() -> Mock:
    account = Mock()
    account.get_uid.return_value = "alice"
    account.get_email_address.return_value = None
    account.is_enabled.return_value = True
    return account


@pytest.fixture
def accounts(account: Mock) -> Mock:
    """Account backend mock: no existing users, create_user succeeds."""
    accounts = Mock()
    accounts.get.return_value = None
    accounts.create_user.return_value = account
    return accounts


@pytest.fixture
def sms_gateway() -> Mock:
    return Mock()


@pytest.fixture
def make_service(repo: Mock, accounts: Mock, sms_gateway: Mock, policy: RegistrationPolicy):
    """Factory building a RegistrationService around mocks; keyword overrides replace collaborators."""

    def factory(**overrides) -> RegistrationService:
        kwargs = dict(
            repository=repo,
            accounts=accounts,
            groups=Mock(),
            user_config=Mock(),
            crypto=ReversingCrypto(),
            notifier=WelcomeNotifier(sms_gateway=sms_gateway),
            admin_notifier=Mock(),
            policy=policy,
            account_properties=None,
        )
        kwargs.update(overrides)
        return RegistrationService(**kwargs)

    return factory


@pytest.fixture
def service(make_service) -> RegistrationService:
    return make_service()


@pytest.fixture
def registration() -> Registration:
    return Registration(
        id=7,
        phone="+254700000000",
        username="alice",
        password="enc:" + "s3cret-pass"[::-1],
        confirmation_token="abcdef",
        client_secret="x" * 32,
    )
