"""
Unit tests for RegistrationService pending-registration operations.

Tests domain logic with mocked ports to verify:
- Registration creation (encryption, secrets, atomic claim)
- Confirmation idempotence
- Independent regeneration of confirmation token and client secret
- Lookups, deletion and the deferred welcome hook
"""

import logging
from unittest.mock import Mock

import pytest

from phonesignup.adapters.directory import InMemoryUserConfig
from phonesignup.domain.exceptions import PhoneAlreadyClaimed, RegistrationNotFound
from phonesignup.domain.models import Registration, RegistrationPolicy, RegistrationState
from phonesignup.domain.registration import (
    APP_ID,
    SEND_WELCOME_ON_ENABLE,
    WELCOME_PHONE,
    RegistrationService,
)


class TestCreateRegistration:
    """Tests for create_registration."""

    def test_create_registration_inserts_record(self, service: RegistrationService, repo: Mock) -> None:
        """The new registration is handed to the repository."""
        registration = service.create_registration("+254700000000", "alice", "pw", "Alice")

        repo.insert.assert_called_once_with(registration)
        assert registration.phone == "+254700000000"
        assert registration.username == "alice"
        assert registration.display_name == "Alice"

    def test_password_is_encrypted(self, service: RegistrationService) -> None:
        """The stored password is ciphertext that decrypts to the input."""
        registration = service.create_registration("+254700000000", password="s3cret")

        assert registration.password != "s3cret"
        assert service.crypto.decrypt(registration.password) == "s3cret"

    def test_empty_password_is_not_stored(self, service: RegistrationService) -> None:
        """Without a password the field stays empty."""
        registration = service.create_registration("+254700000000")

        assert registration.password is None

    def test_secrets_are_generated(self, service: RegistrationService) -> None:
        """Both secrets are set and distinct."""
        registration = service.create_registration("+254700000000")

        assert registration.confirmation_token
        assert registration.client_secret
        assert registration.confirmation_token != registration.client_secret

    def test_new_registration_is_pending(self, service: RegistrationService) -> None:
        """Freshly created registrations are unconfirmed."""
        registration = service.create_registration("+254700000000")

        assert registration.email_confirmed is False
        assert registration.state == RegistrationState.PENDING

    def test_create_registration_does_not_validate(
        self, service: RegistrationService, repo: Mock, accounts: Mock
    ) -> None:
        """No validator runs on the write path."""
        service.create_registration("not a phone", "")

        repo.find.assert_not_called()
        repo.username_is_pending.assert_not_called()
        accounts.get.assert_not_called()

    def test_local_phone_is_stored_in_e164(self, service: RegistrationService, repo: Mock) -> None:
        """A local-format number is stored the way validate_phone looks it up."""
        registration = service.create_registration("0700 000 000", "alice")

        assert registration.phone == "+254700000000"
        assert repo.insert.call_args[0][0].phone == "+254700000000"

    def test_unparseable_phone_is_stored_unchanged(self, service: RegistrationService) -> None:
        """Numbers that do not parse are kept as passed."""
        registration = service.create_registration("not a phone")

        assert registration.phone == "not a phone"

    def test_lost_claim_raises_phone_already_claimed(self, service: RegistrationService, repo: Mock) -> None:
        """A concurrent registration for the same phone surfaces as a conflict."""
        repo.insert.return_value = False

        with pytest.raises(PhoneAlreadyClaimed):
            service.create_registration("+254700000000")


class TestConfirmEmail:
    """Tests for confirm_email."""

    def test_confirm_sets_flag_and_updates(
        self, service: RegistrationService, repo: Mock, registration: Registration
    ) -> None:
        """Confirmation marks the registration and persists it."""
        service.confirm_email(registration)

        assert registration.email_confirmed is True
        assert registration.state == RegistrationState.CONFIRMED
        repo.update.assert_called_once_with(registration)

    def test_confirm_is_idempotent(
        self, service: RegistrationService, repo: Mock, registration: Registration
    ) -> None:
        """Confirming twice leaves the flag set without error."""
        service.confirm_email(registration)
        service.confirm_email(registration)

        assert registration.email_confirmed is True
        assert repo.update.call_count == 2


class TestTokenIndependence:
    """Tests for regenerating secrets."""

    def test_new_token_keeps_client_secret(
        self, service: RegistrationService, repo: Mock, registration: Registration
    ) -> None:
        """Regenerating the confirmation token leaves the client secret alone."""
        old_token, old_secret = registration.confirmation_token, registration.client_secret

        service.generate_new_token(registration)

        assert registration.confirmation_token != old_token
        assert registration.client_secret == old_secret
        repo.update.assert_called_once_with(registration)

    def test_new_client_secret_keeps_token(
        self, service: RegistrationService, repo: Mock, registration: Registration
    ) -> None:
        """Regenerating the client secret leaves the confirmation token alone."""
        old_token, old_secret = registration.confirmation_token, registration.client_secret

        service.generate_new_client_secret(registration)

        assert registration.client_secret != old_secret
        assert registration.confirmation_token == old_token
        repo.update.assert_called_once_with(registration)


class TestLookups:
    """Tests for lookup and deletion pass-throughs."""

    def test_get_registration_for_phone(self, service: RegistrationService, repo: Mock) -> None:
        """Phone lookup goes to repository.find."""
        repo.find.side_effect = None
        repo.find.return_value = "found"

        assert service.get_registration_for_phone("+254700000000") == "found"

    def test_get_registration_for_secret(self, service: RegistrationService, repo: Mock) -> None:
        """Secret lookup goes to repository.find_by_secret."""
        repo.find_by_secret.return_value = "found"

        assert service.get_registration_for_secret("secret") == "found"
        repo.find_by_secret.assert_called_once_with("secret")

    def test_get_registration_by_user_id(self, service: RegistrationService, repo: Mock) -> None:
        """User id lookup goes to repository.find_by_user_id."""
        repo.find_by_user_id.return_value = "found"

        assert service.get_registration_by_user_id("alice") == "found"

    def test_missing_registration_propagates(self, service: RegistrationService, repo: Mock) -> None:
        """RegistrationNotFound reaches the caller."""
        repo.find_by_secret.side_effect = RegistrationNotFound("client_secret")

        with pytest.raises(RegistrationNotFound):
            service.get_registration_for_secret("nope")

    def test_delete_registration(
        self, service: RegistrationService, repo: Mock, registration: Registration
    ) -> None:
        """Deletion goes to repository.delete."""
        service.delete_registration(registration)

        repo.delete.assert_called_once_with(registration)

    def test_delete_registration_logs_deleted_state(
        self, service: RegistrationService, registration: Registration, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Deletion is logged with the DELETED state."""
        with caplog.at_level(logging.INFO):
            service.delete_registration(registration)

        assert f"Registration 7 is {RegistrationState.DELETED.value}" in caplog.text


class TestSendDeferredWelcome:
    """Tests for the admin re-enable hook."""

    @pytest.fixture
    def user_config(self) -> InMemoryUserConfig:
        return InMemoryUserConfig()

    @pytest.fixture
    def gated_service(self, make_service, user_config: InMemoryUserConfig) -> RegistrationService:
        return make_service(
            policy=RegistrationPolicy(admin_approval_required=True), user_config=user_config
        )

    def test_sends_to_phone_recorded_at_provisioning(
        self,
        gated_service: RegistrationService,
        user_config: InMemoryUserConfig,
        sms_gateway: Mock,
        registration: Registration,
    ) -> None:
        """The phone stored with the flag is used and both values are cleared."""
        gated_service.create_account(registration)

        assert gated_service.send_deferred_welcome("alice") is True

        sms_gateway.send_sms.assert_called_once_with("+254700000000", "Welcome to Twiga Cloud! alice")
        assert user_config.get_user_value("alice", APP_ID, SEND_WELCOME_ON_ENABLE, "no") == "no"
        assert user_config.get_user_value("alice", APP_ID, WELCOME_PHONE) == ""

    def test_registration_deleted_after_provisioning(
        self,
        gated_service: RegistrationService,
        repo: Mock,
        sms_gateway: Mock,
        registration: Registration,
    ) -> None:
        """Deleting the consumed registration does not lose the welcome SMS."""
        gated_service.create_account(registration)
        gated_service.delete_registration(registration)
        repo.find_by_user_id.side_effect = RegistrationNotFound("username")

        assert gated_service.send_deferred_welcome("alice") is True

        repo.find_by_user_id.assert_not_called()
        sms_gateway.send_sms.assert_called_once()

    def test_login_name_differs_from_stored_username(
        self,
        gated_service: RegistrationService,
        account: Mock,
        repo: Mock,
        sms_gateway: Mock,
    ) -> None:
        """The welcome SMS greets the provisioned uid, not the stored username."""
        account.get_uid.return_value = "bob"
        registration = Registration(
            id=8, phone="+254711111111", password="enc:" + "pw"[::-1]
        )
        repo.find_by_user_id.side_effect = RegistrationNotFound("username")

        gated_service.create_account(registration, login_name="bob")

        assert gated_service.send_deferred_welcome("bob") is True
        sms_gateway.send_sms.assert_called_once_with("+254711111111", "Welcome to Twiga Cloud! bob")

    def test_falls_back_to_stored_registration(
        self,
        make_service,
        user_config: InMemoryUserConfig,
        repo: Mock,
        sms_gateway: Mock,
        registration: Registration,
    ) -> None:
        """Without a recorded phone a registration still held for the user is used."""
        user_config.set_user_value("alice", APP_ID, SEND_WELCOME_ON_ENABLE, "yes")
        repo.find_by_user_id.return_value = registration
        service = make_service(user_config=user_config)

        assert service.send_deferred_welcome("alice") is True

        repo.find_by_user_id.assert_called_once_with("alice")
        sms_gateway.send_sms.assert_called_once()

    def test_no_recipient_keeps_flag_and_logs(
        self,
        make_service,
        user_config: InMemoryUserConfig,
        repo: Mock,
        sms_gateway: Mock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """With no phone anywhere nothing is raised, nothing is sent and the flag stays."""
        user_config.set_user_value("bob", APP_ID, SEND_WELCOME_ON_ENABLE, "yes")
        repo.find_by_user_id.side_effect = RegistrationNotFound("username")
        service = make_service(user_config=user_config)

        with caplog.at_level(logging.ERROR):
            assert service.send_deferred_welcome("bob") is False

        sms_gateway.send_sms.assert_not_called()
        assert user_config.get_user_value("bob", APP_ID, SEND_WELCOME_ON_ENABLE) == "yes"
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "bob" in errors[0].getMessage()

    def test_skips_when_flag_missing(
        self, make_service, user_config: InMemoryUserConfig, repo: Mock, sms_gateway: Mock
    ) -> None:
        """Users without the flag get nothing."""
        service = make_service(user_config=user_config)

        assert service.send_deferred_welcome("alice") is False

        repo.find_by_user_id.assert_not_called()
        sms_gateway.send_sms.assert_not_called()

    def test_second_call_sends_nothing(
        self, gated_service: RegistrationService, sms_gateway: Mock, registration: Registration
    ) -> None:
        """The deferred welcome goes out once."""
        gated_service.create_account(registration)

        assert gated_service.send_deferred_welcome("alice") is True
        assert gated_service.send_deferred_welcome("alice") is False
        assert sms_gateway.send_sms.call_count == 1
