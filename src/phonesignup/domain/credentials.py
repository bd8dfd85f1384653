"""
Session and credential helpers used right after provisioning.

Lets a freshly registered user sign in, and issues an app password
bound to the current session for client auto-setup.
"""

import logging
from dataclasses import dataclass, field

from . import tokens
from .exceptions import AppTokenGenerationFailed, InvalidToken, PasswordlessToken, SessionNotAvailable
from .messages import PlainTranslator
from .models import TokenType
from .ports import Crypto, SessionProvider, TokenProvider, Translator, UserSession

logger = logging.getLogger(__name__)


@dataclass
class CredentialService:
    session: SessionProvider
    token_provider: TokenProvider
    user_session: UserSession
    crypto: Crypto
    translator: Translator = field(default_factory=PlainTranslator)

    def generate_app_password(self, uid: str) -> str:
        """
        Issue a permanent device token for the current session's user.

        A passwordless session token still yields an app password; the
        token is then stored without a password.

        Returns:
            The device token, shown to the user once

        Raises:
            AppTokenGenerationFailed: If there is no session or its token is invalid
        """
        name = self.translator.t("Registration app auto setup")
        try:
            session_id = self.session.get_id()
        except SessionNotAvailable:
            raise AppTokenGenerationFailed("Failed to generate an app token.") from None

        try:
            session_token = self.token_provider.get_token(session_id)
            login_name = session_token.get_login_name()
            try:
                password = self.token_provider.get_password(session_token, session_id)
            except PasswordlessToken:
                password = None
        except InvalidToken:
            raise AppTokenGenerationFailed("Failed to generate an app token.") from None

        token = tokens.generate_device_token()
        self.token_provider.generate_token(
            token, uid, login_name, password, name, TokenType.PERMANENT
        )
        logger.info("App password issued for user '%s'", uid)
        return token

    def login_user(self, user_id: str, username: str, password: str, decrypt: bool = False) -> None:
        """Log the user in and create a persistent session token."""
        if decrypt:
            password = self.crypto.decrypt(password)

        self.user_session.login(username, password)
        self.user_session.create_session_token(user_id, username, password)
