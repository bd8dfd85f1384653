"""
In-memory user directory - Account backend, groups, properties, user config.

A self-contained stand-in for the account directory, used for
development wiring and tests. Passwords are stored as bcrypt hashes.
"""

import logging
import re
import threading
from dataclasses import dataclass, field

import bcrypt

from phonesignup.domain.models import (
    PROPERTY_PHONE,
    AccountProperty,
    PropertyScope,
    VerificationState,
)

logger = logging.getLogger(__name__)

# Login names the directory accepts; mirrors common user backends.
_VALID_UID = re.compile(r"^[a-zA-Z0-9 _.@\-']+$")


@dataclass
class InMemoryAccount:
    """Implements Account protocol."""

    uid: str
    password_hash: str = field(repr=False)
    display_name: str = ""
    email: str | None = None
    enabled: bool = True

    def get_uid(self) -> str:
        return self.uid

    def get_email_address(self) -> str | None:
        return self.email

    def is_enabled(self) -> bool:
        return self.enabled

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def set_display_name(self, display_name: str) -> bool:
        self.display_name = display_name.strip()
        return True


class InMemoryAccountBackend:
    """Implements AccountBackend protocol."""

    def __init__(self, bcrypt_cost: int = 10) -> None:
        self._bcrypt_cost = bcrypt_cost
        self._lock = threading.Lock()
        self._accounts: dict[str, InMemoryAccount] = {}

    def create_user(self, login_name: str, password: str) -> InMemoryAccount | None:
        """
        Create an account.

        Returns:
            The account, or None if the login name is invalid or taken
        """
        if not _VALID_UID.match(login_name) or login_name != login_name.strip():
            logger.warning("Rejected invalid login name '%s'", login_name)
            return None

        password_hash = bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=self._bcrypt_cost)
        ).decode()

        with self._lock:
            if login_name in self._accounts:
                return None
            account = InMemoryAccount(uid=login_name, password_hash=password_hash)
            self._accounts[login_name] = account
        return account

    def get(self, username: str) -> InMemoryAccount | None:
        return self._accounts.get(username)

    def check_password(self, username: str, password: str) -> bool:
        account = self._accounts.get(username)
        if account is None:
            return False
        return bcrypt.checkpw(password.encode(), account.password_hash.encode())


@dataclass
class InMemoryGroup:
    """Implements Group protocol."""

    gid: str
    members: set[str] = field(default_factory=set)

    def get_gid(self) -> str:
        return self.gid

    def add_user(self, account: InMemoryAccount) -> None:
        self.members.add(account.get_uid())


class InMemoryGroupManager:
    """Implements GroupManager protocol."""

    def __init__(self) -> None:
        self._groups: dict[str, InMemoryGroup] = {}

    def create_group(self, gid: str) -> InMemoryGroup:
        return self._groups.setdefault(gid, InMemoryGroup(gid))

    def get(self, name: str) -> InMemoryGroup | None:
        return self._groups.get(name)

    def groups_of(self, uid: str) -> list[str]:
        return sorted(g.gid for g in self._groups.values() if uid in g.members)


@dataclass
class InMemoryAccountData:
    """Implements AccountData protocol."""

    uid: str
    properties: dict[str, AccountProperty] = field(default_factory=dict)

    def get_property(self, name: str) -> AccountProperty:
        return self.properties.setdefault(name, AccountProperty(name=name))

    def set_property(
        self,
        name: str,
        value: str,
        scope: PropertyScope,
        verified: VerificationState,
    ) -> None:
        self.properties[name] = AccountProperty(name=name, value=value, scope=scope, verified=verified)


class InMemoryAccountPropertyStore:
    """
    Implements AccountPropertyStore protocol.

    get_account hands out a working copy; changes become visible only
    after update_account.
    """

    def __init__(self, default_phone_scope: PropertyScope = PropertyScope.LOCAL) -> None:
        self._default_phone_scope = default_phone_scope
        self._data: dict[str, dict[str, AccountProperty]] = {}

    def get_account(self, account: InMemoryAccount) -> InMemoryAccountData:
        uid = account.get_uid()
        stored = self._data.get(uid)
        if stored is None:
            stored = {PROPERTY_PHONE: AccountProperty(PROPERTY_PHONE, scope=self._default_phone_scope)}
        return InMemoryAccountData(uid=uid, properties=dict(stored))

    def update_account(self, account_data: InMemoryAccountData) -> None:
        self._data[account_data.uid] = dict(account_data.properties)

    def property_of(self, uid: str, name: str) -> AccountProperty | None:
        return self._data.get(uid, {}).get(name)


class InMemoryUserConfig:
    """Implements UserConfig protocol."""

    def __init__(self) -> None:
        self._values: dict[tuple[str, str, str], str] = {}

    def get_user_value(self, user_id: str, app_id: str, key: str, default: str = "") -> str:
        return self._values.get((user_id, app_id, key), default)

    def set_user_value(self, user_id: str, app_id: str, key: str, value: str) -> None:
        self._values[(user_id, app_id, key)] = value

    def delete_user_value(self, user_id: str, app_id: str, key: str) -> None:
        self._values.pop((user_id, app_id, key), None)
