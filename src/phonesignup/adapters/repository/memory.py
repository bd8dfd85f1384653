"""
In-memory repository adapter - Implements RegistrationRepository protocol.

Keeps registrations in a dict guarded by a lock. Used for development
wiring and tests; state is lost when the process exits.
"""

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timezone

from phonesignup.domain.exceptions import RegistrationNotFound
from phonesignup.domain.models import Registration


class InMemoryRegistrationRepository:
    """
    Implements RegistrationRepository protocol with a dict.

    Stored records are copies, so callers only change stored state
    through update().
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._records: dict[int, Registration] = {}

    def __len__(self) -> int:
        return len(self._records)

    def _first(self, predicate, what: str) -> Registration:
        with self._lock:
            for record in self._records.values():
                if predicate(record):
                    return replace(record)
        raise RegistrationNotFound(f"No registration for {what}")

    def find(self, phone: str) -> Registration:
        return self._first(lambda r: r.phone == phone, "phone")

    def find_by_secret(self, secret: str) -> Registration:
        return self._first(lambda r: r.client_secret == secret, "client_secret")

    def find_by_user_id(self, user_id: str) -> Registration:
        return self._first(lambda r: r.username == user_id, "username")

    def insert(self, registration: Registration) -> bool:
        with self._lock:
            if any(r.phone == registration.phone for r in self._records.values()):
                return False
            registration.id = next(self._ids)
            registration.created_at = datetime.now(timezone.utc)
            self._records[registration.id] = replace(registration)
        return True

    def update(self, registration: Registration) -> None:
        with self._lock:
            if registration.id not in self._records:
                raise RegistrationNotFound(f"No registration with id {registration.id}")
            self._records[registration.id] = replace(registration)

    def delete(self, registration: Registration) -> None:
        with self._lock:
            self._records.pop(registration.id, None)

    def username_is_pending(self, username: str, exclude_id: int | None = None) -> bool:
        with self._lock:
            return any(
                r.username == username and r.id != exclude_id for r in self._records.values()
            )
