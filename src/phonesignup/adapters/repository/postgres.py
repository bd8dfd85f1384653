"""
PostgreSQL repository adapter - Implements RegistrationRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Phone claims are atomic: the UNIQUE constraint on ``phone`` combined
with ``INSERT ... ON CONFLICT DO NOTHING`` means concurrent inserts for
the same number cannot both succeed, so the existence check done during
validation is not the only guard.
"""

import logging
from pathlib import Path

from psycopg_pool import ConnectionPool

from phonesignup.domain.exceptions import RegistrationNotFound
from phonesignup.domain.models import Registration

logger = logging.getLogger(__name__)

# Repository root: src/phonesignup/adapters/repository/postgres.py -> migrations/
MIGRATIONS_DIR = Path(__file__).resolve().parents[4] / "migrations"

_COLUMNS = (
    "id, phone, username, display_name, password, email_confirmed, "
    "confirmation_token, client_secret, created_at"
)


def _to_registration(row: tuple) -> Registration:
    return Registration(
        id=row[0],
        phone=row[1],
        username=row[2],
        display_name=row[3],
        password=row[4],
        email_confirmed=row[5],
        confirmation_token=row[6],
        client_secret=row[7],
        created_at=row[8],
    )


class PostgresRegistrationRepository:
    """
    Implements RegistrationRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def _fetch_one(self, where: str, value: str) -> Registration:
        sql = f"SELECT {_COLUMNS} FROM registrations WHERE {where} = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()

        if row is None:
            raise RegistrationNotFound(f"No registration for {where}")
        return _to_registration(row)

    def find(self, phone: str) -> Registration:
        return self._fetch_one("phone", phone)

    def find_by_secret(self, secret: str) -> Registration:
        return self._fetch_one("client_secret", secret)

    def find_by_user_id(self, user_id: str) -> Registration:
        return self._fetch_one("username", user_id)

    def insert(self, registration: Registration) -> bool:
        """
        Atomically claim the phone number and store the registration.

        Returns:
            True if inserted, False if the phone is already claimed
        """
        sql = """
            INSERT INTO registrations
                (phone, username, display_name, password, email_confirmed,
                 confirmation_token, client_secret, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, NOW())
            ON CONFLICT (phone) DO NOTHING
            RETURNING id, created_at
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    registration.phone,
                    registration.username,
                    registration.display_name,
                    registration.password,
                    registration.email_confirmed,
                    registration.confirmation_token,
                    registration.client_secret,
                ),
            )
            row = cursor.fetchone()
            conn.commit()

        if row is None:
            return False
        registration.id, registration.created_at = row
        return True

    def update(self, registration: Registration) -> None:
        sql = """
            UPDATE registrations
            SET username = %s,
                display_name = %s,
                password = %s,
                email_confirmed = %s,
                confirmation_token = %s,
                client_secret = %s
            WHERE id = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    registration.username,
                    registration.display_name,
                    registration.password,
                    registration.email_confirmed,
                    registration.confirmation_token,
                    registration.client_secret,
                    registration.id,
                ),
            )
            conn.commit()

    def delete(self, registration: Registration) -> None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM registrations WHERE id = %s", (registration.id,))
            conn.commit()

    def username_is_pending(self, username: str, exclude_id: int | None = None) -> bool:
        sql = """
            SELECT 1 FROM registrations
            WHERE username = %s
              AND (%s::bigint IS NULL OR id <> %s::bigint)
            LIMIT 1
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (username, exclude_id, exclude_id))
            return cursor.fetchone() is not None


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
        migrations_dir: Directory holding the *.sql files
    """
    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
