"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity:
----------
1. **Email uniqueness**: a unique index on ``lower(email)`` makes the
   insert itself the uniqueness check. ``UniqueViolation`` is translated
   to EmailAlreadyClaimed so a concurrent duplicate registration reports
   a validation failure instead of crashing.

2. **Single-use secrets**: activation and reset consume their secret with
   a conditional ``UPDATE ... WHERE secret = %s``. Only the request whose
   update matches a row succeeds; a replay matches nothing.
"""

import logging
from pathlib import Path

from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.account import Account, AccountStatus
from src.domain.exceptions import EmailAlreadyClaimed

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, email, password_hash, status, activation_secret_hash,
    reset_secret_hash, activated_at, created_at
"""


def _to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        status=AccountStatus(row[4]),
        activation_secret_hash=row[5],
        reset_secret_hash=row[6],
        activated_at=row[7],
        created_at=row[8],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def email_in_use(self, email: str, exclude_id: int | None = None) -> bool:
        sql = """
            SELECT 1 FROM accounts
            WHERE lower(email) = lower(%s) AND (%s::bigint IS NULL OR id <> %s::bigint)
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, exclude_id, exclude_id))
            return cursor.fetchone() is not None

    def add(self, account: Account) -> Account:
        """
        Insert a new account.

        Raises:
            EmailAlreadyClaimed: If the unique email index rejects the row
        """
        sql = f"""
            INSERT INTO accounts (name, email, password_hash, status, activated_at)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        account.name,
                        account.email,
                        account.password_hash,
                        account.status.value,
                        account.activated_at,
                    ),
                )
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation:
            raise EmailAlreadyClaimed(account.email) from None
        return _to_account(row)

    def get(self, account_id: int) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE id = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (account_id,))
            row = cursor.fetchone()
        return _to_account(row) if row is not None else None

    def get_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE lower(email) = lower(%s)"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _to_account(row) if row is not None else None

    def save(self, account: Account) -> Account:
        """
        Update name, email and password hash.

        Raises:
            EmailAlreadyClaimed: If the new email belongs to another account
            KeyError: If the account no longer exists
        """
        sql = f"""
            UPDATE accounts
            SET name = %s, email = %s, password_hash = %s
            WHERE id = %s
            RETURNING {_COLUMNS}
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql, (account.name, account.email, account.password_hash, account.id)
                )
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation:
            raise EmailAlreadyClaimed(account.email) from None
        if row is None:
            raise KeyError(account.id)
        return _to_account(row)

    def store_activation_secret(self, account_id: int, secret_hash: str) -> bool:
        sql = """
            UPDATE accounts
            SET activation_secret_hash = %s
            WHERE id = %s AND status = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (secret_hash, account_id, AccountStatus.PENDING_ACTIVATION.value))
            conn.commit()
            return cursor.rowcount == 1

    def activate(self, account_id: int, secret_hash: str) -> bool:
        sql = """
            UPDATE accounts
            SET status = %s, activation_secret_hash = NULL, activated_at = NOW()
            WHERE id = %s AND status = %s AND activation_secret_hash = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    AccountStatus.ACTIVE.value,
                    account_id,
                    AccountStatus.PENDING_ACTIVATION.value,
                    secret_hash,
                ),
            )
            conn.commit()
            # 1 only for the request that consumed the secret
            return cursor.rowcount == 1

    def store_reset_secret(self, account_id: int, secret_hash: str) -> None:
        sql = "UPDATE accounts SET reset_secret_hash = %s WHERE id = %s"
        with self._pool.connection() as conn:
            conn.execute(sql, (secret_hash, account_id))
            conn.commit()

    def consume_reset(self, account_id: int, secret_hash: str, password_hash: str) -> bool:
        sql = """
            UPDATE accounts
            SET password_hash = %s, reset_secret_hash = NULL
            WHERE id = %s AND reset_secret_hash = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (password_hash, account_id, secret_hash))
            conn.commit()
            return cursor.rowcount == 1

    def ping(self) -> None:
        """Validate database connectivity."""
        with self._pool.connection() as conn:
            conn.execute("SELECT 1")


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

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
