"""
Shared fixtures for PostgreSQL integration tests.

Requires PostgreSQL to be running (DATABASE_URL). Tests that need the
database are skipped when it cannot be reached.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests and apply migrations."""
    settings = get_settings()
    try:
        psycopg.connect(settings.database_url, connect_timeout=2).close()
    except psycopg.OperationalError as exc:
        pytest.skip(f"PostgreSQL unavailable: {exc}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield
