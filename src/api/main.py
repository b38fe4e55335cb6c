"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.adapters.session.memory import InMemorySessionStore
from src.api.errors import install_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.config.store import MemorySettingsStore
from src.domain.events import EventBus
from src.domain.ports import AccountRepository

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account lifecycle API v1 - Register, activate, reset passwords and manage sessions",
    },
]


def configure_state(app: FastAPI, settings: Settings, repository: AccountRepository) -> None:
    """Attach the long-lived collaborators used by the dependency factories."""
    app.state.settings = settings
    app.state.repository = repository
    app.state.sessions = InMemorySessionStore(
        ttl_seconds=settings.session_ttl_seconds,
        remember_ttl_seconds=settings.remember_ttl_seconds,
    )
    app.state.events = EventBus()
    app.state.settings_store = MemorySettingsStore(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the account store (database pool + migrations for postgres)
    - Wires session store, event bus and settings store into app state
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    pool = None

    logger.info("Starting application...")

    if settings.account_store == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        repository: AccountRepository = PostgresAccountRepository(pool)
    else:
        logger.info("Using in-memory account store")
        repository = InMemoryAccountRepository()

    configure_state(app, settings, repository)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="accountgate",
    description="Account lifecycle API - Registration, activation codes, password reset and sessions",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with account store validation.

    Returns 200 OK if application and store are healthy.
    Raises exception if the store is unreachable.
    """
    request.app.state.repository.ping()
    return {"status": "healthy"}
