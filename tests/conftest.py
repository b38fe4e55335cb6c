"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory adapters (account repository, session store)
- Domain services wired with a low bcrypt cost
- A FastAPI test client over the in-memory stack
"""

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.session.memory import InMemorySessionStore
from src.api.dependencies import get_mailer
from src.api.errors import install_exception_handlers
from src.api.main import configure_state
from src.api.v1 import router
from src.config.settings import Settings
from src.domain.activation import ActivationService
from src.domain.events import EventBus
from src.domain.password_reset import PasswordResetService
from src.domain.registration import RegistrationService, RegistrationSettings
from src.domain.session import SessionAuthenticator

# bcrypt's minimum cost keeps the suite fast
TEST_ROUNDS = 4


@pytest.fixture
def registration_input() -> dict:
    """Valid registration input."""
    return {
        "email": "john@example.com",
        "name": "John Doe",
        "password": "hello",
        "password_confirmation": "hello",
    }


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def mailer() -> Mock:
    return Mock()


@pytest.fixture
def registration_service(
    repository: InMemoryAccountRepository, mailer: Mock, events: EventBus
) -> RegistrationService:
    return RegistrationService(
        repository=repository, mailer=mailer, events=events, bcrypt_rounds=TEST_ROUNDS
    )


@pytest.fixture
def activation_service(repository: InMemoryAccountRepository, mailer: Mock) -> ActivationService:
    return ActivationService(repository=repository, mailer=mailer)


@pytest.fixture
def password_reset_service(
    repository: InMemoryAccountRepository, mailer: Mock
) -> PasswordResetService:
    return PasswordResetService(repository=repository, mailer=mailer, bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def authenticator(
    repository: InMemoryAccountRepository, sessions: InMemorySessionStore, events: EventBus
) -> SessionAuthenticator:
    return SessionAuthenticator(
        repository=repository, sessions=sessions, events=events, bcrypt_rounds=TEST_ROUNDS
    )


@pytest.fixture
def open_settings() -> RegistrationSettings:
    """Registration enabled, automatic activation."""
    return RegistrationSettings()


@pytest.fixture
def user_activation_settings() -> RegistrationSettings:
    """Registration enabled, activation by emailed code."""
    return RegistrationSettings(activate_mode="user")


@pytest.fixture
def app_settings() -> Settings:
    return Settings(_env_file=None, account_store="memory", bcrypt_cost=TEST_ROUNDS)


@pytest.fixture
def app(app_settings: Settings, repository: InMemoryAccountRepository, mailer: Mock) -> FastAPI:
    """Create test FastAPI application over the in-memory stack."""
    test_app = FastAPI()
    install_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    configure_state(test_app, app_settings, repository)
    test_app.dependency_overrides[get_mailer] = lambda: mailer
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)
