"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Long-lived collaborators (repository, session store, event bus, settings
store) live on ``app.state`` and are created during lifespan startup.
"""

from fastapi import Depends, Request

from src.adapters.mail.console import ConsoleMailer
from src.config.settings import Settings
from src.domain.activation import ActivationService
from src.domain.events import EventBus
from src.domain.password_reset import PasswordResetService
from src.domain.ports import AccountRepository, Mailer, SessionStore, SettingsStore
from src.domain.registration import RegistrationService, RegistrationSettings
from src.domain.session import SessionAuthenticator, SessionContext
from src.domain.validation import PasswordPolicy

# Module-level singleton - ConsoleMailer is stateless
_mailer = ConsoleMailer()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> AccountRepository:
    return request.app.state.repository


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.events


def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


def get_mailer() -> Mailer:
    """Get console mailer (singleton)."""
    return _mailer


def get_registration_settings(
    store: SettingsStore = Depends(get_settings_store),
) -> RegistrationSettings:
    """Resolve registration settings once for the current request."""
    return RegistrationSettings.from_store(store)


def get_password_policy(settings: Settings = Depends(get_app_settings)) -> PasswordPolicy:
    return PasswordPolicy(
        min_length=settings.min_password_length,
        max_length=settings.max_password_length,
    )


def get_registration_service(
    settings: Settings = Depends(get_app_settings),
    repository: AccountRepository = Depends(get_repository),
    mailer: Mailer = Depends(get_mailer),
    events: EventBus = Depends(get_event_bus),
    policy: PasswordPolicy = Depends(get_password_policy),
) -> RegistrationService:
    return RegistrationService(
        repository=repository,
        mailer=mailer,
        events=events,
        password_policy=policy,
        bcrypt_rounds=settings.bcrypt_cost,
    )


def get_activation_service(
    repository: AccountRepository = Depends(get_repository),
    mailer: Mailer = Depends(get_mailer),
) -> ActivationService:
    return ActivationService(repository=repository, mailer=mailer)


def get_password_reset_service(
    settings: Settings = Depends(get_app_settings),
    repository: AccountRepository = Depends(get_repository),
    mailer: Mailer = Depends(get_mailer),
    policy: PasswordPolicy = Depends(get_password_policy),
) -> PasswordResetService:
    return PasswordResetService(
        repository=repository,
        mailer=mailer,
        password_policy=policy,
        bcrypt_rounds=settings.bcrypt_cost,
    )


def get_session_authenticator(
    settings: Settings = Depends(get_app_settings),
    repository: AccountRepository = Depends(get_repository),
    sessions: SessionStore = Depends(get_session_store),
    events: EventBus = Depends(get_event_bus),
    policy: PasswordPolicy = Depends(get_password_policy),
) -> SessionAuthenticator:
    return SessionAuthenticator(
        repository=repository,
        sessions=sessions,
        events=events,
        password_policy=policy,
        bcrypt_rounds=settings.bcrypt_cost,
    )


def get_session_context(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> SessionContext:
    """Read the session token from the session cookie."""
    return SessionContext(token=request.cookies.get(settings.session_cookie_name))
