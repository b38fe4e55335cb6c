"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle: registration, activation,
password reset and session-scoped operations. It defines its own port
interfaces for infrastructure abstraction, keeping storage, mail delivery
and session transport outside the domain.
"""

from .account import Account, AccountStatus
from .activation import ActivationOutcome, ActivationService
from .events import EventBus, LifecycleEvent
from .exceptions import (
    AuthenticationFailed,
    AuthError,
    EmailAlreadyClaimed,
    InvalidCode,
    RegistrationDisabled,
    RegistrationRejected,
    ValidationFailed,
)
from .password_reset import PasswordResetService
from .ports import AccountRepository, Mailer, SessionStore, SettingsStore
from .registration import RegistrationService, RegistrationSettings
from .session import SessionAuthenticator, SessionContext
from .validation import PasswordPolicy, ValidationResult

__all__ = [
    "Account",
    "AccountRepository",
    "AccountStatus",
    "ActivationOutcome",
    "ActivationService",
    "AuthError",
    "AuthenticationFailed",
    "EmailAlreadyClaimed",
    "EventBus",
    "InvalidCode",
    "LifecycleEvent",
    "Mailer",
    "PasswordPolicy",
    "PasswordResetService",
    "RegistrationDisabled",
    "RegistrationRejected",
    "RegistrationService",
    "RegistrationSettings",
    "SessionAuthenticator",
    "SessionContext",
    "SessionStore",
    "SettingsStore",
    "ValidationFailed",
    "ValidationResult",
]
