"""
Registration domain service.

Registration Flow
=================

1. Reject when registrations are disabled (nothing is persisted).
2. Validate the input; field errors raise ValidationFailed.
3. Emit BEFORE_REGISTER with the candidate account. A listener may veto
   by raising RegistrationRejected; the candidate is then discarded.
4. Hash the password and persist the account. The initial status depends
   on the activation mode:
   - "user": PENDING_ACTIVATION, an activation code is issued, stored
     and mailed. Mail failures are logged and do not undo the account.
   - anything else: ACTIVE immediately.
5. Emit REGISTER with the persisted account.

The store enforces email uniqueness atomically, so a concurrent duplicate
surfaces as EmailAlreadyClaimed (a ValidationFailed) to the loser.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from . import codes
from .account import Account, AccountStatus
from .credentials import DEFAULT_ROUNDS, hash_password
from .events import EventBus, LifecycleEvent
from .exceptions import RegistrationDisabled
from .mail import ACTIVATION_TEMPLATE, deliver
from .ports import AccountRepository, Mailer, SettingsStore
from .validation import PasswordPolicy, normalize_email, validate_registration

logger = logging.getLogger(__name__)

ACTIVATE_MODE_USER = "user"


@dataclass(frozen=True)
class RegistrationSettings:
    """Registration-related settings, resolved once per request."""

    allow_registration: bool = True
    activate_mode: str = "auto"
    activation_redirect: str | None = None

    @property
    def requires_activation(self) -> bool:
        return self.activate_mode == ACTIVATE_MODE_USER

    @classmethod
    def from_store(cls, store: SettingsStore) -> "RegistrationSettings":
        return cls(
            allow_registration=bool(store.get("allow_registration")),
            activate_mode=str(store.get("activate_mode") or "auto"),
            activation_redirect=store.get("activation_redirect") or None,
        )


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates validation, lifecycle events, password hashing,
    activation code issuance and persistence.
    """

    repository: AccountRepository
    mailer: Mailer
    events: EventBus
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)
    bcrypt_rounds: int = DEFAULT_ROUNDS

    def register(self, data: Mapping[str, Any], settings: RegistrationSettings) -> Account:
        """
        Register a new account.

        Args:
            data: email, name, password and password_confirmation
            settings: Registration settings for this request

        Returns:
            The persisted account

        Raises:
            RegistrationDisabled: If registrations are switched off
            ValidationFailed: On field errors, a duplicate email or a veto
        """
        if not settings.allow_registration:
            raise RegistrationDisabled()

        validate_registration(data, self.repository, self.password_policy).raise_if_failed()

        status = (
            AccountStatus.PENDING_ACTIVATION
            if settings.requires_activation
            else AccountStatus.ACTIVE
        )
        candidate = Account(
            name=data["name"].strip(),
            email=normalize_email(data["email"]),
            password_hash="",
            status=status,
        )
        self.events.emit(LifecycleEvent.BEFORE_REGISTER, candidate)

        candidate.password_hash = hash_password(data["password"], self.bcrypt_rounds)
        if candidate.status == AccountStatus.ACTIVE:
            candidate.activated_at = datetime.now(timezone.utc)

        account = self.repository.add(candidate)
        logger.info("Registered account %s (%s)", account.id, account.status.value)

        if settings.requires_activation:
            self._send_activation(account)

        self.events.emit(LifecycleEvent.REGISTER, account)
        return account

    def _send_activation(self, account: Account) -> None:
        issued = codes.issue(account.id)
        self.repository.store_activation_secret(account.id, issued.secret_hash)
        account.activation_secret_hash = issued.secret_hash
        deliver(self.mailer, account.email, ACTIVATION_TEMPLATE, issued.code)
