"""
Credential sign-in and session-scoped operations.

Sessions are opaque tokens held by a SessionStore. The current session is
passed explicitly as a :class:`SessionContext`; every operation that needs
a principal checks it first and raises AuthenticationFailed when there is
no live session. Sign-in failures are uniform: unknown login, wrong
password and a pending account all raise the same error after the same
bcrypt work.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .account import Account
from .credentials import DEFAULT_ROUNDS, hash_password, verify_password
from .events import EventBus, LifecycleEvent
from .exceptions import AuthenticationFailed
from .ports import AccountRepository, SessionStore
from .validation import PasswordPolicy, normalize_email, validate_profile_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Session token carried by the current request, if any."""

    token: str | None = None


@dataclass
class SessionAuthenticator:
    """Signs accounts in and out and serves the current principal."""

    repository: AccountRepository
    sessions: SessionStore
    events: EventBus
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)
    bcrypt_rounds: int = DEFAULT_ROUNDS

    def sign_in(self, login: str, password: str, remember: bool = False) -> tuple[Account, SessionContext]:
        """
        Verify credentials and open a session.

        Raises:
            AuthenticationFailed: On any credential mismatch
        """
        account = None
        if isinstance(login, str) and login.strip():
            account = self.repository.get_by_email(normalize_email(login))

        secret = password if isinstance(password, str) else ""
        valid = verify_password(secret, account.password_hash if account is not None else None)
        if not valid or not account.is_activated:
            raise AuthenticationFailed()

        context = self.start_session(account, remember)
        logger.info("Account %s signed in", account.id)
        return account, context

    def start_session(self, account: Account, remember: bool = False) -> SessionContext:
        return SessionContext(token=self.sessions.open(account.id, remember))

    def sign_out(self, context: SessionContext) -> None:
        """
        Close the session and emit LOGOUT.

        Raises:
            AuthenticationFailed: If the context holds no live session
        """
        account = self._principal(context)
        self.sessions.close(context.token)
        logger.info("Account %s signed out", account.id)
        self.events.emit(LifecycleEvent.LOGOUT, account)

    def current_user(self, context: SessionContext) -> Account:
        """
        Return the principal after AFTER_GET_USER listeners have run.

        Raises:
            AuthenticationFailed: If the context holds no live session
        """
        return self.events.after_get_user(self._principal(context))

    def update_profile(self, context: SessionContext, data: Mapping[str, Any]) -> Account:
        """
        Apply name, email and password changes to the principal.

        Raises:
            AuthenticationFailed: If the context holds no live session
            ValidationFailed: On field errors or a duplicate email
        """
        account = self._principal(context)
        validate_profile_update(data, account, self.repository, self.password_policy).raise_if_failed()

        if data.get("name") is not None:
            account.name = data["name"].strip()
        if data.get("email") is not None:
            account.email = normalize_email(data["email"])
        if data.get("password") is not None:
            account.password_hash = hash_password(data["password"], self.bcrypt_rounds)

        return self.repository.save(account)

    def _principal(self, context: SessionContext | None) -> Account:
        if context is None or not context.token:
            raise AuthenticationFailed()
        account_id = self.sessions.resolve(context.token)
        if account_id is None:
            raise AuthenticationFailed()
        account = self.repository.get(account_id)
        if account is None:
            raise AuthenticationFailed()
        return account
