"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols structurally.
"""

from typing import Any, Protocol

from .account import Account


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def email_in_use(self, email: str, exclude_id: int | None = None) -> bool:
        """
        Check whether an email belongs to an account (case-insensitive).

        Args:
            email: Normalized email address
            exclude_id: Account id to ignore (the account being updated)
        """
        ...

    def add(self, account: Account) -> Account:
        """
        Insert a new account and assign its id.

        Uniqueness of the email is enforced atomically by the store.

        Raises:
            EmailAlreadyClaimed: If another account already uses the email
        """
        ...

    def get(self, account_id: int) -> Account | None:
        """Fetch an account by id."""
        ...

    def get_by_email(self, email: str) -> Account | None:
        """Fetch an account by normalized email (case-insensitive)."""
        ...

    def save(self, account: Account) -> Account:
        """
        Persist name, email and password hash of an existing account.

        Raises:
            EmailAlreadyClaimed: If the new email is used by another account
        """
        ...

    def store_activation_secret(self, account_id: int, secret_hash: str) -> bool:
        """
        Replace the activation secret of a PENDING_ACTIVATION account.

        Returns:
            True if stored, False if the account is missing or already active
        """
        ...

    def activate(self, account_id: int, secret_hash: str) -> bool:
        """
        Atomically move a pending account to ACTIVE and clear its secret.

        Succeeds only while the stored activation secret still equals
        ``secret_hash``, so a secret is consumed at most once.

        Returns:
            True if this call performed the transition
        """
        ...

    def store_reset_secret(self, account_id: int, secret_hash: str) -> None:
        """Replace the password reset secret of an account."""
        ...

    def consume_reset(self, account_id: int, secret_hash: str, password_hash: str) -> bool:
        """
        Atomically set a new password hash and clear the reset secret.

        Succeeds only while the stored reset secret still equals
        ``secret_hash``.

        Returns:
            True if this call consumed the secret
        """
        ...


class Mailer(Protocol):
    """Port interface for email delivery."""

    def send(self, recipient: str, template: str, code: str) -> None:
        """
        Deliver a templated message carrying a verification code.

        Args:
            recipient: Recipient email address
            template: Template kind (``activation`` or ``password_reset``)
            code: External verification code
        """
        ...


class SessionStore(Protocol):
    """Port interface for session persistence."""

    def open(self, account_id: int, remember: bool = False) -> str:
        """Create a session bound to an account and return its token."""
        ...

    def resolve(self, token: str) -> int | None:
        """Return the account id bound to a live session, if any."""
        ...

    def close(self, token: str) -> None:
        """Destroy a session. Closing an unknown token is a no-op."""
        ...


class SettingsStore(Protocol):
    """Port interface for runtime settings lookup."""

    def get(self, key: str) -> Any:
        """Return the current value of a setting."""
        ...
