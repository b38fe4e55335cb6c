"""
In-memory repository adapter - Implements AccountRepository protocol.

Thread-safe process-local storage with the same atomicity guarantees as
the PostgreSQL adapter: every check-then-write runs under one lock, and
callers only ever receive copies of stored records.
"""

import copy
import threading
from datetime import datetime, timezone

from src.domain.account import Account, AccountStatus
from src.domain.exceptions import EmailAlreadyClaimed


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _email_owner(self, email: str) -> int | None:
        needle = email.lower()
        for account in self._accounts.values():
            if account.email.lower() == needle:
                return account.id
        return None

    def email_in_use(self, email: str, exclude_id: int | None = None) -> bool:
        with self._lock:
            owner = self._email_owner(email)
        return owner is not None and owner != exclude_id

    def add(self, account: Account) -> Account:
        with self._lock:
            if self._email_owner(account.email) is not None:
                raise EmailAlreadyClaimed(account.email)
            stored = copy.deepcopy(account)
            stored.id = self._next_id
            stored.created_at = datetime.now(timezone.utc)
            stored.extras = {}
            self._next_id += 1
            self._accounts[stored.id] = stored
            return copy.deepcopy(stored)

    def get(self, account_id: int) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return copy.deepcopy(account) if account is not None else None

    def get_by_email(self, email: str) -> Account | None:
        with self._lock:
            owner = self._email_owner(email)
            return copy.deepcopy(self._accounts[owner]) if owner is not None else None

    def save(self, account: Account) -> Account:
        with self._lock:
            stored = self._accounts.get(account.id)
            if stored is None:
                raise KeyError(account.id)
            owner = self._email_owner(account.email)
            if owner is not None and owner != account.id:
                raise EmailAlreadyClaimed(account.email)
            stored.name = account.name
            stored.email = account.email
            stored.password_hash = account.password_hash
            return copy.deepcopy(stored)

    def store_activation_secret(self, account_id: int, secret_hash: str) -> bool:
        with self._lock:
            stored = self._accounts.get(account_id)
            if stored is None or stored.status != AccountStatus.PENDING_ACTIVATION:
                return False
            stored.activation_secret_hash = secret_hash
            return True

    def activate(self, account_id: int, secret_hash: str) -> bool:
        with self._lock:
            stored = self._accounts.get(account_id)
            if (
                stored is None
                or stored.status != AccountStatus.PENDING_ACTIVATION
                or stored.activation_secret_hash != secret_hash
            ):
                return False
            stored.status = AccountStatus.ACTIVE
            stored.activation_secret_hash = None
            stored.activated_at = datetime.now(timezone.utc)
            return True

    def store_reset_secret(self, account_id: int, secret_hash: str) -> None:
        with self._lock:
            stored = self._accounts.get(account_id)
            if stored is not None:
                stored.reset_secret_hash = secret_hash

    def consume_reset(self, account_id: int, secret_hash: str, password_hash: str) -> bool:
        with self._lock:
            stored = self._accounts.get(account_id)
            if stored is None or stored.reset_secret_hash != secret_hash:
                return False
            stored.password_hash = password_hash
            stored.reset_secret_hash = None
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def ping(self) -> None:
        """Health probe; the in-memory store is always reachable."""
        return None
