"""
In-memory session store - Implements SessionStore protocol.

Sessions are opaque random tokens mapped to an account id and an expiry.
Expired sessions are dropped lazily when resolved.
"""

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    account_id: int
    expires_at: datetime


class InMemorySessionStore:
    """
    Implements SessionStore protocol with a lock-guarded dict.

    ``remember`` sessions live for ``remember_ttl_seconds``; others for
    ``ttl_seconds``.
    """

    def __init__(
        self,
        ttl_seconds: int = 2 * 60 * 60,
        remember_ttl_seconds: int = 30 * 24 * 60 * 60,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._remember_ttl = timedelta(seconds=remember_ttl_seconds)
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def open(self, account_id: int, remember: bool = False) -> str:
        token = secrets.token_urlsafe(32)
        ttl = self._remember_ttl if remember else self._ttl
        with self._lock:
            self._entries[token] = _Entry(account_id=account_id, expires_at=self._clock() + ttl)
        return token

    def resolve(self, token: str) -> int | None:
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[token]
                return None
            return entry.account_id

    def close(self, token: str) -> None:
        with self._lock:
            self._entries.pop(token, None)
