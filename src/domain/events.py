"""
Lifecycle event bus.

Listeners are plain callables registered per :class:`LifecycleEvent`.

- ``BEFORE_REGISTER``, ``REGISTER`` and ``LOGOUT`` are notifications: a
  failing listener is logged and skipped. The one exception is
  :class:`RegistrationRejected` raised from a ``BEFORE_REGISTER``
  listener, which propagates and aborts the registration.
- ``AFTER_GET_USER`` is an extension point run synchronously before a
  profile is returned. Each listener receives the account and may mutate
  it (typically ``account.extras``) or return a replacement; its errors
  propagate.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

from .account import Account
from .exceptions import RegistrationRejected

logger = logging.getLogger(__name__)

Listener = Callable[[Account], Any]


class LifecycleEvent(str, Enum):
    """Named account lifecycle events."""

    BEFORE_REGISTER = "auth.beforeRegister"
    REGISTER = "auth.register"
    LOGOUT = "auth.logout"
    AFTER_GET_USER = "auth.afterGetUser"


class EventBus:
    """Synchronous in-process dispatcher for lifecycle events."""

    def __init__(self) -> None:
        self._listeners: dict[LifecycleEvent, list[Listener]] = defaultdict(list)

    def listen(self, event: LifecycleEvent, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def forget(self, event: LifecycleEvent) -> None:
        """Remove every listener of an event."""
        self._listeners.pop(event, None)

    def listeners(self, event: LifecycleEvent) -> list[Listener]:
        return list(self._listeners.get(event, []))

    def emit(self, event: LifecycleEvent, account: Account) -> None:
        """
        Notify listeners of an event.

        Raises:
            RegistrationRejected: If a BEFORE_REGISTER listener vetoes
        """
        for listener in self.listeners(event):
            try:
                listener(account)
            except RegistrationRejected:
                if event is LifecycleEvent.BEFORE_REGISTER:
                    raise
                logger.warning("Listener %r raised a rejection outside %s", listener, event.value)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.value)

    def after_get_user(self, account: Account) -> Account:
        """Run AFTER_GET_USER listeners and return the (possibly replaced) account."""
        for listener in self.listeners(LifecycleEvent.AFTER_GET_USER):
            returned = listener(account)
            if isinstance(returned, Account):
                account = returned
        return account
