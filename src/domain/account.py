"""
Account entity and its status lifecycle.

Status Transitions (forward-only):
    PENDING_ACTIVATION -> ACTIVE   (valid activation code)

ACTIVE is terminal. Accounts registered outside the "user" activation
mode start ACTIVE and never carry an activation secret.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AccountStatus(str, Enum):
    """Account lifecycle states."""

    PENDING_ACTIVATION = "PENDING_ACTIVATION"
    ACTIVE = "ACTIVE"


@dataclass
class Account:
    """
    Durable user record.

    ``password_hash``, ``activation_secret_hash`` and ``reset_secret_hash``
    never leave the domain; use :meth:`public_profile` for anything that
    crosses the boundary. ``extras`` holds data attached by afterGetUser
    listeners (e.g. an avatar relation) and is not persisted.
    """

    name: str
    email: str
    password_hash: str
    status: AccountStatus = AccountStatus.ACTIVE
    id: int | None = None
    activation_secret_hash: str | None = None
    reset_secret_hash: str | None = None
    activated_at: datetime | None = None
    created_at: datetime | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def is_activated(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def public_profile(self) -> dict[str, Any]:
        """Return the subset of fields that is safe to expose."""
        profile: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "is_activated": self.is_activated,
            "activated_at": self.activated_at.isoformat() if self.activated_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        # Listener data never overrides the core fields
        for key, value in self.extras.items():
            profile.setdefault(key, value)
        return profile
