"""
Field validation shared by registration, password reset and profile updates.

Validators never raise on bad input; they collect a field -> error-kind
map in a :class:`ValidationResult`. Callers decide when to turn a failed
result into :class:`ValidationFailed`.

Error kinds: required, invalid, taken, too_short, too_long,
confirmation_mismatch.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .account import Account
from .credentials import BCRYPT_MAX_BYTES
from .exceptions import ValidationFailed
from .ports import AccountRepository


@dataclass(frozen=True)
class PasswordPolicy:
    """
    Length bounds for passwords.

    The minimum counts characters; the maximum counts UTF-8 bytes and is
    capped at BCRYPT_MAX_BYTES.
    """

    min_length: int = 4
    max_length: int = BCRYPT_MAX_BYTES

    def __post_init__(self) -> None:
        if self.max_length > BCRYPT_MAX_BYTES:
            raise ValueError(f"max_length cannot exceed {BCRYPT_MAX_BYTES} bytes")


@dataclass
class ValidationResult:
    """Per-call field error map."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, name: str, kind: str) -> None:
        # First error per field wins
        self.errors.setdefault(name, kind)

    def raise_if_failed(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_email(
    result: ValidationResult,
    value: Any,
    repository: AccountRepository,
    exclude_id: int | None = None,
) -> None:
    if _is_blank(value):
        result.add("email", "required")
    elif not isinstance(value, str) or not _is_valid_email(value.strip()):
        result.add("email", "invalid")
    elif repository.email_in_use(normalize_email(value), exclude_id=exclude_id):
        result.add("email", "taken")


def check_password(
    result: ValidationResult,
    password: Any,
    confirmation: Any,
    policy: PasswordPolicy,
    require_confirmation: bool = True,
) -> None:
    """Check presence, length bounds and confirmation of a password."""
    if password is None or password == "":
        result.add("password", "required")
        return
    if not isinstance(password, str):
        result.add("password", "invalid")
        return
    try:
        size = len(password.encode())
    except UnicodeEncodeError:
        # Lone surrogates
        result.add("password", "invalid")
        return
    if len(password) < policy.min_length:
        result.add("password", "too_short")
    elif size > policy.max_length:
        result.add("password", "too_long")

    if confirmation is None:
        if require_confirmation:
            result.add("password_confirmation", "required")
    elif confirmation != password:
        result.add("password_confirmation", "confirmation_mismatch")


def validate_registration(
    data: Mapping[str, Any],
    repository: AccountRepository,
    policy: PasswordPolicy = PasswordPolicy(),
) -> ValidationResult:
    """Validate email, name, password and password_confirmation."""
    result = ValidationResult()
    check_email(result, data.get("email"), repository)

    name = data.get("name")
    if _is_blank(name):
        result.add("name", "required")
    elif not isinstance(name, str):
        result.add("name", "invalid")

    check_password(result, data.get("password"), data.get("password_confirmation"), policy)
    return result


def validate_profile_update(
    data: Mapping[str, Any],
    current: Account,
    repository: AccountRepository,
    policy: PasswordPolicy = PasswordPolicy(),
) -> ValidationResult:
    """
    Validate a partial profile update.

    Only supplied fields are checked. The email uniqueness check ignores
    the current account. Password fields are optional, but if either is
    supplied both must be, and they must match.
    """
    result = ValidationResult()

    if data.get("name") is not None:
        name = data["name"]
        if not isinstance(name, str):
            result.add("name", "invalid")
        elif not name.strip():
            result.add("name", "required")

    if data.get("email") is not None:
        check_email(result, data["email"], repository, exclude_id=current.id)

    password = data.get("password")
    confirmation = data.get("password_confirmation")
    if password is not None or confirmation is not None:
        if password is None:
            result.add("password", "required")
        else:
            check_password(result, password, confirmation, policy)
    return result
