"""
Single-use verification codes.

External format: ``"<subject_id>!<secret>"`` where ``subject_id`` is the
positive integer account id and ``secret`` is a URL-safe random token.
Only the SHA-256 digest of the secret is stored; the secret itself is
high-entropy so a fast digest is sufficient. Comparisons against the
stored digest use ``secrets.compare_digest``.

Activation and password reset both use this codec, each against its
own stored digest.
"""

import hashlib
import secrets
from dataclasses import dataclass

from .exceptions import InvalidCode

SEPARATOR = "!"
SECRET_BYTES = 32
# Largest id the accounts table can hold (BIGINT)
MAX_SUBJECT_ID = 2**63 - 1


@dataclass(frozen=True)
class VerificationCode:
    """Decoded form of an external verification code."""

    subject_id: int
    secret: str

    def encode(self) -> str:
        return f"{self.subject_id}{SEPARATOR}{self.secret}"


@dataclass(frozen=True)
class IssuedCode:
    """A freshly issued code: the external string and the digest to store."""

    code: str
    secret_hash: str


def hash_secret(secret: str) -> str:
    return hashlib.sha256(secret.encode()).hexdigest()


def issue(subject_id: int) -> IssuedCode:
    """
    Generate a new code for an account.

    Args:
        subject_id: Account id the code is bound to

    Returns:
        IssuedCode with the external code and the digest of its secret
    """
    secret = secrets.token_urlsafe(SECRET_BYTES)
    code = VerificationCode(subject_id=subject_id, secret=secret)
    return IssuedCode(code=code.encode(), secret_hash=hash_secret(secret))


def decode(code: str) -> VerificationCode:
    """
    Parse an external code.

    Raises:
        InvalidCode: If the separator is missing, the subject id is not a
            positive integer within BIGINT range, or the secret is empty
    """
    if not isinstance(code, str) or SEPARATOR not in code:
        raise InvalidCode()

    raw_id, secret = code.split(SEPARATOR, 1)
    if not raw_id.isascii() or not raw_id.isdigit() or not secret:
        raise InvalidCode()
    if len(raw_id) > len(str(MAX_SUBJECT_ID)):
        raise InvalidCode()

    subject_id = int(raw_id)
    if not 0 < subject_id <= MAX_SUBJECT_ID:
        raise InvalidCode()

    return VerificationCode(subject_id=subject_id, secret=secret)


def matches(secret: str, secret_hash: str | None) -> bool:
    """Compare a secret to a stored digest in constant time."""
    # Always run the comparison, even when nothing is stored
    expected = secret_hash if secret_hash is not None else ""
    valid = secrets.compare_digest(hash_secret(secret).encode(), expected.encode())
    return valid and secret_hash is not None


def verify(code: str, secret_hash: str | None) -> int:
    """
    Decode a code and check its secret against a stored digest.

    Returns:
        The subject id carried by the code

    Raises:
        InvalidCode: If the code is malformed or does not match
    """
    decoded = decode(code)
    if not matches(decoded.secret, secret_hash):
        raise InvalidCode()
    return decoded.subject_id
