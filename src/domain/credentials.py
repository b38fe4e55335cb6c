"""
Password hashing with bcrypt.

Verification against a missing hash still runs bcrypt against a
precomputed dummy hash so that "unknown account" and "wrong password"
take the same time.
"""

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt rejects (or silently truncates) passwords longer than this
BCRYPT_MAX_BYTES = 72

# Hash of a throwaway password, cost factor 10.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt with the given cost factor.

    Raises:
        ValueError: If the password is longer than BCRYPT_MAX_BYTES once
            encoded; validation rejects such passwords first
    """
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password cannot be longer than {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Check a password against a bcrypt hash in constant time.

    A ``None`` hash always fails, after a comparison against the dummy hash.
    Passwords that could never have been stored (too long, or not valid
    UTF-8) also fail after a full comparison.
    """
    stored_hash = password_hash if password_hash is not None else _DUMMY_BCRYPT_HASH
    encoded = password.encode(errors="surrogatepass")
    storable = len(encoded) <= BCRYPT_MAX_BYTES
    try:
        valid = bcrypt.checkpw(encoded[:BCRYPT_MAX_BYTES], stored_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False
    return valid and storable and password_hash is not None
