"""
Domain exceptions - Semantic error types for the account lifecycle.

Each exception carries a machine-readable ``status`` tag and a human
``message``. The transport layer maps them to responses; no framework
types leak into the domain.
"""


class AuthError(Exception):
    """Base class for account lifecycle domain errors."""

    status = "error"
    message = "The request could not be completed."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(AuthError):
    """Input, duplicate email, or code failed validation."""

    status = "validation_failed"
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, str] | None = None, message: str | None = None) -> None:
        self.errors = dict(errors or {})
        super().__init__(message)


class EmailAlreadyClaimed(ValidationFailed):
    """Email is already used by another account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__({"email": "taken"})


class InvalidCode(ValidationFailed):
    """Verification code is malformed, unknown, or already consumed."""

    message = "The provided code is invalid."

    def __init__(self) -> None:
        super().__init__({"code": "invalid"})


class RegistrationRejected(ValidationFailed):
    """A beforeRegister listener vetoed the registration."""

    message = "Registration was rejected."


class RegistrationDisabled(AuthError):
    """Registrations are switched off in settings."""

    status = "disabled"
    message = "Registrations are currently disabled."


class AuthenticationFailed(AuthError):
    """Wrong credentials or no valid session (deliberately uniform)."""

    status = "authentication_failed"
    message = "The credentials provided are invalid or the session has expired."
