"""
Password reset via single-use reset codes.

``request_reset`` always completes silently; whether the email belongs
to an account is not observable from its result. For unknown emails a
throwaway code is still generated and hashed so both paths do similar
work. The reset secret has its own lifecycle, independent of the
activation secret.
"""

import logging
from dataclasses import dataclass, field

from . import codes
from .credentials import DEFAULT_ROUNDS, hash_password
from .exceptions import InvalidCode
from .mail import PASSWORD_RESET_TEMPLATE, deliver
from .ports import AccountRepository, Mailer
from .validation import PasswordPolicy, ValidationResult, check_password, normalize_email

logger = logging.getLogger(__name__)


@dataclass
class PasswordResetService:
    """Issues and redeems password reset codes."""

    repository: AccountRepository
    mailer: Mailer
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)
    bcrypt_rounds: int = DEFAULT_ROUNDS

    def request_reset(self, email: str) -> None:
        """Issue a reset code for the account owning ``email`` and mail it."""
        account = None
        if isinstance(email, str) and email.strip():
            account = self.repository.get_by_email(normalize_email(email))

        if account is None:
            codes.issue(0)
            return

        issued = codes.issue(account.id)
        self.repository.store_reset_secret(account.id, issued.secret_hash)
        deliver(self.mailer, account.email, PASSWORD_RESET_TEMPLATE, issued.code)

    def reset_password(
        self,
        code: str,
        password: str,
        password_confirmation: str | None = None,
    ) -> None:
        """
        Set a new password using a reset code.

        Raises:
            InvalidCode: If the code is malformed, unknown or already used
            ValidationFailed: If the new password breaks the policy
        """
        decoded = codes.decode(code)
        account = self.repository.get(decoded.subject_id)
        stored_hash = account.reset_secret_hash if account is not None else None
        if not codes.matches(decoded.secret, stored_hash):
            raise InvalidCode()

        result = ValidationResult()
        check_password(
            result, password, password_confirmation, self.password_policy, require_confirmation=False
        )
        result.raise_if_failed()

        password_hash = hash_password(password, self.bcrypt_rounds)
        if not self.repository.consume_reset(account.id, stored_hash, password_hash):
            raise InvalidCode()
        logger.info("Password reset for account %s", account.id)
