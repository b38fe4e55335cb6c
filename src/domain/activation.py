"""
Account activation.

PENDING_ACTIVATION -> ACTIVE on a valid activation code. The transition
and the clearing of the secret happen in one conditional store update,
so a code can be consumed only once even under concurrent requests.
"""

import logging
from dataclasses import dataclass

from . import codes
from .account import Account, AccountStatus
from .exceptions import InvalidCode
from .mail import ACTIVATION_TEMPLATE, deliver
from .ports import AccountRepository, Mailer
from .registration import RegistrationSettings
from .validation import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationOutcome:
    """Activated account plus the URL the caller should redirect to, if any."""

    account: Account
    redirect_url: str | None = None


@dataclass
class ActivationService:
    """Verifies activation codes and re-issues them on request."""

    repository: AccountRepository
    mailer: Mailer

    def activate(self, code: str, settings: RegistrationSettings) -> ActivationOutcome:
        """
        Activate the account a code belongs to.

        Raises:
            InvalidCode: If the code is malformed, the account is unknown or
                already active, or the secret does not match
        """
        decoded = codes.decode(code)
        account = self.repository.get(decoded.subject_id)
        stored_hash = account.activation_secret_hash if account is not None else None

        if not codes.matches(decoded.secret, stored_hash):
            raise InvalidCode()
        if account.status != AccountStatus.PENDING_ACTIVATION:
            raise InvalidCode()
        if not self.repository.activate(account.id, stored_hash):
            # Lost a race against another activation of the same code
            raise InvalidCode()

        activated = self.repository.get(account.id)
        logger.info("Activated account %s", activated.id)
        return ActivationOutcome(account=activated, redirect_url=settings.activation_redirect)

    def resend(self, email: str) -> None:
        """
        Issue a fresh activation code for a pending account and mail it.

        The previous code stops working. Unknown or already active emails
        are ignored so the outcome does not reveal account existence.
        """
        if not isinstance(email, str) or not email.strip():
            return
        account = self.repository.get_by_email(normalize_email(email))
        if account is None or account.status != AccountStatus.PENDING_ACTIVATION:
            return

        issued = codes.issue(account.id)
        if self.repository.store_activation_secret(account.id, issued.secret_hash):
            deliver(self.mailer, account.email, ACTIVATION_TEMPLATE, issued.code)
