"""Best-effort delivery of verification codes through the Mailer port."""

import logging

from .ports import Mailer

logger = logging.getLogger(__name__)

ACTIVATION_TEMPLATE = "activation"
PASSWORD_RESET_TEMPLATE = "password_reset"


def deliver(mailer: Mailer, recipient: str, template: str, code: str) -> bool:
    """
    Hand a code to the mailer without letting delivery failures escape.

    The caller's state change is already persisted; a failed delivery is
    logged and reported through the return value only.

    Returns:
        True if the mailer accepted the message
    """
    try:
        mailer.send(recipient, template, code)
    except Exception:
        logger.exception("Delivery of %s email failed", template)
        return False
    return True
