"""
Console mailer adapter - Implements Mailer protocol.

This module provides a console-based implementation of the domain's
mailer port, logging verification codes for development.
"""

import logging

logger = logging.getLogger(__name__)

_PREFIXES = {
    "activation": "[ACTIVATION]",
    "password_reset": "[PASSWORD_RESET]",
}


class ConsoleMailer:
    """
    Implements Mailer protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    In production, this would be replaced with an SMTP adapter.
    """

    def send(self, recipient: str, template: str, code: str) -> None:
        """
        Log a verification code (simulates email delivery).

        Args:
            recipient: Recipient email address
            template: Template kind, selects the log prefix
            code: External verification code
        """
        prefix = _PREFIXES.get(template, f"[{template.upper()}]")
        logger.info("%s Email: %s Code: %s", prefix, recipient, code)
