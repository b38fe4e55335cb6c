"""
Shared fixtures for adversarial tests.

Provides a thread-safe in-memory stack that concurrent attackers share.
"""

from unittest.mock import Mock

import pytest

from src.domain.account import Account
from src.domain.registration import RegistrationService, RegistrationSettings


@pytest.fixture
def pending_account(
    registration_service: RegistrationService,
    registration_input: dict,
    mailer: Mock,
) -> tuple[Account, str]:
    """A PENDING_ACTIVATION account and its mailed activation code."""
    account = registration_service.register(registration_input, RegistrationSettings(activate_mode="user"))
    return account, mailer.send.call_args[0][2]
