"""
Unit tests for SessionAuthenticator.

Tests verify sign-in, sign-out, the current principal with its
afterGetUser extension point, and authorized profile updates.
"""

from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.session.memory import InMemorySessionStore
from src.domain.account import Account
from src.domain.credentials import verify_password
from src.domain.events import EventBus, LifecycleEvent
from src.domain.exceptions import AuthenticationFailed, ValidationFailed
from src.domain.registration import RegistrationService, RegistrationSettings
from src.domain.session import SessionAuthenticator, SessionContext


@pytest.fixture
def account(
    registration_service: RegistrationService,
    registration_input: dict,
    open_settings: RegistrationSettings,
) -> Account:
    return registration_service.register(registration_input, open_settings)


@pytest.fixture
def context(authenticator: SessionAuthenticator, account: Account) -> SessionContext:
    _, ctx = authenticator.sign_in("john@example.com", "hello")
    return ctx


class TestSignIn:
    """Tests for credential sign-in."""

    def test_correct_credentials(
        self, authenticator: SessionAuthenticator, account: Account, sessions: InMemorySessionStore
    ) -> None:
        signed_in, context = authenticator.sign_in("john@example.com", "hello", remember=False)

        assert signed_in.email == "john@example.com"
        assert sessions.resolve(context.token) == account.id
        assert authenticator.current_user(context).id == account.id

    def test_login_is_case_insensitive(self, authenticator: SessionAuthenticator, account: Account) -> None:
        signed_in, _ = authenticator.sign_in("  JOHN@example.com", "hello")
        assert signed_in.id == account.id

    @pytest.mark.parametrize(
        ("login", "password"),
        [
            ("john@example.com", "wrong"),
            ("nobody@example.com", "hello"),
            ("", "hello"),
            (None, None),
        ],
    )
    def test_failures_are_uniform(
        self,
        authenticator: SessionAuthenticator,
        account: Account,
        login: str | None,
        password: str | None,
    ) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            authenticator.sign_in(login, password)  # type: ignore[arg-type]
        assert exc_info.value.status == "authentication_failed"
        assert exc_info.value.message == AuthenticationFailed.message

    def test_failed_sign_in_opens_no_session(
        self, repository: InMemoryAccountRepository, events: EventBus, account: Account
    ) -> None:
        sessions = Mock()
        authenticator = SessionAuthenticator(
            repository=repository, sessions=sessions, events=events, bcrypt_rounds=4
        )
        with pytest.raises(AuthenticationFailed):
            authenticator.sign_in("john@example.com", "wrong")
        sessions.open.assert_not_called()

    def test_pending_account_cannot_sign_in(
        self,
        authenticator: SessionAuthenticator,
        registration_service: RegistrationService,
        registration_input: dict,
        user_activation_settings: RegistrationSettings,
    ) -> None:
        registration_service.register(registration_input, user_activation_settings)
        with pytest.raises(AuthenticationFailed):
            authenticator.sign_in("john@example.com", "hello")

    def test_remember_is_passed_to_store(
        self, repository: InMemoryAccountRepository, events: EventBus, account: Account
    ) -> None:
        sessions = Mock()
        sessions.open.return_value = "token"
        authenticator = SessionAuthenticator(
            repository=repository, sessions=sessions, events=events, bcrypt_rounds=4
        )
        _, context = authenticator.sign_in("john@example.com", "hello", remember=True)
        sessions.open.assert_called_once_with(account.id, True)
        assert context == SessionContext(token="token")


class TestSignOut:
    """Tests for closing sessions."""

    def test_sign_out_clears_session(
        self, authenticator: SessionAuthenticator, context: SessionContext
    ) -> None:
        authenticator.sign_out(context)
        with pytest.raises(AuthenticationFailed):
            authenticator.current_user(context)

    def test_logout_event_fires_once(
        self, authenticator: SessionAuthenticator, context: SessionContext, events: EventBus, account: Account
    ) -> None:
        listener = Mock()
        events.listen(LifecycleEvent.LOGOUT, listener)

        authenticator.sign_out(context)

        listener.assert_called_once()
        assert listener.call_args[0][0].id == account.id

    def test_second_sign_out_is_rejected_without_side_effects(
        self, authenticator: SessionAuthenticator, context: SessionContext, events: EventBus
    ) -> None:
        listener = Mock()
        events.listen(LifecycleEvent.LOGOUT, listener)
        authenticator.sign_out(context)

        with pytest.raises(AuthenticationFailed):
            authenticator.sign_out(context)
        listener.assert_called_once()

    @pytest.mark.parametrize("context", [SessionContext(), SessionContext(token="bogus"), None])
    def test_sign_out_without_session(
        self, authenticator: SessionAuthenticator, context: SessionContext | None
    ) -> None:
        with pytest.raises(AuthenticationFailed):
            authenticator.sign_out(context)  # type: ignore[arg-type]


class TestCurrentUser:
    """Tests for the current principal."""

    def test_requires_session(self, authenticator: SessionAuthenticator) -> None:
        with pytest.raises(AuthenticationFailed):
            authenticator.current_user(SessionContext())

    def test_after_get_user_attaches_data(
        self, authenticator: SessionAuthenticator, context: SessionContext, events: EventBus
    ) -> None:
        def load_avatar(account: Account) -> None:
            account.extras["avatar"] = None

        events.listen(LifecycleEvent.AFTER_GET_USER, load_avatar)

        profile = authenticator.current_user(context).public_profile()

        assert "avatar" in profile
        assert profile["avatar"] is None

    def test_session_of_missing_account(
        self, repository: InMemoryAccountRepository, events: EventBus
    ) -> None:
        sessions = InMemorySessionStore()
        authenticator = SessionAuthenticator(
            repository=repository, sessions=sessions, events=events, bcrypt_rounds=4
        )
        context = SessionContext(token=sessions.open(404))
        with pytest.raises(AuthenticationFailed):
            authenticator.current_user(context)


class TestUpdateProfile:
    """Tests for authorized profile updates."""

    def test_update_name_and_email(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        repository: InMemoryAccountRepository,
        account: Account,
    ) -> None:
        updated = authenticator.update_profile(context, {"name": "Jane Doe", "email": "Jane@Example.com"})

        assert updated.name == "Jane Doe"
        assert updated.email == "jane@example.com"
        assert repository.get(account.id).email == "jane@example.com"

    def test_update_password(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        repository: InMemoryAccountRepository,
        account: Account,
    ) -> None:
        updated = authenticator.update_profile(
            context, {"password": "world", "password_confirmation": "world"}
        )

        assert updated.email == "john@example.com"
        assert verify_password("world", repository.get(account.id).password_hash)
        # The session survives a password change
        assert authenticator.current_user(context).id == account.id

    def test_update_to_longest_password(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        repository: InMemoryAccountRepository,
        account: Account,
    ) -> None:
        password = "a" * 72
        authenticator.update_profile(context, {"password": password, "password_confirmation": password})

        assert verify_password(password, repository.get(account.id).password_hash)
        assert authenticator.sign_in("john@example.com", password)[0].id == account.id

    def test_update_password_over_byte_limit(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        repository: InMemoryAccountRepository,
        account: Account,
    ) -> None:
        password = "é" * 40
        with pytest.raises(ValidationFailed) as exc_info:
            authenticator.update_profile(context, {"password": password, "password_confirmation": password})

        assert exc_info.value.errors == {"password": "too_long"}
        assert verify_password("hello", repository.get(account.id).password_hash)

    def test_omitted_fields_unchanged(
        self, authenticator: SessionAuthenticator, context: SessionContext, account: Account
    ) -> None:
        updated = authenticator.update_profile(context, {"name": None, "email": None})
        assert updated.name == account.name
        assert updated.email == account.email

    def test_requires_session(
        self,
        authenticator: SessionAuthenticator,
        account: Account,
        repository: InMemoryAccountRepository,
    ) -> None:
        before = repository.get(account.id)
        with pytest.raises(AuthenticationFailed):
            authenticator.update_profile(
                SessionContext(), {"password": "world", "password_confirmation": "world"}
            )
        assert repository.get(account.id) == before

    def test_email_taken_by_other_account(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        registration_service: RegistrationService,
        registration_input: dict,
        open_settings: RegistrationSettings,
    ) -> None:
        registration_service.register({**registration_input, "email": "jane@example.com"}, open_settings)
        with pytest.raises(ValidationFailed) as exc_info:
            authenticator.update_profile(context, {"email": "jane@example.com"})
        assert exc_info.value.errors == {"email": "taken"}

    def test_invalid_update_does_not_mutate(
        self,
        authenticator: SessionAuthenticator,
        context: SessionContext,
        repository: InMemoryAccountRepository,
        account: Account,
    ) -> None:
        before = repository.get(account.id)
        with pytest.raises(ValidationFailed):
            authenticator.update_profile(context, {"name": "Jane", "password": "world"})
        assert repository.get(account.id) == before
