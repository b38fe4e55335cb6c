"""
API v1 routes.

Defines REST endpoints for the account lifecycle. Routes only translate
HTTP to domain calls: domain errors are rendered by the handlers in
``src.api.errors``.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse

from src.api.dependencies import (
    get_activation_service,
    get_app_settings,
    get_password_reset_service,
    get_registration_service,
    get_registration_settings,
    get_session_authenticator,
    get_session_context,
)
from src.api.models import (
    EmailRequest,
    ErrorResponse,
    ProfileResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SignInRequest,
    StatusResponse,
    UpdateProfileRequest,
)
from src.config.settings import Settings
from src.domain.activation import ActivationService
from src.domain.password_reset import PasswordResetService
from src.domain.registration import RegistrationService, RegistrationSettings
from src.domain.session import SessionAuthenticator, SessionContext

router = APIRouter(prefix="/auth", tags=["v1"])

_VALIDATION = {400: {"model": ErrorResponse, "description": "Validation failed"}}
_FORBIDDEN = {403: {"model": ErrorResponse, "description": "Authentication failed"}}


def _set_session_cookie(
    response: Response, context: SessionContext, settings: Settings, remember: bool = False
) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        context.token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.remember_ttl_seconds if remember else None,
        path="/",
    )


@router.post(
    "/register",
    response_model=ProfileResponse,
    responses={
        **_VALIDATION,
        403: {"model": ErrorResponse, "description": "Registration disabled"},
    },
    summary="Register a new user",
    description="Create an account. Depending on the activation mode the account is "
    "active immediately (and signed in) or an activation code is emailed.",
)
def register(
    request_data: RegisterRequest,
    response: Response,
    registration_settings: RegistrationSettings = Depends(get_registration_settings),
    settings: Settings = Depends(get_app_settings),
    service: RegistrationService = Depends(get_registration_service),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> dict:
    account = service.register(request_data.model_dump(), registration_settings)
    if account.is_activated:
        context = authenticator.start_session(account)
        _set_session_cookie(response, context, settings)
    return account.public_profile()


@router.get(
    "/activate",
    response_model=StatusResponse,
    responses={**_VALIDATION, 302: {"description": "Redirect to the configured URL"}},
    summary="Activate an account",
    description="Redeem an activation code. Redirects when an activation redirect is configured.",
)
def activate(
    code: str = "",
    registration_settings: RegistrationSettings = Depends(get_registration_settings),
    service: ActivationService = Depends(get_activation_service),
):
    outcome = service.activate(code, registration_settings)
    if outcome.redirect_url:
        return RedirectResponse(outcome.redirect_url, status_code=302)
    return StatusResponse()


@router.post(
    "/resend-activation",
    response_model=StatusResponse,
    summary="Resend the activation email",
    description="Always succeeds; a new code is sent only to pending accounts.",
)
def resend_activation(
    request_data: EmailRequest,
    service: ActivationService = Depends(get_activation_service),
) -> StatusResponse:
    service.resend(request_data.email)
    return StatusResponse()


@router.post(
    "/send-reset-email",
    response_model=StatusResponse,
    summary="Send a password reset email",
    description="Always succeeds; the response does not reveal whether the email exists.",
)
def send_reset_email(
    request_data: EmailRequest,
    service: PasswordResetService = Depends(get_password_reset_service),
) -> StatusResponse:
    service.request_reset(request_data.email)
    return StatusResponse()


@router.post(
    "/reset-password",
    response_model=StatusResponse,
    responses=_VALIDATION,
    summary="Reset a password",
)
def reset_password(
    request_data: ResetPasswordRequest,
    service: PasswordResetService = Depends(get_password_reset_service),
) -> StatusResponse:
    service.reset_password(
        request_data.code, request_data.password, request_data.password_confirmation
    )
    return StatusResponse()


@router.post(
    "/signin",
    response_model=ProfileResponse,
    responses=_FORBIDDEN,
    summary="Sign in with email and password",
)
def signin(
    request_data: SignInRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> dict:
    account, context = authenticator.sign_in(
        request_data.login, request_data.password, request_data.remember
    )
    _set_session_cookie(response, context, settings, remember=request_data.remember)
    return account.public_profile()


@router.get(
    "/signout",
    response_model=StatusResponse,
    responses=_FORBIDDEN,
    summary="Sign out",
)
def signout(
    response: Response,
    context: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_app_settings),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> StatusResponse:
    authenticator.sign_out(context)
    response.delete_cookie(settings.session_cookie_name, path="/")
    return StatusResponse()


@router.get(
    "/user",
    response_model=ProfileResponse,
    responses=_FORBIDDEN,
    summary="Get the signed-in user",
)
def current_user(
    context: SessionContext = Depends(get_session_context),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> dict:
    return authenticator.current_user(context).public_profile()


@router.post(
    "/user",
    response_model=ProfileResponse,
    responses={**_VALIDATION, **_FORBIDDEN},
    summary="Update the signed-in user",
)
def update_user(
    request_data: UpdateProfileRequest,
    context: SessionContext = Depends(get_session_context),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> dict:
    return authenticator.update_profile(context, request_data.model_dump()).public_profile()
