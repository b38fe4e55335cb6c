"""
Exception handlers - Map domain errors to HTTP responses.

Every domain error becomes a JSON body ``{"status", "message"[, "errors"]}``
with the status code of its kind. Malformed request bodies are reported
as ``validation_failed`` with HTTP 400, like domain validation errors.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    AuthenticationFailed,
    AuthError,
    RegistrationDisabled,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: list[tuple[type[AuthError], int]] = [
    (ValidationFailed, status.HTTP_400_BAD_REQUEST),
    (RegistrationDisabled, status.HTTP_403_FORBIDDEN),
    (AuthenticationFailed, status.HTTP_403_FORBIDDEN),
]


def status_code_for(exc: AuthError) -> int:
    for kind, code in _STATUS_CODES:
        if isinstance(exc, kind):
            return code
    return status.HTTP_400_BAD_REQUEST


def error_body(exc: AuthError) -> dict:
    body: dict = {"status": exc.status, "message": exc.message}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    return body


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    code = status_code_for(exc)
    logger.info("%s %s -> %d %s", request.method, request.url.path, code, exc.status)
    return JSONResponse(status_code=code, content=error_body(exc))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        name = ".".join(loc) or "body"
        errors.setdefault(name, "required" if error.get("type") == "missing" else "invalid")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationFailed(errors)),
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
