"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request fields are optional on purpose: presence and format are checked by
the domain validators so that every field error is reported in one
``validation_failed`` response.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: str | None = Field(None, description="Email address used to sign in")
    name: str | None = Field(None, description="Display name")
    password: str | None = Field(None, description="Password (at least 4 characters, at most 72 UTF-8 bytes)")
    password_confirmation: str | None = Field(None, description="Must equal password")


class EmailRequest(BaseModel):
    """Request model for endpoints keyed by an email address."""

    email: str | None = None


class ResetPasswordRequest(BaseModel):
    """Request model for redeeming a password reset code."""

    code: str | None = Field(None, description="Reset code received by email")
    password: str | None = Field(None, description="New password")
    password_confirmation: str | None = Field(None, description="Optional, must equal password")


class SignInRequest(BaseModel):
    """Request model for credential sign-in."""

    login: str | None = Field(None, description="Account email")
    password: str | None = None
    remember: bool = Field(False, description="Keep the session beyond the browser session")


class UpdateProfileRequest(BaseModel):
    """Request model for profile updates. Omitted fields are left unchanged."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None


class ProfileResponse(BaseModel):
    """Public profile. Extra keys come from afterGetUser listeners."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    email: str
    is_activated: bool
    activated_at: str | None = None
    created_at: str | None = None


class StatusResponse(BaseModel):
    """Generic success payload."""

    status: Literal["success"] = "success"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    status: str
    message: str
    errors: dict[str, str] | None = None
