"""
Pydantic schemas for authentication API.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CheckUserRequest(BaseModel):
    email: str | None = None


class CheckUserResponse(BaseModel):
    """How an email signs in, if it has an account."""

    model_config = ConfigDict(populate_by_name=True)

    exists: bool
    has_password: bool = Field(..., serialization_alias="hasPassword")
    auth_method: str = Field(..., serialization_alias="authMethod")


class SendMagicLinkRequest(BaseModel):
    """Request to email a one-time sign-in link."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    source: str | None = None
    return_url: str | None = Field(default=None, alias="returnUrl")
    action: str | None = None


class SendMagicLinkResponse(BaseModel):
    success: bool = True
    message: str
    email: str


class ProfileInfo(BaseModel):
    """Caller's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Profile ID")
    email: str = Field(..., description="Email address")
    full_name: str | None = Field(None, description="Display name")
    role: str = Field(..., description="user, admin or moderator")
    tokens_available: int = 0
    tokens_total_purchased: int = 0
    tokens_total_used: int = 0
    auth_provider: str | None = None
    created_at: datetime | None = None
    last_active_at: datetime | None = None


class ProfileResponse(BaseModel):
    """``exists`` is false until the profile has been created."""

    exists: bool
    profile: ProfileInfo | None = None


class CreateProfileRequest(BaseModel):
    full_name: str | None = Field(default=None, max_length=200)
    auth_provider: str | None = None


class CreateProfileResponse(BaseModel):
    success: bool = True
    message: str
    profile: ProfileInfo


class UpdateProfileRequest(BaseModel):
    full_name: str | None = Field(default=None, max_length=200)


class SetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str | None = Field(default=None, max_length=128)
    confirm_password: str | None = Field(default=None, max_length=128, alias="confirmPassword")


class SetPasswordResponse(BaseModel):
    success: bool = True
    message: str


class PasswordStatusResponse(BaseModel):
    """Whether the caller can sign in with a password."""

    model_config = ConfigDict(populate_by_name=True)

    has_password: bool = Field(..., serialization_alias="hasPassword")
    auth_method: str = Field(..., serialization_alias="authMethod")
    email: str
