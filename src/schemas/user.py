"""User and authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.enums import Role
from src.schemas.common import ApiResponse


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset code by email."""

    email: EmailStr | None = Field(None, max_length=255)


class ResetPasswordRequest(BaseModel):
    """Reset a password with a previously mailed code."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr | None = Field(None, max_length=255)
    otp: str | None = Field(None, max_length=6)
    new_password: str | None = Field(None, alias="newPassword", max_length=128)


class AccountDetails(BaseModel):
    """Payout bank details."""

    account_number: str = ""
    account_title: str = ""
    bank_name: str = ""


class UserResponse(BaseModel):
    """User information response. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    description: str | None
    proof_image: str | None
    is_verified: bool
    verification_date: datetime | None
    account_details: AccountDetails
    created_at: datetime


class UserEnvelope(ApiResponse):
    data: UserResponse


class AuthEnvelope(UserEnvelope):
    """Registration and login response."""

    token: str


class UserListEnvelope(ApiResponse):
    data: list[UserResponse]
