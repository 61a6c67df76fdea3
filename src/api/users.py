"""User and authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.api.dependencies import (
    get_current_actor,
    get_current_user,
    get_identity_service,
    read_image,
)
from src.models.user import User
from src.schemas.common import ApiResponse
from src.schemas.user import (
    AuthEnvelope,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserEnvelope,
    UserListEnvelope,
    UserLogin,
    UserResponse,
)
from src.services.authorization import Actor
from src.services.identity import IdentityService

router = APIRouter(prefix="/api/auth", tags=["auth"])

Identity = Annotated[IdentityService, Depends(get_identity_service)]


def role_label(role: str) -> str:
    """'organization' -> 'Organization'."""
    return str(role).capitalize()


@router.post("/register", response_model=AuthEnvelope, status_code=status.HTTP_201_CREATED)
async def register(
    service: Identity,
    role: Annotated[str | None, Form()] = None,
    name: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    proof_image: Annotated[UploadFile | None, File(alias="proofImage")] = None,
):
    """Register a user or organization."""
    user, token = service.register(
        role=role,
        name=name,
        email=email,
        password=password,
        description=description,
        proof_file=read_image(proof_image),
    )
    return AuthEnvelope(
        message=f"{role_label(user.role)} registered successfully.",
        data=UserResponse.model_validate(user),
        token=token,
    )


@router.post("/login", response_model=AuthEnvelope)
async def login(credentials: UserLogin, service: Identity):
    """Login with email and password."""
    user, token = service.login(credentials.email, credentials.password)
    return AuthEnvelope(
        message=f"{role_label(user.role)} logged in successfully.",
        data=UserResponse.model_validate(user),
        token=token,
    )


@router.get("/check-auth", response_model=UserEnvelope)
async def check_auth(current_user: Annotated[User, Depends(get_current_user)]):
    """Get current user information."""
    return UserEnvelope(
        message="Authenticated User",
        data=UserResponse.model_validate(current_user),
    )


@router.get("/users", response_model=UserListEnvelope)
async def list_users(service: Identity):
    """Get all users and organizations."""
    users = service.list_users()
    return UserListEnvelope(data=[UserResponse.model_validate(u) for u in users])


@router.post("/forgot-password", response_model=ApiResponse)
async def forgot_password(payload: ForgotPasswordRequest, service: Identity):
    """Mail a password reset code."""
    service.forgot_password(payload.email)
    return ApiResponse(message="OTP sent to your email address.")


@router.post("/reset-password", response_model=ApiResponse)
async def reset_password(payload: ResetPasswordRequest, service: Identity):
    """Reset a password with a mailed code."""
    service.reset_password(payload.email, payload.otp, payload.new_password)
    return ApiResponse(message="Password reset successfully.")


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(user_id: int, service: Identity):
    """Get a user or organization by ID."""
    return UserEnvelope(data=UserResponse.model_validate(service.get_user(user_id)))


@router.put("/{user_id}/edit", response_model=UserEnvelope)
async def update_user(
    user_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Identity,
    name: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    account_number: Annotated[str | None, Form()] = None,
    account_title: Annotated[str | None, Form()] = None,
    bank_name: Annotated[str | None, Form()] = None,
    proof_image: Annotated[UploadFile | None, File(alias="proofImage")] = None,
):
    """Update a user or organization (self or admin)."""
    patch = {
        field: value
        for field, value in (
            ("name", name),
            ("email", email),
            ("password", password),
            ("description", description),
        )
        if value is not None
    }
    account_details = {
        "account_number": account_number,
        "account_title": account_title,
        "bank_name": bank_name,
    }
    if any(value is not None for value in account_details.values()):
        patch["account_details"] = account_details

    user = service.update(actor, user_id, patch, read_image(proof_image))
    return UserEnvelope(
        message=f"{role_label(user.role)} updated successfully.",
        data=UserResponse.model_validate(user),
    )


@router.delete("/{user_id}/delete", response_model=ApiResponse)
async def delete_user(
    user_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    service: Identity,
):
    """Delete a user or organization (self or admin)."""
    role = service.remove(actor, user_id)
    return ApiResponse(message=f"{role_label(role)} deleted successfully.")
