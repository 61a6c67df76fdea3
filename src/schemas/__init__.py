"""Pydantic schemas for API requests and responses."""

from src.schemas.comment import (
    CommentCreate,
    CommentEnvelope,
    CommentListEnvelope,
    CommentResponse,
    CommentUpdate,
)
from src.schemas.common import ApiResponse
from src.schemas.post import LikeEnvelope, PostEnvelope, PostListEnvelope, PostResponse
from src.schemas.user import (
    AuthEnvelope,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserEnvelope,
    UserListEnvelope,
    UserLogin,
    UserResponse,
)

__all__ = [
    "ApiResponse",
    "UserLogin",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "UserEnvelope",
    "AuthEnvelope",
    "UserListEnvelope",
    "PostResponse",
    "PostEnvelope",
    "PostListEnvelope",
    "LikeEnvelope",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentEnvelope",
    "CommentListEnvelope",
]
