"""Comment schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.common import ApiResponse


class CommentCreate(BaseModel):
    """Create a comment on a post."""

    text: str | None = Field(None, max_length=5000)


class CommentUpdate(BaseModel):
    """Replace a comment's text."""

    text: str | None = Field(None, max_length=5000)


class CommentResponse(BaseModel):
    """Comment response with the author's name resolved."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    post_id: int
    user_id: int
    author_name: str | None = None
    created_at: datetime
    updated_at: datetime


class CommentEnvelope(ApiResponse):
    data: CommentResponse


class CommentListEnvelope(ApiResponse):
    data: list[CommentResponse]
