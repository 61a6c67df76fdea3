"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.common import ApiResponse


class PostCreator(BaseModel):
    """Owner summary embedded in post responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    image: str
    created_by: int
    creator: PostCreator | None = None
    likes: list[int] = Field(default_factory=list, validation_alias="like_ids")
    created_at: datetime
    updated_at: datetime


class LikeStatus(BaseModel):
    """Like membership after a toggle."""

    post_id: int
    liked: bool
    likes: list[int]


class PostEnvelope(ApiResponse):
    data: PostResponse


class PostListEnvelope(ApiResponse):
    data: list[PostResponse]


class LikeEnvelope(ApiResponse):
    data: LikeStatus
