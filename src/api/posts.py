"""Feed post API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.api.dependencies import get_content_service, get_current_actor, read_image
from src.schemas.common import ApiResponse
from src.schemas.post import (
    LikeEnvelope,
    LikeStatus,
    PostEnvelope,
    PostListEnvelope,
    PostResponse,
)
from src.services.authorization import Actor
from src.services.content import ContentService

router = APIRouter(prefix="/api/feed", tags=["feed"])

Content = Annotated[ContentService, Depends(get_content_service)]
CurrentActor = Annotated[Actor, Depends(get_current_actor)]


@router.get("", response_model=PostListEnvelope)
async def list_posts(service: Content):
    """Get all posts, newest first."""
    posts = service.list_posts()
    return PostListEnvelope(data=[PostResponse.model_validate(p) for p in posts])


@router.post("/post", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    actor: CurrentActor,
    service: Content,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
):
    """Create a new post owned by the current user."""
    post = service.create_post(actor, title, description, read_image(image))
    return PostEnvelope(
        message="Post created successfully.",
        data=PostResponse.model_validate(post),
    )


@router.post("/posts/like/{post_id}", response_model=LikeEnvelope)
async def toggle_like(post_id: int, actor: CurrentActor, service: Content):
    """Like the post, or remove the like if the current user already likes it."""
    post, liked = service.toggle_like(post_id, actor.id)
    return LikeEnvelope(
        message="Like status updated",
        data=LikeStatus(post_id=post.id, liked=liked, likes=post.like_ids),
    )


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(post_id: int, service: Content):
    """Get a specific post."""
    return PostEnvelope(data=PostResponse.model_validate(service.get_post(post_id)))


@router.put("/{post_id}/edit", response_model=PostEnvelope)
async def update_post(
    post_id: int,
    actor: CurrentActor,
    service: Content,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
):
    """Update a post (owner only)."""
    patch = {
        field: value
        for field, value in (("title", title), ("description", description))
        if value is not None
    }
    post = service.update_post(actor, post_id, patch, read_image(image))
    return PostEnvelope(
        message="Post updated successfully.",
        data=PostResponse.model_validate(post),
    )


@router.delete("/{post_id}/delete", response_model=ApiResponse)
async def delete_post(post_id: int, actor: CurrentActor, service: Content):
    """Delete a post (owner only)."""
    service.delete_post(actor, post_id)
    return ApiResponse(message="Post deleted successfully.")
