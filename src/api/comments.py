"""Comment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_content_service, get_current_actor
from src.schemas.comment import (
    CommentCreate,
    CommentEnvelope,
    CommentListEnvelope,
    CommentResponse,
    CommentUpdate,
)
from src.schemas.common import ApiResponse
from src.services.authorization import Actor
from src.services.content import ContentService

router = APIRouter(prefix="/api/comments", tags=["comments"])

Content = Annotated[ContentService, Depends(get_content_service)]
CurrentActor = Annotated[Actor, Depends(get_current_actor)]


@router.post("/{post_id}", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: int, payload: CommentCreate, actor: CurrentActor, service: Content
):
    """Comment on a post."""
    comment = service.create_comment(post_id, actor, payload.text)
    return CommentEnvelope(
        message="Comment created successfully.",
        data=CommentResponse.model_validate(comment),
    )


@router.get("/{post_id}", response_model=CommentListEnvelope)
async def list_comments(post_id: int, service: Content):
    """Get all comments for a post."""
    comments = service.list_comments(post_id)
    return CommentListEnvelope(data=[CommentResponse.model_validate(c) for c in comments])


@router.put("/{post_id}/{comment_id}", response_model=CommentEnvelope)
async def update_comment(
    post_id: int,
    comment_id: int,
    payload: CommentUpdate,
    actor: CurrentActor,
    service: Content,
):
    """Update a comment (author or admin)."""
    comment = service.update_comment(actor, post_id, comment_id, payload.text)
    return CommentEnvelope(
        message="Comment updated successfully.",
        data=CommentResponse.model_validate(comment),
    )


@router.delete("/{comment_id}", response_model=ApiResponse)
async def delete_comment(comment_id: int, actor: CurrentActor, service: Content):
    """Delete a comment (author or admin)."""
    service.delete_comment(actor, comment_id)
    return ApiResponse(message="Comment deleted successfully.")
