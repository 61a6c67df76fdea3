"""SQLAlchemy models."""

from src.models.comment import Comment
from src.models.enums import Role
from src.models.post import Post, post_likes
from src.models.user import User

__all__ = [
    "User",
    "Role",
    "Post",
    "post_likes",
    "Comment",
]
