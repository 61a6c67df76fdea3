"""Content lifecycle: posts, likes and comments."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.models.comment import Comment
from src.models.post import Post
from src.models.user import User
from src.services.authorization import Actor, AuthorizationPolicy
from src.services.errors import Conflict, Forbidden, NotFound, ValidationError, boundary
from src.services.image_host import ImageFile, ImageHost
from src.services.repository import EntityRepository

logger = logging.getLogger(__name__)

# The image is replaced only through an upload.
POST_MUTABLE_FIELDS = frozenset({"title", "description"})

POST_NOT_FOUND = "Post not found."
COMMENT_NOT_FOUND = "Comment not found."


class ContentService:
    """Service for post and comment operations."""

    def __init__(
        self,
        db: Session,
        image_host: ImageHost,
        policy: AuthorizationPolicy | None = None,
    ):
        self.db = db
        self.repo = EntityRepository(db)
        self.image_host = image_host
        self.policy = policy or AuthorizationPolicy.from_settings()

    def _get_post(self, post_id: int) -> Post:
        post = self.repo.find_by_id(Post, post_id)
        if not post:
            raise NotFound(POST_NOT_FOUND)
        return post

    def _get_comment(self, comment_id: int) -> Comment:
        comment = self.repo.find_by_id(Comment, comment_id)
        if not comment:
            raise NotFound(COMMENT_NOT_FOUND)
        return comment

    # Posts

    @boundary("Failed to fetch posts.")
    def list_posts(self) -> list[Post]:
        return self.repo.find_many(Post, order_by=Post.id.desc())

    @boundary("Failed to fetch post.")
    def get_post(self, post_id: int) -> Post:
        return self._get_post(post_id)

    @boundary("Failed to create post.")
    def create_post(
        self,
        actor: Actor,
        title: str | None,
        description: str | None,
        image_file: ImageFile | None = None,
    ) -> Post:
        if not title or not description:
            raise ValidationError("Missing fields.")
        if not self.policy.can_publish(actor):
            raise Forbidden("Only organizations can create posts.")

        image_url = ""
        if image_file is not None:
            image_url = self.image_host.upload_file(image_file)

        post = Post(title=title, description=description, image=image_url, created_by=actor.id)
        self.repo.create(post)
        logger.info(f"User {actor.id} created post {post.id}")
        return post

    @boundary("Failed to update post.")
    def update_post(
        self,
        actor: Actor,
        post_id: int,
        patch: dict[str, Any],
        image_file: ImageFile | None = None,
    ) -> Post:
        post = self._get_post(post_id)
        self.policy.ensure_can_mutate(actor, post, "You are not authorized to update this post.")

        rejected = sorted(set(patch) - POST_MUTABLE_FIELDS)
        if rejected:
            raise ValidationError(f"Fields cannot be updated: {', '.join(rejected)}.")
        if any(not str(value).strip() for value in patch.values()):
            raise ValidationError("Title and description cannot be empty.")

        if image_file is not None:
            post.image = self.image_host.upload_file(image_file)
        for field, value in patch.items():
            setattr(post, field, value)

        return self.repo.save(post)

    @boundary("Failed to delete post.")
    def delete_post(self, actor: Actor, post_id: int) -> None:
        post = self._get_post(post_id)
        self.policy.ensure_can_mutate(actor, post)

        self.repo.delete(post)
        logger.info(f"User {actor.id} deleted post {post_id}")

    @boundary("Error updating like status.")
    def toggle_like(self, post_id: int, user_id: int) -> tuple[Post, bool]:
        """Add the user to the post's likes, or remove them if already there.

        Returns the post and whether the user now likes it.
        """
        post = self._get_post(post_id)
        user = self.repo.find_by_id(User, user_id)
        if not user:
            raise NotFound("User not found.")

        liked = user not in post.likes
        if liked:
            post.likes.append(user)
        else:
            post.likes.remove(user)

        return self.repo.save(post), liked

    # Comments

    @boundary("Failed to create comment.")
    def create_comment(self, post_id: int, actor: Actor, text: str | None) -> Comment:
        if not text:
            raise ValidationError("Comment text is required.")
        self._get_post(post_id)

        comment = Comment(text=text, post_id=post_id, user_id=actor.id)
        return self.repo.create(comment)

    @boundary("Failed to retrieve comments.")
    def list_comments(self, post_id: int) -> list[Comment]:
        return self.repo.find_many(Comment, order_by=Comment.id, post_id=post_id)

    @boundary("Failed to update comment.")
    def update_comment(
        self, actor: Actor, post_id: int, comment_id: int, text: str | None
    ) -> Comment:
        comment = self._get_comment(comment_id)
        if comment.post_id != post_id:
            raise Conflict("Comment does not belong to this post")
        self.policy.ensure_can_mutate(actor, comment)
        if not text:
            raise ValidationError("Comment text is required.")

        comment.text = text
        return self.repo.save(comment)

    @boundary("Failed to delete comment.")
    def delete_comment(self, actor: Actor, comment_id: int) -> None:
        comment = self._get_comment(comment_id)
        self.policy.ensure_can_mutate(actor, comment)

        self.repo.delete(comment)
