"""Authorization decisions for users, posts and comments.

Every predicate here is pure: it looks at the acting identity and the
already-loaded target and answers yes or no. Loading the target (and
raising NotFound when it is missing) is the caller's job, so a missing
entity is never reported as a permission problem.
"""

import logging
from dataclasses import dataclass

from src.config import Settings, get_settings
from src.models.comment import Comment
from src.models.enums import Role
from src.models.post import Post
from src.models.user import User
from src.services.errors import Forbidden

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    id: int
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=Role(user.role))


@dataclass(frozen=True)
class AuthorizationPolicy:
    """Optional rules, all off unless configured.

    admin_can_manage_posts: admins may edit and delete any post.
    organization_only_posts: only organizations (and admins) may publish.
    open_user_mutation: anyone authenticated may edit or delete any account.
    allow_admin_registration: the public register endpoint accepts the admin role.
    """

    admin_can_manage_posts: bool = False
    organization_only_posts: bool = False
    open_user_mutation: bool = False
    allow_admin_registration: bool = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AuthorizationPolicy":
        settings = settings or get_settings()
        return cls(
            admin_can_manage_posts=settings.admin_can_manage_posts,
            organization_only_posts=settings.organization_only_posts,
            open_user_mutation=settings.open_user_mutation,
            allow_admin_registration=settings.allow_admin_registration,
        )

    def can_register(self, role: Role) -> bool:
        """Whether an account with this role may be created through registration."""
        if role == Role.ADMIN:
            return self.allow_admin_registration
        return True

    def can_publish(self, actor: Actor) -> bool:
        """Whether the actor may create posts at all."""
        if self.organization_only_posts:
            return actor.role.can_publish_restricted()
        return True

    def can_mutate_post(self, actor: Actor, post: Post) -> bool:
        if actor.id == post.created_by:
            return True
        return self.admin_can_manage_posts and actor.role.can_moderate()

    def can_mutate_comment(self, actor: Actor, comment: Comment) -> bool:
        return actor.id == comment.user_id or actor.role.can_moderate()

    def can_mutate_user(self, actor: Actor, user: User) -> bool:
        if self.open_user_mutation:
            return True
        return actor.id == user.id or actor.role.can_moderate()

    def can_mutate(self, actor: Actor, target: User | Post | Comment) -> bool:
        """Dispatch on the target's entity type."""
        if isinstance(target, Post):
            return self.can_mutate_post(actor, target)
        if isinstance(target, Comment):
            return self.can_mutate_comment(actor, target)
        if isinstance(target, User):
            return self.can_mutate_user(actor, target)
        raise TypeError(f"No authorization rule for {type(target).__name__}")

    def ensure_can_mutate(
        self, actor: Actor, target: User | Post | Comment, message: str = "Access denied."
    ) -> None:
        """Raise Forbidden unless ``can_mutate`` allows the operation."""
        if not self.can_mutate(actor, target):
            logger.warning(
                f"Denied user {actor.id} ({actor.role}) on {type(target).__name__} {target.id}"
            )
            raise Forbidden(message)
