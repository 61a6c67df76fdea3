"""Post model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin

# Membership set: the composite primary key keeps a user from liking twice.
post_likes = Table(
    "post_likes",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Post(Base, TimestampMixin):
    """Feed post owned by the user who created it."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(1024), default="", nullable=False)
    created_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    creator = relationship("User", back_populates="posts")
    likes = relationship("User", secondary=post_likes, back_populates="liked_posts")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")

    @property
    def like_ids(self) -> list[int]:
        """IDs of the users who like this post."""
        return [user.id for user in self.likes]
