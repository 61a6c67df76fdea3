"""User model."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import Role
from src.models.mixins import TimestampMixin
from src.services import credentials


class User(Base, TimestampMixin):
    """A person or organization that can log in, post, comment and like."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="userrole", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    description = Column(Text, nullable=True)
    proof_image = Column(String(1024), nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_date = Column(DateTime(timezone=True), nullable=True)

    # Payout metadata
    account_number = Column(String(64), default="", nullable=False)
    account_title = Column(String(255), default="", nullable=False)
    bank_name = Column(String(255), default="", nullable=False)

    # Relationships
    posts = relationship("Post", back_populates="creator", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    liked_posts = relationship("Post", secondary="post_likes", back_populates="likes")

    @property
    def password(self) -> str:
        """Only the hash is ever stored or readable."""
        return self.password_hash

    @password.setter
    def password(self, plaintext: str) -> None:
        # Hashing happens on assignment only, so re-saving never re-hashes.
        self.password_hash = credentials.hash_password(plaintext)

    @property
    def account_details(self) -> dict[str, str]:
        """Bank fields grouped the way clients send them."""
        return {
            "account_number": self.account_number or "",
            "account_title": self.account_title or "",
            "bank_name": self.bank_name or "",
        }

    @account_details.setter
    def account_details(self, details: dict[str, str | None]) -> None:
        for key in ("account_number", "account_title", "bank_name"):
            if details.get(key) is not None:
                setattr(self, key, details[key])
