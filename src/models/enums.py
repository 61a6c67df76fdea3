"""Enums for model fields."""

from enum import StrEnum


class Role(StrEnum):
    """Account roles. Fixed at registration."""

    USER = "user"
    ORGANIZATION = "organization"
    ADMIN = "admin"

    def requires_proof(self) -> bool:
        """Check if this role must supply a description and proof image."""
        return self == Role.ORGANIZATION

    def can_moderate(self) -> bool:
        """Check if this role may act on content it does not own."""
        return self == Role.ADMIN

    def can_publish_restricted(self) -> bool:
        """Check if this role may post when posting is limited to organizations."""
        return self in (Role.ORGANIZATION, Role.ADMIN)
