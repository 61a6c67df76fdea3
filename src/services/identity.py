"""Identity lifecycle: registration, login, profile changes and password recovery."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.models.enums import Role
from src.models.user import User
from src.services.authorization import Actor, AuthorizationPolicy
from src.services.credentials import create_access_token, verify_password
from src.services.errors import (
    Conflict,
    Forbidden,
    InvalidOrExpiredOtp,
    NotFound,
    Unauthorized,
    ValidationError,
    boundary,
)
from src.services.image_host import ImageFile, ImageHost
from src.services.mailer import MailTransport
from src.services.otp import OtpLedger
from src.services.repository import EntityRepository

logger = logging.getLogger(__name__)

# Fields a profile update may touch. The proof image changes only through an upload.
USER_MUTABLE_FIELDS = frozenset({"name", "email", "password", "description", "account_details"})

USER_NOT_FOUND = "User or organization not found."
DUPLICATE_IDENTITY = "Name or email already exists."


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class IdentityService:
    """Service for account lifecycle operations."""

    def __init__(
        self,
        db: Session,
        otp_ledger: OtpLedger,
        image_host: ImageHost,
        mail_transport: MailTransport,
        policy: AuthorizationPolicy | None = None,
    ):
        self.db = db
        self.repo = EntityRepository(db)
        self.otp_ledger = otp_ledger
        self.image_host = image_host
        self.mail_transport = mail_transport
        self.policy = policy or AuthorizationPolicy.from_settings()

    @boundary("Registration failed.")
    def register(
        self,
        role: str | None,
        name: str | None,
        email: str | None,
        password: str | None,
        description: str | None = None,
        proof_file: ImageFile | None = None,
    ) -> tuple[User, str]:
        """Create an account and return it with a fresh access token."""
        if not role or not email or not password:
            raise ValidationError("Role, email, and password are required.")

        try:
            parsed_role = Role(role)
        except ValueError as e:
            raise ValidationError("Invalid role.") from e
        if not self.policy.can_register(parsed_role):
            raise Forbidden(f"Cannot register with role '{parsed_role}'.")

        if parsed_role.requires_proof() and (
            is_blank(name) or is_blank(description) or proof_file is None
        ):
            raise ValidationError(
                "Name, description, and proof image are required for organizations."
            )
        if is_blank(name):
            raise ValidationError("Name is required.")

        # Fast path only; the unique index is authoritative.
        if self.repo.find_one(User, email=email):
            raise Conflict("Email already exists.")

        proof_image_url = ""
        if proof_file is not None:
            proof_image_url = self.image_host.upload_file(proof_file)

        user = User(
            role=parsed_role,
            name=name,
            email=email,
            password=password,
            description=description if parsed_role.requires_proof() else None,
            proof_image=proof_image_url,
        )
        self.repo.create(user, DUPLICATE_IDENTITY)
        logger.info(f"Registered {parsed_role} {user.id} <{email}>")

        return user, create_access_token(user.id, parsed_role)

    @boundary("Login failed.")
    def login(self, email: str | None, password: str | None) -> tuple[User, str]:
        """Check credentials. Unknown email and wrong password look the same."""
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.repo.find_one(User, email=email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for <{email}>")
            raise Unauthorized("Invalid email or password.")

        return user, create_access_token(user.id, user.role)

    @boundary("Failed to fetch users.")
    def list_users(self) -> list[User]:
        return self.repo.find_many(User, order_by=User.id)

    @boundary("Failed to fetch user or organization.")
    def get_user(self, user_id: int) -> User:
        user = self.repo.find_by_id(User, user_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        return user

    @boundary("Update failed.")
    def update(
        self,
        actor: Actor,
        target_id: int,
        patch: dict[str, Any],
        proof_file: ImageFile | None = None,
    ) -> User:
        """Apply an allow-listed patch to an account."""
        user = self.repo.find_by_id(User, target_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        self.policy.ensure_can_mutate(actor, user)

        rejected = sorted(set(patch) - USER_MUTABLE_FIELDS)
        if rejected:
            raise ValidationError(f"Fields cannot be updated: {', '.join(rejected)}.")
        required = ["name", "email", "password"]
        if Role(user.role).requires_proof():
            required.append("description")
        for field in required:
            if field in patch and is_blank(patch[field]):
                raise ValidationError(f"{field.capitalize()} cannot be empty.")

        if proof_file is not None and Role(user.role).requires_proof():
            user.proof_image = self.image_host.upload_file(proof_file)

        for field, value in patch.items():
            setattr(user, field, value)

        return self.repo.save(user, DUPLICATE_IDENTITY)

    @boundary("Deletion failed.")
    def remove(self, actor: Actor, target_id: int) -> Role:
        """Hard-delete an account along with its posts and comments.

        Returns the removed account's role.
        """
        user = self.repo.find_by_id(User, target_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        self.policy.ensure_can_mutate(actor, user)

        role = Role(user.role)
        self.repo.delete(user)
        logger.info(f"Deleted {role} {target_id} (by user {actor.id})")
        return role

    @boundary("Failed to send OTP.")
    def forgot_password(self, email: str | None) -> None:
        """Mail a reset code to a registered address."""
        if not email:
            raise ValidationError("Email is required.")

        # TODO: answer identically for unknown addresses once product signs off
        # on hiding account existence here.
        if not self.repo.find_one(User, email=email):
            raise NotFound("User with this email does not exist.")

        code = self.otp_ledger.issue(email)
        logger.info(f"Issued password reset code for <{email}>")
        self.mail_transport.send(
            to=email,
            subject="Password Reset OTP",
            body=f"Your OTP for password reset is: {code}",
        )

    @boundary("Failed to reset password.")
    def reset_password(
        self, email: str | None, code: str | None, new_password: str | None
    ) -> User:
        """Consume a reset code and set a new password."""
        if not email or not code or not new_password:
            raise ValidationError("Email, OTP, and new password are required.")

        if not self.otp_ledger.consume(email, code):
            raise InvalidOrExpiredOtp()

        user = self.repo.find_one(User, email=email)
        if not user:
            raise NotFound("User with this email does not exist.")

        user.password = new_password
        self.repo.save(user)
        logger.info(f"Password reset for user {user.id}")
        return user
