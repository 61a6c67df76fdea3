"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.authorization import Actor, AuthorizationPolicy
from src.services.content import ContentService
from src.services.credentials import decode_access_token
from src.services.errors import Unauthorized
from src.services.identity import IdentityService
from src.services.image_host import ImageFile, ImageHost, get_image_host
from src.services.mailer import MailTransport, get_mail_transport
from src.services.otp import OtpLedger, get_otp_ledger

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise Unauthorized("Not authenticated")

    claims = decode_access_token(credentials.credentials)

    user = db.get(User, claims.id)
    if user is None:
        raise Unauthorized("User not found")

    return user


def get_current_actor(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Actor:
    """Get the acting identity for authorization checks."""
    return Actor.from_user(current_user)


def get_authorization_policy() -> AuthorizationPolicy:
    """Get the configured authorization policy."""
    return AuthorizationPolicy.from_settings()


def get_identity_service(
    db: Annotated[Session, Depends(get_db)],
    otp_ledger: Annotated[OtpLedger, Depends(get_otp_ledger)],
    image_host: Annotated[ImageHost, Depends(get_image_host)],
    mail_transport: Annotated[MailTransport, Depends(get_mail_transport)],
    policy: Annotated[AuthorizationPolicy, Depends(get_authorization_policy)],
) -> IdentityService:
    """Get identity service with dependencies."""
    return IdentityService(db, otp_ledger, image_host, mail_transport, policy)


def get_content_service(
    db: Annotated[Session, Depends(get_db)],
    image_host: Annotated[ImageHost, Depends(get_image_host)],
    policy: Annotated[AuthorizationPolicy, Depends(get_authorization_policy)],
) -> ContentService:
    """Get content service with dependencies."""
    return ContentService(db, image_host, policy)


def read_image(upload: UploadFile | None) -> ImageFile | None:
    """Read a multipart upload into memory; empty or missing uploads yield None."""
    if upload is None or not upload.filename:
        return None
    data = upload.file.read()
    if not data:
        return None
    return ImageFile(data=data, mime_type=upload.content_type or "application/octet-stream")
