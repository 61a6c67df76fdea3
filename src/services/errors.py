"""Domain errors raised by the services and rendered by the API layer."""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import status

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class FeedError(Exception):
    """Base class for expected failures. Carries the HTTP status to use."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FeedError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing fields."


class Conflict(FeedError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict."


class NotFound(FeedError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class Unauthorized(FeedError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication credentials"


class Forbidden(FeedError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied."


class InvalidOrExpiredOtp(FeedError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired OTP."


class UploadError(FeedError):
    default_message = "Image upload failed."


class MailDeliveryError(FeedError):
    default_message = "Failed to send OTP."


class Internal(FeedError):
    pass


def boundary(message: str) -> Callable[[F], F]:
    """Turn unexpected failures of a service method into ``Internal(message)``.

    Expected ``FeedError``s pass through untouched. The wrapped method's
    instance must expose ``db`` so the session can be rolled back.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except FeedError:
                self.db.rollback()
                raise
            except Exception as e:
                self.db.rollback()
                logger.exception(f"{func.__qualname__} failed: {e}")
                raise Internal(message) from e

        return wrapper  # type: ignore[return-value]

    return decorator
