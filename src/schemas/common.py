"""Response envelope shared by every endpoint."""

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Base envelope: ``{success, message}``."""

    success: bool = True
    message: str | None = None
