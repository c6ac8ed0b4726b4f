"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform ``{success, message, data}`` wrapper."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    code: str | None = None


class MessageResponse(BaseModel):
    message: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
