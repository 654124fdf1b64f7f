"""Envelopes shared by every backend resource."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import Field

from playground.schemas.base import WireModel

T = TypeVar("T")


class PageResponse(WireModel, Generic[T]):
    """Page envelope returned by list endpoints."""

    content: list[T] = Field(default_factory=list)
    page: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True


class ApiError(WireModel):
    """Error envelope returned by the backend on failure."""

    timestamp: datetime | None = None
    status: int
    error: str
    message: str
    path: str | None = None
    validation_errors: dict[str, str] | None = None
