# ==============================================================================
# BASE SCHEMAS - Envelope, Pagination and Shared Config
# ==============================================================================
# Every route answers with APIResponse; list routes wrap PaginatedResponse
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """
    Base for request and response schemas.

    ``from_attributes`` lets responses validate straight from ORM rows;
    enums are emitted as their string values.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class TimestampSchema(BaseSchema):
    created_at: Optional[datetime] = Field(None, description="Row creation time (UTC)")
    updated_at: Optional[datetime] = Field(None, description="Last modification time (UTC)")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    One page of a listing.

    Attributes:
        items: Rows on this page
        total: Rows matching the filters across all pages
        page: 1-indexed page number
        page_size: Rows per page
        pages: Number of pages for ``total``
    """

    items: List[T] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=100)
    pages: int = Field(..., ge=0)


class APIResponse(BaseModel, Generic[T]):
    """
    Success envelope: ``{success: true, data, message?}``.

    Failures never go through this model; the global exception handlers
    render ``{success: false, error, code, details?}`` directly.
    """

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "APIResponse[T]":
        return cls(success=True, data=data, message=message)


class MessageResponse(BaseSchema):
    """Payload for endpoints that only confirm an action."""

    message: str


class HealthResponse(BaseSchema):
    status: str = Field(..., description="healthy or degraded")
    version: str
    database: str = Field(..., description="connected or disconnected")


class BulkDeleteRequest(BaseSchema):
    ids: List[str] = Field(..., min_length=1, description="Target row IDs")


class BulkDeleteResult(BaseSchema):
    deleted: int = Field(..., ge=0, description="Rows removed or deactivated")
