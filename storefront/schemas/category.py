# ==============================================================================
# CATEGORY SCHEMAS - Catalog Tree
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from storefront.schemas.base import (
    BaseSchema,
    BulkDeleteRequest,
    PaginatedResponse,
    TimestampSchema,
)
from storefront.schemas.product import ProductResponse


class CategoryCreate(BaseSchema):
    """Schema for creating a category. ``slug`` is derived from ``name`` when omitted."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


class CategoryUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class CategoryResponse(TimestampSchema):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: bool
    sort_order: int


class CategoryTreeNode(CategoryResponse):
    """Category with its nested children, used by ``?tree=true`` listings."""

    children: List["CategoryTreeNode"] = Field(default_factory=list)


CategoryTreeNode.model_rebuild()


class CategoryBulkDelete(BulkDeleteRequest):
    """
    Bulk soft delete.

    ``cascade`` extends the selection to every descendant; without it,
    categories with active subcategories are refused. ``force`` skips
    the active-product check.
    """

    cascade: bool = False
    force: bool = False


class CategoryProducts(BaseSchema):
    category: CategoryResponse
    products: PaginatedResponse[ProductResponse]
