# ==============================================================================
# PRODUCT SCHEMAS - E-commerce Catalog
# ==============================================================================
# Request/Response schemas for products, variants and images
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from storefront.schemas.base import BaseSchema, TimestampSchema


# ==============================================================================
# IMAGES
# ==============================================================================

class ProductImageCreate(BaseSchema):
    url: str = Field(..., min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, max_length=255)
    sort_order: int = 0
    is_primary: bool = False


class ProductImageResponse(ProductImageCreate):
    id: str


# ==============================================================================
# VARIANTS
# ==============================================================================

class VariantCreate(BaseSchema):
    """
    Schema for creating a product variant.

    ``sku`` is generated as ``{product sku}-{name}`` when omitted.
    ``price`` overrides the product price when set.
    """

    name: str = Field(..., min_length=1, max_length=255)
    sku: Optional[str] = Field(None, max_length=150)
    price: Optional[Decimal] = Field(None, ge=0)
    compare_price: Optional[Decimal] = Field(None, ge=0)
    quantity: int = Field(0, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=500)
    attributes: Optional[Dict[str, Any]] = None
    is_active: bool = True

    @field_validator("sku")
    @classmethod
    def validate_sku(cls, v: Optional[str]) -> Optional[str]:
        return v.upper().strip() if v else v


class VariantUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    sku: Optional[str] = Field(None, max_length=150)
    price: Optional[Decimal] = Field(None, ge=0)
    compare_price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=500)
    attributes: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("sku")
    @classmethod
    def validate_sku(cls, v: Optional[str]) -> Optional[str]:
        return v.upper().strip() if v else v


class VariantResponse(TimestampSchema):
    id: str
    product_id: str
    name: str
    sku: str
    price: Optional[Decimal] = None
    compare_price: Optional[Decimal] = None
    quantity: int
    weight: Optional[Decimal] = None
    image: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    is_active: bool


# ==============================================================================
# PRODUCTS
# ==============================================================================

class ProductCreate(BaseSchema):
    """Schema for creating a product."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Product name",
    )
    sku: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Stock Keeping Unit",
    )
    slug: Optional[str] = Field(
        None,
        max_length=255,
        description="URL slug (derived from name when omitted)",
    )
    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Product description",
    )
    short_description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(
        ...,
        ge=0,
        description="Product price",
    )
    compare_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    track_quantity: bool = True
    quantity: int = Field(
        0,
        ge=0,
        description="Available inventory",
    )
    weight: Optional[Decimal] = Field(None, ge=0, description="Unit weight in kg")
    taxable: bool = True
    is_active: bool = True
    is_featured: bool = False
    category_id: Optional[str] = None
    images: List[ProductImageCreate] = Field(default_factory=list)
    variants: List[VariantCreate] = Field(default_factory=list)

    @field_validator("sku")
    @classmethod
    def validate_sku(cls, v: str) -> str:
        """Normalize SKU to uppercase."""
        return v.upper().strip()


class ProductUpdate(BaseSchema):
    """Schema for updating a product."""

    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Product name",
    )
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Product description",
    )
    short_description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Product price",
    )
    compare_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    track_quantity: Optional[bool] = None
    quantity: Optional[int] = Field(
        None,
        ge=0,
        description="Available inventory",
    )
    weight: Optional[Decimal] = Field(None, ge=0)
    taxable: Optional[bool] = None
    is_active: Optional[bool] = Field(
        None,
        description="Product active status",
    )
    is_featured: Optional[bool] = Field(
        None,
        description="Featured product flag",
    )
    category_id: Optional[str] = None

    @field_validator("sku")
    @classmethod
    def validate_sku(cls, v: Optional[str]) -> Optional[str]:
        return v.upper().strip() if v else v


class ProductResponse(TimestampSchema):
    """Schema for product response."""

    id: str
    name: str
    slug: str
    sku: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal
    compare_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    track_quantity: bool
    quantity: int
    weight: Optional[Decimal] = None
    taxable: bool
    is_active: bool
    is_featured: bool
    in_stock: bool
    category_id: Optional[str] = None


class ProductDetailResponse(ProductResponse):
    """Product with its variants and images."""

    variants: List[VariantResponse] = Field(default_factory=list)
    images: List[ProductImageResponse] = Field(default_factory=list)
