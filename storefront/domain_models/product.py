# ==============================================================================
# PRODUCT MODELS - E-commerce Catalog
# ==============================================================================
# Product, ProductVariant and ProductImage entities
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import Money, SQLBase, TimestampMixin, Weight

if TYPE_CHECKING:
    from storefront.domain_models.category import Category


class Product(SQLBase, TimestampMixin):
    """
    Product model for the e-commerce catalog.

    Stock is only enforced when ``track_quantity`` is set; in that case
    ``quantity`` never drops below zero and is decremented only inside
    the order-creation transaction.

    Attributes:
        name: Product display name
        slug: Unique URL slug
        sku: Stock Keeping Unit (unique)
        price: Current selling price
        compare_price: Optional "was" price
        cost_price: Purchase cost
        track_quantity: Whether inventory is enforced
        quantity: On-hand inventory
        weight: Unit weight in kg (optional)
        taxable: Whether tax applies
        is_active: Availability / soft-delete flag
        is_featured: Featured listing flag
        category_id: Owning category

    Relationships:
        category: Owning category
        variants: Purchasable variants
        images: Gallery images
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    # Basic info
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    sku: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    short_description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Pricing
    price: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )
    compare_price: Mapped[Optional[Decimal]] = mapped_column(
        Money,
        nullable=True,
    )
    cost_price: Mapped[Optional[Decimal]] = mapped_column(
        Money,
        nullable=True,
    )

    # Inventory
    track_quantity: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(
        Weight,
        nullable=True,
    )

    # Flags
    taxable: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )

    # Relationships
    category: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="products",
    )
    variants: Mapped[List["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
    )
    images: Mapped[List["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.sort_order",
    )

    @property
    def in_stock(self) -> bool:
        """Untracked products are always in stock."""
        return not self.track_quantity or self.quantity > 0

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku={self.sku}, qty={self.quantity})>"


class ProductVariant(SQLBase, TimestampMixin):
    """
    Purchasable variant of a product (size, colour, ...).

    ``price`` overrides the parent price when present. Stock is
    tracked when the parent product tracks quantity, and is checked
    against the variant's own ``quantity``.
    """

    __tablename__ = "product_variants"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_product_variants_quantity_non_negative"),
    )

    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    sku: Mapped[str] = mapped_column(
        String(150),
        unique=True,
        index=True,
        nullable=False,
    )
    price: Mapped[Optional[Decimal]] = mapped_column(
        Money,
        nullable=True,
    )
    compare_price: Mapped[Optional[Decimal]] = mapped_column(
        Money,
        nullable=True,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(
        Weight,
        nullable=True,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    attributes: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    product: Mapped["Product"] = relationship(
        "Product",
        back_populates="variants",
    )

    def __repr__(self) -> str:
        return f"<ProductVariant(id={self.id}, sku={self.sku}, qty={self.quantity})>"


class ProductImage(SQLBase, TimestampMixin):
    """Gallery image attached to a product."""

    __tablename__ = "product_images"

    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    alt_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    product: Mapped["Product"] = relationship(
        "Product",
        back_populates="images",
    )
