# ==============================================================================
# CATEGORY MODEL - Catalog Tree
# ==============================================================================
# Self-referencing category hierarchy
# ==============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import SQLBase, TimestampMixin

if TYPE_CHECKING:
    from storefront.domain_models.product import Product


class Category(SQLBase, TimestampMixin):
    """
    Product category node.

    Categories form a tree through ``parent_id``. The service layer
    rejects any reparenting that would make a category its own
    ancestor.

    Attributes:
        name: Display name
        slug: Unique URL slug
        description: Optional long description
        image: Optional image URL
        parent_id: Parent category (None for roots)
        is_active: Soft-delete flag
        sort_order: Display ordering among siblings
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    parent_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    parent: Mapped[Optional["Category"]] = relationship(
        "Category",
        remote_side="Category.id",
        back_populates="children",
    )
    children: Mapped[List["Category"]] = relationship(
        "Category",
        back_populates="parent",
    )
    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="category",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug={self.slug})>"
