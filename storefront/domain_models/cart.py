# ==============================================================================
# CART MODEL - Shopping Cart Lines
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import Money, SQLBase, TimestampMixin

if TYPE_CHECKING:
    from storefront.domain_models.product import Product, ProductVariant


class CartItem(SQLBase, TimestampMixin):
    """
    One line of a shopping cart.

    Exactly one of ``user_id`` / ``session_id`` identifies the owner.
    Session lines are moved onto the user when the cart is merged
    after login. ``price`` is the unit price at the time the line was
    added; checkout always re-prices from the catalog.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_cart_items_single_owner",
        ),
    )

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    )
    session_id: Mapped[Optional[str]] = mapped_column(
        String(128),
        index=True,
        nullable=True,
    )
    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    variant_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        nullable=True,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )
    attributes: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    product: Mapped["Product"] = relationship("Product", lazy="joined")
    variant: Mapped[Optional["ProductVariant"]] = relationship("ProductVariant", lazy="joined")

    def __repr__(self) -> str:
        owner = self.user_id or self.session_id
        return f"<CartItem(id={self.id}, owner={owner}, qty={self.quantity})>"
