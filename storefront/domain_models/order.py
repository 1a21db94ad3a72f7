# ==============================================================================
# ORDER MODELS - E-commerce Orders
# ==============================================================================
# Order and OrderItem entities; items are point-in-time snapshots
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
import enum

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import Money, SQLBase, TimestampMixin, Weight

if TYPE_CHECKING:
    from storefront.domain_models.user import User


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class OrderStatus(str, enum.Enum):
    """Order fulfilment status."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, enum.Enum):
    """Order payment status."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Order(SQLBase, TimestampMixin):
    """
    Order model representing a priced, addressed purchase.

    Totals satisfy ``total == subtotal + tax_amount + shipping_amount
    - discount_amount``. Address snapshots are written once at creation
    and never updated.

    Attributes:
        user_id: Customer who placed the order (None for guest orders)
        order_number: ``ORD-YYYYMMDD-NNNNNN``, unique
        status: Fulfilment status
        payment_status: Payment status
        payment_method: Payment method code (e.g. ``stripe``)
        currency: ISO currency code
        shipping_address: JSON snapshot of the shipping address
        billing_address: JSON snapshot of the billing address
        tracking_number: Carrier tracking number
        shipped_at: Set when status moves to shipped
        delivered_at: Set when status moves to delivered

    Relationships:
        user: Customer who placed order
        items: Line items in the order
    """

    __tablename__ = "orders"

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )

    order_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )

    # Status
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus, values_callable=_enum_values),
        default=OrderStatus.PENDING,
        index=True,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    currency: Mapped[str] = mapped_column(
        String(3),
        default="USD",
        nullable=False,
    )

    # Pricing
    subtotal: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Money,
        default=Decimal("0.00"),
        nullable=False,
    )
    shipping_amount: Mapped[Decimal] = mapped_column(
        Money,
        default=Decimal("0.00"),
        nullable=False,
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        Money,
        default=Decimal("0.00"),
        nullable=False,
    )
    total: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )

    # Address snapshots
    shipping_address: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
    )
    billing_address: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Fulfilment
    tracking_number: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    shipped_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    delivered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship(
        "User",
        back_populates="orders",
    )
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def item_count(self) -> int:
        """Get total number of units in order."""
        return sum(item.quantity for item in self.items)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, order_number={self.order_number}, status={self.status})>"


class OrderItem(SQLBase, TimestampMixin):
    """
    Order line item.

    Product name, variant name, SKU, unit price and weight are copied
    at order time so the line stays correct after catalog edits.
    ``product_id``/``variant_id`` are plain references without a
    foreign key so catalog rows can be removed without touching
    historical orders.
    """

    __tablename__ = "order_items"

    order_id: Mapped[str] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    product_id: Mapped[str] = mapped_column(
        String(36),
        index=True,
        nullable=False,
    )
    variant_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )
    total: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
    )

    # Snapshot of catalog data at order time
    product_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    variant_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    sku: Mapped[Optional[str]] = mapped_column(
        String(150),
        nullable=True,
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(
        Weight,
        nullable=True,
    )
    attributes: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="items",
    )

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, product={self.product_name}, qty={self.quantity})>"
