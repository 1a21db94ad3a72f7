# ==============================================================================
# ADDRESS MODEL - Saved Customer Addresses
# ==============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
import enum

from sqlalchemy import Boolean, ForeignKey, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import SQLBase, TimestampMixin

if TYPE_CHECKING:
    from storefront.domain_models.user import User


class AddressType(str, enum.Enum):
    BILLING = "billing"
    SHIPPING = "shipping"


class Address(SQLBase, TimestampMixin):
    """
    A saved billing or shipping address.

    At most one address per (user, type) is flagged ``is_default``;
    the service clears sibling defaults when a new default is set.
    """

    __tablename__ = "addresses"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[AddressType] = mapped_column(
        SQLEnum(AddressType, values_callable=lambda e: [m.value for m in e]),
        default=AddressType.SHIPPING,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address1: Mapped[str] = mapped_column(String(255), nullable=False)
    address2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(2), nullable=False, default="US")
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="addresses")
