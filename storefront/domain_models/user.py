# ==============================================================================
# USER MODEL - Authentication and Authorization
# ==============================================================================
# Customer and admin accounts
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
import enum

from sqlalchemy import Boolean, DateTime, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import SQLBase, TimestampMixin

if TYPE_CHECKING:
    from storefront.domain_models.address import Address
    from storefront.domain_models.order import Order


class UserRole(str, enum.Enum):
    """Role carried in the JWT ``role`` claim."""
    CUSTOMER = "customer"
    ADMIN = "admin"


class User(SQLBase, TimestampMixin):
    """
    User account.

    Attributes:
        email: Unique email address (login identifier)
        hashed_password: Bcrypt-hashed password
        full_name: Display name
        phone: Contact number
        role: ``customer`` or ``admin``
        is_active: Account activation status
        last_login: Timestamp of last successful login

    Relationships:
        addresses: Saved billing/shipping addresses
        orders: Orders placed while authenticated
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CUSTOMER,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    addresses: Mapped[List["Address"]] = relationship(
        "Address",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    orders: Mapped[List["Order"]] = relationship(
        "Order",
        back_populates="user",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
