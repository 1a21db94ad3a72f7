# ==============================================================================
# SETTING MODEL - Store Configuration
# ==============================================================================
# Key/value store settings persisted as JSON
# ==============================================================================

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from storefront.domain_models.base import SQLBase, TimestampMixin


def normalize_setting_key(key: str) -> str:
    """Lowercase a setting key and replace whitespace with underscores."""
    return "_".join(key.strip().lower().split())


class Setting(SQLBase, TimestampMixin):
    """
    One store setting.

    Attributes:
        key: Unique, normalised key (``Tax Rate`` -> ``tax_rate``)
        value: Any JSON value
        category: Grouping (general, payment, shipping, tax, ...)
        description: Help text for the admin UI
        is_public: Whether anonymous callers may read it
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    value: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        default="general",
        index=True,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    @validates("key")
    def _normalize_key(self, _attr: str, key: str) -> str:
        return normalize_setting_key(key)

    def __repr__(self) -> str:
        return f"<Setting(key={self.key}, category={self.category})>"
