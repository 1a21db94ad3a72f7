# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Common utility functions used across the application
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, TypeVar
import math
import random
import re

from storefront.core.constants import OrderConstants

T = TypeVar("T")

_CENTS = Decimal("0.01")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

_rng = random.SystemRandom()


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def quantize_money(value: Any) -> Decimal:
    """Round a monetary amount half-up to 2 decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def generate_order_number(now: Optional[datetime] = None) -> str:
    """
    Generate an order number.

    Format: ``ORD-YYYYMMDD-NNNNNN`` with six random zero-padded digits.
    Uniqueness is enforced by the caller.
    """
    now = now or utc_now()
    digits = OrderConstants.ORDER_NUMBER_DIGITS
    suffix = str(_rng.randrange(10 ** digits)).zfill(digits)
    return f"{OrderConstants.ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix}"


def slugify(value: str, max_length: int = 255) -> str:
    """
    Lowercase ``value`` and collapse every run of non-alphanumerics into ``-``.

    Example:
        >>> slugify("Blue Shirt (XL)")
        'blue-shirt-xl'
    """
    slug = _NON_SLUG_CHARS.sub("-", value.strip().lower()).strip("-")
    return slug[:max_length] or "item"


def paginate_results(
    items: List[T],
    page: int,
    page_size: int,
    total: int,
) -> Dict[str, Any]:
    """
    Create a pagination response dict.

    Args:
        items: List of items for current page
        page: Current page number (1-indexed)
        page_size: Items per page
        total: Total item count

    Returns:
        Pagination metadata dict
    """
    pages = math.ceil(total / page_size) if total > 0 else 0

    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "pages": pages,
    }


def calculate_offset(page: int, page_size: int) -> int:
    """Calculate database offset from page number."""
    return (page - 1) * page_size
