# ==============================================================================
# UTILS PACKAGE INITIALIZATION
# ==============================================================================

"""
Utilities Module
================

Helper functions and utilities:
- Pagination helpers
- Order number and slug generators
- Money rounding
"""

from storefront.utils.helpers import (
    calculate_offset,
    generate_order_number,
    paginate_results,
    quantize_money,
    slugify,
    utc_now,
)

__all__ = [
    "calculate_offset",
    "generate_order_number",
    "paginate_results",
    "quantize_money",
    "slugify",
    "utc_now",
]
