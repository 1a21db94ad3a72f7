# ==============================================================================
# STOREFRONT PACKAGE INITIALIZATION
# ==============================================================================
# Multi-tenant e-commerce backend with FastAPI and SQLAlchemy
# ==============================================================================

"""
Storefront Backend
==================

Catalog, carts, checkout, orders and shipping behind a JSON API.

Features:
---------
- Product catalog with categories, variants and images
- Guest and customer carts with merge on login
- Checkout with transactional stock reservation
- Order lifecycle with an enforced status transition table
- Zone/rate/rule shipping engine
- Runtime store settings with a TTL cache

Usage:
------
    uvicorn storefront.main:app --reload
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
