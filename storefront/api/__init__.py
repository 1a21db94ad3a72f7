# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

"""
API Module
==========

FastAPI routers and endpoint definitions:
- Dependencies: Authentication, cart ownership, service wiring
- Routers: Auth, Users, Addresses, Catalog, Cart, Checkout, Orders,
  Settings, Shipping
"""

from storefront.api.router import api_router

__all__ = ["api_router"]
