# ==============================================================================
# MIDDLEWARE PACKAGE INITIALIZATION
# ==============================================================================

"""
Middleware Module
=================

FastAPI middleware implementations:
- Rate limiting
- Request logging
"""

from storefront.middleware.rate_limiter import RateLimitMiddleware
from storefront.middleware.request_logger import RequestLoggerMiddleware

__all__ = [
    "RateLimitMiddleware",
    "RequestLoggerMiddleware",
]
