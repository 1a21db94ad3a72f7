# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Security, Exceptions, Constants, Logging
# ==============================================================================

"""
Core Module
===========

Contains core utilities and configurations for the application:
- settings: Environment configuration management
- security: JWT authentication and password hashing
- exceptions: Custom exception classes
- constants: Application-wide constants and store setting defaults
- logger: Root logging configuration
"""

from storefront.core.settings import settings, get_settings, DatabaseType
from storefront.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    DatabaseError,
    InactiveProductError,
    InsufficientStockError,
    NotFoundError,
    RateLimitError,
    StockError,
    TransactionError,
    ValidationError,
)

__all__ = [
    "settings",
    "get_settings",
    "DatabaseType",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BusinessRuleError",
    "ConflictError",
    "DatabaseError",
    "InactiveProductError",
    "InsufficientStockError",
    "NotFoundError",
    "RateLimitError",
    "StockError",
    "TransactionError",
    "ValidationError",
]
