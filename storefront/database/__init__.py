# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================
# Database Abstraction Layer with SQLite and PostgreSQL support
# ==============================================================================

"""
Database Module
===============

Provides a unified database abstraction layer supporting:
- SQLite (development/testing)
- PostgreSQL (production)

Key Components:
- Adapters: Engine-specific implementations
- Factory: Dynamic adapter instantiation
- Repositories: Session-bound data access
- Unit of Work: Transaction management
"""

from storefront.database.factory import DatabaseFactory
from storefront.database.adapters.base_adapter import BaseDatabaseAdapter

__all__ = [
    "DatabaseFactory",
    "BaseDatabaseAdapter",
]
