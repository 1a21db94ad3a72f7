# ==============================================================================
# DATABASE ADAPTERS PACKAGE
# ==============================================================================

"""
Database Adapters
=================

Provides unified interface implementations for different databases:
- BaseDatabaseAdapter: Abstract interface definition
- SQLAlchemyAdapter: Shared SQLAlchemy async implementation
- PostgreSQLAdapter: PostgreSQL using asyncpg
- SQLiteAdapter: SQLite using aiosqlite
"""

from storefront.database.adapters.base_adapter import BaseDatabaseAdapter
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.adapters.postgresql_adapter import PostgreSQLAdapter
from storefront.database.adapters.sqlite_adapter import SQLiteAdapter

__all__ = [
    "BaseDatabaseAdapter",
    "SQLAlchemyAdapter",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
]
