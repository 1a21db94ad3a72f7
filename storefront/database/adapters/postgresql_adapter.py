# ==============================================================================
# POSTGRESQL ADAPTER - SQLAlchemy Async with asyncpg
# ==============================================================================
# Production database adapter with a bounded connection pool
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from storefront.core.settings import settings
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter


class PostgreSQLAdapter(SQLAlchemyAdapter):
    """
    PostgreSQL adapter using the asyncpg driver.

    The schema is owned by Alembic migrations run at deploy time, so
    tables are not created on connect. Pool size, overflow and the
    acquire timeout come from settings (defaults: 5 connections, no
    overflow, 30 s acquire timeout).

    Example:
        >>> adapter = PostgreSQLAdapter()
        >>> await adapter.connect()
        >>> await adapter.health_check()
        True
    """

    dialect_name = "PostgreSQL"

    def __init__(self, database_url: Optional[str] = None) -> None:
        super().__init__(
            database_url or settings.postgres_url,
            auto_create_tables=False,
        )

    def _engine_options(self) -> Dict[str, Any]:
        return {
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_pre_ping": True,
        }
