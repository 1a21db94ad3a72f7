# ==============================================================================
# SQLITE ADAPTER - SQLAlchemy Async with aiosqlite
# ==============================================================================
# Lightweight database adapter for development and testing
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.core.settings import settings
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter


class SQLiteAdapter(SQLAlchemyAdapter):
    """
    SQLite database adapter using aiosqlite.

    Tables are created automatically on connect, so a fresh file (or
    ``:memory:``) is usable without running migrations. Foreign keys
    are enforced on every connection.

    Example:
        >>> adapter = SQLiteAdapter("sqlite+aiosqlite:///./dev.db")
        >>> await adapter.connect()
    """

    dialect_name = "SQLite"

    def __init__(self, database_url: Optional[str] = None) -> None:
        url = database_url or settings.SQLITE_URL
        if "sqlite://" in url and "aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://")

        super().__init__(url, auto_create_tables=True)

    def _engine_options(self) -> Dict[str, Any]:
        return {"connect_args": {"check_same_thread": False}}

    def _configure_engine(self, engine: AsyncEngine) -> None:
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
