# ==============================================================================
# SQL ADAPTER - SQLAlchemy Async Implementation
# ==============================================================================
# Shared by every SQLAlchemy-backed engine; dialects only add engine options
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from sqlalchemy import Select, delete, func, select, text, update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront.core.settings import settings
from storefront.core.exceptions import DatabaseError
from storefront.database.adapters.base_adapter import BaseDatabaseAdapter, Filters
from storefront.domain_models.base import SQLBase

logger = logging.getLogger(__name__)


class SQLAlchemyAdapter(BaseDatabaseAdapter[Any]):
    """
    Database adapter over a SQLAlchemy ``AsyncEngine``.

    Collection names resolve to ORM models through a registry filled by
    ``DatabaseFactory``. Filter keys that are not columns of the model
    are ignored.

    Attributes:
        _database_url: Async connection string
        _auto_create_tables: Run ``create_all`` on connect (SQLite only)
        _models: Collection name to model class
    """

    dialect_name = "sql"

    def __init__(self, database_url: str, auto_create_tables: bool = False) -> None:
        self._database_url = database_url
        self._auto_create_tables = auto_create_tables
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._models: Dict[str, Type[SQLBase]] = {}

    def _engine_options(self) -> Dict[str, Any]:
        return {}

    def _configure_engine(self, engine: AsyncEngine) -> None:
        """Dialect hook for engine event listeners."""

    # ==========================================================================
    # MODEL REGISTRY
    # ==========================================================================

    def register_model(self, name: str, model: Type[SQLBase]) -> None:
        self._models[name] = model
        logger.debug(f"Registered model '{name}' -> {model.__name__}")

    def _model(self, collection: str) -> Type[SQLBase]:
        try:
            return self._models[collection]
        except KeyError:
            raise ValueError(
                f"Model '{collection}' not registered; known: {sorted(self._models)}"
            ) from None

    @staticmethod
    def _where(query: Any, model: Type[SQLBase], filters: Optional[Filters]) -> Any:
        for key, value in (filters or {}).items():
            column = getattr(model, key, None)
            if column is None:
                continue
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)
        return query

    def _bulk_target(self, collection: str, filters: Filters) -> Type[SQLBase]:
        if not filters:
            raise ValueError(f"Refusing unfiltered bulk write on '{collection}'")
        return self._model(collection)

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    async def connect(self) -> None:
        try:
            self._engine = create_async_engine(
                self._database_url,
                echo=settings.DEBUG,
                **self._engine_options(),
            )
            self._configure_engine(self._engine)
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            if self._auto_create_tables:
                async with self._engine.begin() as conn:
                    await conn.run_sync(SQLBase.metadata.create_all)
        except Exception as e:
            logger.error(f"Failed to connect to {self.dialect_name}: {e}")
            raise DatabaseError(f"{self.dialect_name} connection failed: {e}")

        logger.info(f"{self.dialect_name} adapter connected")

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info(f"{self.dialect_name} adapter disconnected")

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"{self.dialect_name} health check failed: {e}")
            return False
        return True

    # ==========================================================================
    # SESSIONS
    # ==========================================================================

    def new_session(self) -> AsyncSession:
        """Bare session; ``UnitOfWork`` owns its commit and rollback."""
        if self._session_factory is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._session_factory()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        session = self.new_session()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ==========================================================================
    # SINGLE ROWS
    # ==========================================================================

    async def create(self, collection: str, data: Dict[str, Any]) -> Any:
        async with self.session() as session:
            instance = self._model(collection)(**data)
            session.add(instance)
            await session.flush()
            await session.refresh(instance)
            return instance

    async def get_by_id(self, collection: str, id: Any) -> Optional[Any]:
        async with self.session() as session:
            return await session.get(self._model(collection), id)

    async def update(self, collection: str, id: Any, data: Dict[str, Any]) -> Optional[Any]:
        async with self.session() as session:
            instance = await session.get(self._model(collection), id)
            if instance is None:
                return None
            for key, value in data.items():
                if hasattr(instance, key):
                    setattr(instance, key, value)
            await session.flush()
            await session.refresh(instance)
            return instance

    async def delete(self, collection: str, id: Any) -> bool:
        async with self.session() as session:
            instance = await session.get(self._model(collection), id)
            if instance is None:
                return False
            await session.delete(instance)
        return True

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Filters] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Any]:
        model = self._model(collection)
        query: Select = self._where(select(model), model, filters)

        column = getattr(model, sort_by, None) if sort_by else None
        if column is not None:
            query = query.order_by(column.desc() if sort_order.lower() == "desc" else column)

        async with self.session() as session:
            result = await session.execute(query.offset(skip).limit(limit))
            return list(result.scalars().unique().all())

    async def count(self, collection: str, filters: Optional[Filters] = None) -> int:
        model = self._model(collection)
        query = self._where(select(func.count()).select_from(model), model, filters)
        async with self.session() as session:
            return await session.scalar(query) or 0

    async def find_one(self, collection: str, filters: Filters) -> Optional[Any]:
        rows = await self.get_all(collection, limit=1, filters=filters)
        return rows[0] if rows else None

    # ==========================================================================
    # BULK WRITES
    # ==========================================================================

    async def bulk_update(self, collection: str, filters: Filters, data: Dict[str, Any]) -> int:
        model = self._bulk_target(collection, filters)
        stmt = self._where(update(model), model, filters).values(**data)
        async with self.session() as session:
            result = await session.execute(stmt.execution_options(synchronize_session=False))
            return result.rowcount

    async def bulk_delete(self, collection: str, filters: Filters) -> int:
        model = self._bulk_target(collection, filters)
        stmt = self._where(delete(model), model, filters)
        async with self.session() as session:
            result = await session.execute(stmt.execution_options(synchronize_session=False))
            return result.rowcount
