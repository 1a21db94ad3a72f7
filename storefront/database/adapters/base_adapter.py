# ==============================================================================
# BASE DATABASE ADAPTER - Abstract Interface
# ==============================================================================
# Contract shared by the SQLite and PostgreSQL adapters
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

# Filters map a column name to a value (equality) or to a list, tuple or
# set of values (membership).
Filters = Dict[str, Any]


class BaseDatabaseAdapter(ABC, Generic[T]):
    """
    Collection-level storage API used by the services.

    Single-row reads and writes go through the CRUD methods, each in a
    session of its own. Queries that join or span several tables use
    ``session()``; the order write path uses ``UnitOfWork`` instead.

    Example:
        >>> adapter = SQLiteAdapter()
        >>> await adapter.connect()
        >>> mug = await adapter.create("products", {"name": "Mug", "sku": "MUG-1", ...})
        >>> await adapter.bulk_update("products", {"id": [mug.id]}, {"is_active": False})
        1
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the engine.

        Raises:
            DatabaseError: The database is unreachable
        """

    @abstractmethod
    async def disconnect(self) -> None: ...

    @abstractmethod
    async def health_check(self) -> bool: ...

    @abstractmethod
    @asynccontextmanager
    async def session(self) -> AsyncIterator[Any]:
        """Session that commits on clean exit and rolls back on error."""
        yield

    # ==========================================================================
    # SINGLE ROWS
    # ==========================================================================

    @abstractmethod
    async def create(self, collection: str, data: Dict[str, Any]) -> T: ...

    @abstractmethod
    async def get_by_id(self, collection: str, id: Any) -> Optional[T]: ...

    @abstractmethod
    async def update(self, collection: str, id: Any, data: Dict[str, Any]) -> Optional[T]:
        """Returns None when no row has ``id``."""

    @abstractmethod
    async def delete(self, collection: str, id: Any) -> bool:
        """Hard delete; False when no row has ``id``."""

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    @abstractmethod
    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Filters] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[T]: ...

    @abstractmethod
    async def count(self, collection: str, filters: Optional[Filters] = None) -> int: ...

    @abstractmethod
    async def find_one(self, collection: str, filters: Filters) -> Optional[T]: ...

    async def exists(self, collection: str, filters: Filters) -> bool:
        return await self.count(collection, filters) > 0

    # ==========================================================================
    # BULK WRITES
    # ==========================================================================

    @abstractmethod
    async def bulk_update(self, collection: str, filters: Filters, data: Dict[str, Any]) -> int:
        """
        Set ``data`` on every matching row.

        Returns:
            Number of rows changed

        Raises:
            ValueError: ``filters`` is empty
        """

    @abstractmethod
    async def bulk_delete(self, collection: str, filters: Filters) -> int:
        """
        Remove every matching row; database-level cascades apply.

        Raises:
            ValueError: ``filters`` is empty
        """
