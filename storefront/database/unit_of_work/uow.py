# ==============================================================================
# UNIT OF WORK - Transaction Coordination
# ==============================================================================
# One session, one transaction, shared by every repository it hands out
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import TransactionError
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.factory import DatabaseFactory
from storefront.database.repositories.base_repository import BaseRepository
from storefront.database.repositories.inventory_repository import InventoryRepository
from storefront.database.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

RepoType = TypeVar("RepoType", bound=BaseRepository)


class UnitOfWork:
    """
    Transaction boundary for multi-step writes.

    Nothing is committed implicitly: callers invoke ``commit()`` once
    every step succeeded. Leaving the block without committing, or
    with an exception, rolls everything back.

    Example:
        >>> async with UnitOfWork(adapter) as uow:
        ...     order = await uow.orders.add_with_items(header, lines)
        ...     await uow.inventory.decrement_product(pid, 2, "Mug")
        ...     await uow.commit()
    """

    def __init__(self, adapter: Optional[SQLAlchemyAdapter] = None) -> None:
        self._adapter = adapter
        self._session: Optional[AsyncSession] = None
        self._repositories: Dict[type, BaseRepository] = {}
        self._committed = False

    @property
    def adapter(self) -> SQLAlchemyAdapter:
        if self._adapter is None:
            self._adapter = DatabaseFactory.get_adapter()
        return self._adapter

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active. Use 'async with'.")
        return self._session

    def _repository(self, repository_class: Type[RepoType]) -> RepoType:
        if repository_class not in self._repositories:
            self._repositories[repository_class] = repository_class(self.session)
        return self._repositories[repository_class]

    @property
    def inventory(self) -> InventoryRepository:
        return self._repository(InventoryRepository)

    @property
    def orders(self) -> OrderRepository:
        return self._repository(OrderRepository)

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self.adapter.new_session()
        self._committed = False
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is not None or not self._committed:
                await self.session.rollback()
        finally:
            await self.session.close()
            self._session = None
            self._repositories.clear()

    async def commit(self) -> None:
        """
        Raises:
            TransactionError: The database rejected the commit
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Commit failed: {e}")
            raise TransactionError(f"Transaction failed: {e}")
        self._committed = True
