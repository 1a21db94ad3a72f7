# ==============================================================================
# ORDER REPOSITORY - Order Persistence
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from storefront.database.repositories.base_repository import BaseRepository
from storefront.domain_models.order import Order, OrderItem


class OrderRepository(BaseRepository[Order]):
    """Orders and their line items."""

    model = Order

    async def number_exists(self, order_number: str) -> bool:
        result = await self._session.execute(
            select(Order.id).where(Order.order_number == order_number)
        )
        return result.first() is not None

    async def add_with_items(
        self,
        order_data: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> Order:
        """
        Stage an order header together with its line items.

        Args:
            order_data: Order column values
            items: OrderItem column values, without ``order_id``

        Returns:
            The flushed order with ``items`` populated
        """
        order = Order(**order_data)
        order.items = [OrderItem(**item) for item in items]
        self._session.add(order)
        await self._session.flush()
        return order

    async def get_with_items(
        self,
        order_id: str,
        for_update: bool = False,
    ) -> Optional[Order]:
        query = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
        )
        if for_update:
            query = query.with_for_update()
        result = await self._session.execute(query)
        return result.scalars().first()
