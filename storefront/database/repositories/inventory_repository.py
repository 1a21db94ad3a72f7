# ==============================================================================
# INVENTORY REPOSITORY - Conditional Stock Decrements
# ==============================================================================
# Stock is reserved with a single guarded UPDATE so two concurrent
# orders can never drive a quantity below zero
# ==============================================================================

from __future__ import annotations

import logging

from sqlalchemy import update

from storefront.core.exceptions import InsufficientStockError
from storefront.database.repositories.base_repository import BaseRepository
from storefront.domain_models.product import Product, ProductVariant

logger = logging.getLogger(__name__)


class InventoryRepository(BaseRepository[Product]):
    """
    Stock operations for products and variants.

    ``decrement_*`` issue ``UPDATE ... SET quantity = quantity - n
    WHERE id = :id AND quantity >= n``. A zero row count means another
    transaction took the stock first; the caller's unit of work is then
    expected to roll back.
    """

    model = Product

    async def _decrement(self, model, item_id: str, quantity: int, label: str) -> None:
        stmt = (
            update(model)
            .where(model.id == item_id, model.quantity >= quantity)
            .values(quantity=model.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            current = await self._session.get(model, item_id, populate_existing=True)
            available = current.quantity if current is not None else 0
            logger.warning(
                f"Stock reservation failed for {label}: "
                f"requested={quantity} available={available}"
            )
            raise InsufficientStockError(label, requested=quantity, available=available)

        logger.debug(f"Reserved {quantity} x {label}")

    async def decrement_product(self, product_id: str, quantity: int, name: str) -> None:
        """
        Take ``quantity`` units from a product's stock.

        Raises:
            InsufficientStockError: If fewer than ``quantity`` units remain
        """
        await self._decrement(Product, product_id, quantity, name)

    async def decrement_variant(self, variant_id: str, quantity: int, name: str) -> None:
        """
        Take ``quantity`` units from a variant's stock.

        Raises:
            InsufficientStockError: If fewer than ``quantity`` units remain
        """
        await self._decrement(ProductVariant, variant_id, quantity, name)
