# ==============================================================================
# CART SERVICE - Shopping Cart Management
# ==============================================================================
# Carts are owned by a user or, for anonymous visitors, a session id
# ==============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from storefront.core.constants import ErrorMessages
from storefront.core.exceptions import (
    InactiveProductError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.cart import CartItem
from storefront.domain_models.product import Product, ProductVariant
from storefront.schemas.cart import (
    CartItemAdd,
    CartItemResponse,
    CartProductInfo,
    CartResponse,
    CartVariantInfo,
)
from storefront.utils.helpers import quantize_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartOwner:
    """Identifies a cart: exactly one of ``user_id`` / ``session_id`` is set."""

    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.user_id and not self.session_id:
            raise ValidationError(
                message=ErrorMessages.CART_OWNER_REQUIRED,
                errors=[{"field": "X-Session-ID", "message": ErrorMessages.CART_OWNER_REQUIRED}],
            )

    @property
    def filters(self) -> Dict[str, Any]:
        if self.user_id:
            return {"user_id": self.user_id}
        return {"session_id": self.session_id}

    def condition(self):
        if self.user_id:
            return CartItem.user_id == self.user_id
        return CartItem.session_id == self.session_id


class CartService:
    """
    Cart operations.

    Lines store the unit price at the time they were added; checkout
    re-prices from the catalog. Adding an item that already has a line
    with the same product, variant and attributes increments that line.
    """

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        self._adapter = adapter

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    @staticmethod
    def _item_response(item: CartItem) -> CartItemResponse:
        product = item.product
        variant = item.variant
        image = None
        if variant is not None and variant.image:
            image = variant.image
        elif product.images:
            image = product.images[0].url

        return CartItemResponse(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            price=quantize_money(item.price),
            total=quantize_money(item.price * item.quantity),
            attributes=item.attributes,
            product=CartProductInfo(
                id=product.id,
                name=product.name,
                slug=product.slug,
                sku=product.sku,
                price=product.price,
                is_active=product.is_active,
                in_stock=product.in_stock,
                image=image,
            ),
            variant=CartVariantInfo.model_validate(variant) if variant is not None else None,
        )

    @staticmethod
    def _items_query(owner: CartOwner):
        return (
            select(CartItem)
            .options(joinedload(CartItem.product).selectinload(Product.images))
            .where(owner.condition())
            .order_by(CartItem.created_at)
        )

    async def _load_item(self, session: AsyncSession, owner: CartOwner, item_id: str) -> CartItem:
        result = await session.execute(
            self._items_query(owner).where(CartItem.id == item_id)
        )
        item = result.unique().scalars().first()
        if item is None:
            raise NotFoundError(
                message=ErrorMessages.CART_ITEM_NOT_FOUND,
                resource_type="cart_item",
                resource_id=item_id,
            )
        return item

    @staticmethod
    def _check_stock(product: Product, variant: Optional[ProductVariant], quantity: int) -> None:
        if not product.track_quantity:
            return
        available = variant.quantity if variant is not None else product.quantity
        if available < quantity:
            label = f"{product.name} ({variant.name})" if variant is not None else product.name
            raise InsufficientStockError(label, requested=quantity, available=available)

    # ==========================================================================
    # READ
    # ==========================================================================

    async def get_cart(self, owner: CartOwner) -> CartResponse:
        """
        Return the owner's cart.

        Never raises: any failure is logged and answered with an empty
        cart so storefront pages keep rendering.
        """
        try:
            async with self._adapter.session() as session:
                result = await session.execute(self._items_query(owner))
                items = [self._item_response(i) for i in result.unique().scalars().all()]
        except Exception as e:
            logger.error(f"Failed to load cart for {owner}: {e}")
            return CartResponse(items=[], total=Decimal("0"), item_count=0)

        return CartResponse(
            items=items,
            total=quantize_money(sum((i.total for i in items), Decimal("0"))),
            item_count=sum(i.quantity for i in items),
        )

    async def count(self, owner: CartOwner) -> int:
        """Total units in the cart."""
        async with self._adapter.session() as session:
            result = await session.execute(
                select(func.coalesce(func.sum(CartItem.quantity), 0)).where(owner.condition())
            )
            return int(result.scalar() or 0)

    # ==========================================================================
    # WRITE
    # ==========================================================================

    async def add_item(self, owner: CartOwner, schema: CartItemAdd) -> CartItemResponse:
        """
        Add a product (or variant) to the cart.

        Raises:
            NotFoundError: Unknown product or variant
            InactiveProductError: Product is inactive
            InsufficientStockError: Resulting quantity exceeds tracked stock
        """
        async with self._adapter.session() as session:
            product = await session.get(Product, schema.product_id)
            if product is None:
                raise NotFoundError(
                    message=ErrorMessages.PRODUCT_NOT_FOUND,
                    resource_type="product",
                    resource_id=schema.product_id,
                )
            if not product.is_active:
                raise InactiveProductError(product.name, product.id)

            variant = None
            if schema.variant_id:
                variant = await session.get(ProductVariant, schema.variant_id)
                if variant is None or variant.product_id != product.id:
                    raise NotFoundError(
                        message=ErrorMessages.VARIANT_NOT_FOUND,
                        resource_type="product_variant",
                        resource_id=schema.variant_id,
                    )
                if not variant.is_active:
                    raise InactiveProductError(f"{product.name} ({variant.name})", product.id)

            result = await session.execute(
                self._items_query(owner).where(
                    and_(
                        CartItem.product_id == product.id,
                        CartItem.variant_id.is_(None) if variant is None
                        else CartItem.variant_id == variant.id,
                    )
                )
            )
            existing = next(
                (
                    line for line in result.unique().scalars().all()
                    if (line.attributes or None) == (schema.attributes or None)
                ),
                None,
            )

            if existing is not None:
                new_quantity = existing.quantity + schema.quantity
                self._check_stock(product, variant, new_quantity)
                existing.quantity = new_quantity
                item_id = existing.id
            else:
                self._check_stock(product, variant, schema.quantity)
                price = variant.price if variant is not None and variant.price is not None else product.price
                item = CartItem(
                    **owner.filters,
                    product_id=product.id,
                    variant_id=variant.id if variant is not None else None,
                    quantity=schema.quantity,
                    price=price,
                    attributes=schema.attributes,
                )
                session.add(item)
                await session.flush()
                item_id = item.id

            await session.flush()
            session.expire_all()
            return self._item_response(await self._load_item(session, owner, item_id))

    async def update_item(self, owner: CartOwner, item_id: str, quantity: int) -> CartItemResponse:
        async with self._adapter.session() as session:
            item = await self._load_item(session, owner, item_id)
            self._check_stock(item.product, item.variant, quantity)
            item.quantity = quantity
            await session.flush()
            return self._item_response(item)

    async def remove_item(self, owner: CartOwner, item_id: str) -> None:
        async with self._adapter.session() as session:
            item = await self._load_item(session, owner, item_id)
            await session.delete(item)

    async def clear(self, owner: CartOwner) -> int:
        async with self._adapter.session() as session:
            result = await session.execute(delete(CartItem).where(owner.condition()))
            return result.rowcount

    async def merge(self, user_id: str, session_id: str) -> CartResponse:
        """
        Move a session cart onto a user after login.

        Lines matching an existing user line (same product, variant and
        attributes) add their quantity to it; the rest are reassigned.
        """
        async with self._adapter.session() as session:
            result = await session.execute(
                select(CartItem).where(CartItem.session_id == session_id)
            )
            session_lines: List[CartItem] = list(result.unique().scalars().all())

            result = await session.execute(
                select(CartItem).where(CartItem.user_id == user_id)
            )
            user_lines: List[CartItem] = list(result.unique().scalars().all())

            merged = 0
            for line in session_lines:
                match = next(
                    (
                        u for u in user_lines
                        if u.product_id == line.product_id
                        and u.variant_id == line.variant_id
                        and (u.attributes or None) == (line.attributes or None)
                    ),
                    None,
                )
                if match is not None:
                    match.quantity += line.quantity
                    await session.delete(line)
                else:
                    line.session_id = None
                    line.user_id = user_id
                    user_lines.append(line)
                merged += 1

            logger.info(f"Merged {merged} cart lines from session into user {user_id}")

        return await self.get_cart(CartOwner(user_id=user_id))
