# ==============================================================================
# CHECKOUT SERVICE - Quotes and Transactional Order Creation
# ==============================================================================
# Validates lines against the catalog, prices them, and persists orders
# together with their stock reservations in a single transaction
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.constants import (
    CheckoutConstants,
    ErrorMessages,
    OrderConstants,
)
from storefront.core.exceptions import (
    InactiveProductError,
    InsufficientStockError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.repositories.order_repository import OrderRepository
from storefront.database.unit_of_work.uow import UnitOfWork
from storefront.domain_models.cart import CartItem
from storefront.domain_models.order import OrderStatus, PaymentStatus
from storefront.domain_models.product import Product, ProductVariant
from storefront.schemas.checkout import (
    CheckoutLine,
    CreateOrderRequest,
    GuestOrderRequest,
)
from storefront.services import pricing
from storefront.services.pricing import PricedLine, PricingConfig, Quote
from storefront.services.settings_service import SettingsManager, settings_manager
from storefront.utils.helpers import generate_order_number

logger = logging.getLogger(__name__)


def _primary_image(product: Product) -> Optional[str]:
    if not product.images:
        return None
    for image in product.images:
        if image.is_primary:
            return image.url
    return product.images[0].url


class CheckoutService:
    """
    Checkout quotes and order placement.

    ``calculate`` is read-only. ``create_order`` runs validation,
    order insertion, stock decrement and cart clearing inside one
    ``UnitOfWork``; any failure leaves no order rows and no stock
    change behind.

    Attributes:
        _adapter: Database adapter
        _settings: Store settings accessor
    """

    def __init__(
        self,
        adapter: SQLAlchemyAdapter,
        settings_store: Optional[SettingsManager] = None,
    ) -> None:
        self._adapter = adapter
        self._settings = settings_store or settings_manager

    # ==========================================================================
    # CONFIGURATION
    # ==========================================================================

    async def pricing_config(self) -> PricingConfig:
        return PricingConfig(
            tax_enabled=await self._settings.is_tax_enabled(),
            tax_rate=await self._settings.get_tax_rate(),
            free_shipping_threshold=await self._settings.get_free_shipping_threshold(),
            flat_rate=await self._settings.get_flat_rate_shipping(),
            currency=await self._settings.get_currency(),
        )

    # ==========================================================================
    # LINE VALIDATION
    # ==========================================================================

    async def _price_lines(
        self,
        session: AsyncSession,
        items: Sequence[CheckoutLine],
    ) -> List[PricedLine]:
        """
        Load, validate and price every requested line.

        Raises:
            NotFoundError: Unknown product or variant
            InactiveProductError: Product or variant is inactive
            InsufficientStockError: Tracked stock below the requested quantity
        """
        product_ids = {item.product_id for item in items}
        variant_ids = {item.variant_id for item in items if item.variant_id}

        result = await session.execute(
            select(Product)
            .options(selectinload(Product.images))
            .where(Product.id.in_(product_ids))
        )
        products = {p.id: p for p in result.scalars().all()}

        variants: Dict[str, ProductVariant] = {}
        if variant_ids:
            result = await session.execute(
                select(ProductVariant).where(ProductVariant.id.in_(variant_ids))
            )
            variants = {v.id: v for v in result.scalars().all()}

        lines: List[PricedLine] = []
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError(
                    message=ErrorMessages.PRODUCT_NOT_FOUND,
                    resource_type="product",
                    resource_id=item.product_id,
                )
            if not product.is_active:
                raise InactiveProductError(product.name, product.id)

            variant = None
            if item.variant_id:
                variant = variants.get(item.variant_id)
                if variant is None or variant.product_id != product.id:
                    raise NotFoundError(
                        message=ErrorMessages.VARIANT_NOT_FOUND,
                        resource_type="product_variant",
                        resource_id=item.variant_id,
                    )
                if not variant.is_active:
                    raise InactiveProductError(f"{product.name} ({variant.name})", product.id)

            if product.track_quantity:
                available = variant.quantity if variant is not None else product.quantity
                if available < item.quantity:
                    label = f"{product.name} ({variant.name})" if variant is not None else product.name
                    raise InsufficientStockError(label, requested=item.quantity, available=available)

            price = product.price
            if variant is not None and variant.price is not None:
                price = variant.price

            weight = product.weight
            if variant is not None and variant.weight is not None:
                weight = variant.weight

            lines.append(PricedLine(
                product_id=product.id,
                variant_id=variant.id if variant is not None else None,
                quantity=item.quantity,
                price=price,
                product_name=product.name,
                variant_name=variant.name if variant is not None else None,
                sku=variant.sku if variant is not None else product.sku,
                weight=weight,
                image=(variant.image if variant is not None and variant.image else _primary_image(product)),
                attributes=variant.attributes if variant is not None else None,
                track_quantity=product.track_quantity,
            ))

        return lines

    # ==========================================================================
    # QUOTES
    # ==========================================================================

    async def calculate(
        self,
        items: Sequence[CheckoutLine],
        country: Optional[str] = None,
    ) -> Quote:
        """Price a prospective order without writing anything."""
        config = await self.pricing_config()
        async with self._adapter.session() as session:
            lines = await self._price_lines(session, items)
        return pricing.build_quote(lines, config, country)

    def shipping_options(self) -> List[Dict[str, Any]]:
        return [dict(option) for option in CheckoutConstants.SHIPPING_OPTIONS]

    def validate_coupon(self, code: str, subtotal) -> Dict[str, Any]:
        return pricing.evaluate_coupon(code, subtotal)

    # ==========================================================================
    # ORDER CREATION
    # ==========================================================================

    async def _unique_order_number(self, orders: OrderRepository) -> str:
        for _ in range(OrderConstants.ORDER_NUMBER_ATTEMPTS):
            number = generate_order_number()
            if not await orders.number_exists(number):
                return number
            logger.warning(f"Order number collision on {number}, regenerating")
        raise TransactionError("Could not allocate a unique order number")

    async def _check_payment_method(self, method: str) -> None:
        if not await self._settings.is_payment_method_enabled(method):
            raise ValidationError(
                message=f"Payment method {method} is not enabled",
                errors=[{"field": "payment_method", "message": "Payment method is not enabled"}],
            )

    async def create_order(
        self,
        request: CreateOrderRequest,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Place an order.

        Steps, all inside one transaction:
        validate and price lines, insert the order and its items,
        decrement tracked stock with a guarded UPDATE, clear the
        caller's cart. The transaction commits only after every step
        succeeded.

        Args:
            request: Order payload (``GuestOrderRequest`` for guests)
            user_id: Authenticated customer, None for guest orders

        Returns:
            ``{order_id, order_number, total, payment_status, payment_method}``
        """
        await self._check_payment_method(request.payment_method)
        config = await self.pricing_config()

        shipping_address = request.shipping_address.model_dump(exclude_none=True)
        billing_address = (
            request.billing_address.model_dump(exclude_none=True)
            if request.billing_address is not None
            else dict(shipping_address)
        )
        notes = request.notes

        if isinstance(request, GuestOrderRequest):
            contact = {"email": request.customer_email, "name": request.customer_name}
            shipping_address.update(contact)
            billing_address.update(contact)
            guest_note = OrderConstants.GUEST_NOTE_TEMPLATE.format(
                name=request.customer_name,
                email=request.customer_email,
            )
            notes = f"{notes}\n\n{guest_note}" if notes else guest_note

        async with UnitOfWork(self._adapter) as uow:
            lines = await self._price_lines(uow.session, request.items)
            quote = pricing.build_quote(lines, config, shipping_address.get("country"))

            order_number = await self._unique_order_number(uow.orders)

            order = await uow.orders.add_with_items(
                {
                    "user_id": user_id,
                    "order_number": order_number,
                    "status": OrderStatus.PENDING,
                    "payment_status": PaymentStatus.PENDING,
                    "payment_method": request.payment_method,
                    "currency": quote.currency,
                    "subtotal": quote.subtotal,
                    "tax_amount": quote.tax_amount,
                    "shipping_amount": quote.shipping_amount,
                    "discount_amount": quote.discount_amount,
                    "total": quote.total,
                    "shipping_address": shipping_address,
                    "billing_address": billing_address,
                    "notes": notes,
                },
                [
                    {
                        "product_id": line.product_id,
                        "variant_id": line.variant_id,
                        "quantity": line.quantity,
                        "price": line.price,
                        "total": line.total,
                        "product_name": line.product_name,
                        "variant_name": line.variant_name,
                        "sku": line.sku,
                        "weight": line.weight,
                        "attributes": line.attributes,
                    }
                    for line in lines
                ],
            )

            for line in lines:
                if not line.track_quantity:
                    continue
                if line.variant_id:
                    await uow.inventory.decrement_variant(
                        line.variant_id, line.quantity, line.display_name,
                    )
                else:
                    await uow.inventory.decrement_product(
                        line.product_id, line.quantity, line.display_name,
                    )

            if user_id and request.clear_cart:
                await uow.session.execute(
                    delete(CartItem).where(CartItem.user_id == user_id)
                )

            await uow.commit()

        logger.info(
            f"Order {order.order_number} placed: total={quote.total} "
            f"lines={len(lines)} user={user_id or 'guest'}"
        )

        return {
            "order_id": order.id,
            "order_number": order.order_number,
            "total": quote.total,
            "payment_status": PaymentStatus.PENDING.value,
            "payment_method": request.payment_method,
        }

