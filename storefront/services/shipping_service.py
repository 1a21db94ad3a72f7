# ==============================================================================
# SHIPPING SERVICE - Shipping Configuration & Rate Quotes
# ==============================================================================
# CRUD for methods, zones, rates and rules plus the quote endpoint that
# feeds stored configuration into the rule engine
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import select

from storefront.core.constants import CheckoutConstants, DatabaseConstants as DC
from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.product import Product
from storefront.domain_models.shipping import (
    RuleAction,
    RuleCondition,
    RuleOperator,
    ShippingMethod,
    ShippingMethodType,
    ShippingRate,
    ShippingRule,
    ShippingZone,
)
from storefront.schemas.shipping import (
    ShippingMethodCreate,
    ShippingMethodResponse,
    ShippingMethodUpdate,
    ShippingQuoteOption,
    ShippingQuoteRequest,
    ShippingRateCreate,
    ShippingRateResponse,
    ShippingRateUpdate,
    ShippingRuleCreate,
    ShippingRuleResponse,
    ShippingRuleUpdate,
    ShippingZoneCreate,
    ShippingZoneResponse,
    ShippingZoneUpdate,
)
from storefront.services import shipping_rules as engine
from storefront.services.base_service import BaseService

logger = logging.getLogger(__name__)

# Request schemas carry plain strings; columns store the enums
_ENUM_FIELDS = {
    "type": ShippingMethodType,
    "condition": RuleCondition,
    "operator": RuleOperator,
    "action": RuleAction,
}


class _ShippingCrud(BaseService):
    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        for key, enum_cls in _ENUM_FIELDS.items():
            if data.get(key) is not None:
                data[key] = enum_cls(data[key])
        return data


class ShippingMethodService(
    _ShippingCrud,
    BaseService[ShippingMethod, ShippingMethodCreate, ShippingMethodUpdate, ShippingMethodResponse],
):
    _not_found_message = "Shipping method not found"

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.SHIPPING_METHODS_COLLECTION)

    def _to_response(self, entity: Any) -> ShippingMethodResponse:
        return ShippingMethodResponse.model_validate(entity)

    async def create(self, schema: ShippingMethodCreate) -> ShippingMethodResponse:
        if await self._adapter.exists(self._collection_name, {"code": schema.code}):
            raise ConflictError(message=f"Shipping method code {schema.code} already exists", field="code")
        return await super().create(schema)


class ShippingZoneService(
    _ShippingCrud,
    BaseService[ShippingZone, ShippingZoneCreate, ShippingZoneUpdate, ShippingZoneResponse],
):
    _not_found_message = "Shipping zone not found"

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.SHIPPING_ZONES_COLLECTION)

    def _to_response(self, entity: Any) -> ShippingZoneResponse:
        return ShippingZoneResponse.model_validate(entity)


class ShippingRateService(
    _ShippingCrud,
    BaseService[ShippingRate, ShippingRateCreate, ShippingRateUpdate, ShippingRateResponse],
):
    _not_found_message = "Shipping rate not found"

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.SHIPPING_RATES_COLLECTION)

    def _to_response(self, entity: Any) -> ShippingRateResponse:
        return ShippingRateResponse.model_validate(entity)

    async def create(self, schema: ShippingRateCreate) -> ShippingRateResponse:
        for collection, ref, label in (
            (DC.SHIPPING_METHODS_COLLECTION, schema.method_id, "shipping_method"),
            (DC.SHIPPING_ZONES_COLLECTION, schema.zone_id, "shipping_zone"),
        ):
            if await self._adapter.get_by_id(collection, ref) is None:
                raise NotFoundError(
                    message=f"{label.replace('_', ' ').capitalize()} not found",
                    resource_type=label,
                    resource_id=ref,
                )
        return await super().create(schema)


class ShippingRuleService(
    _ShippingCrud,
    BaseService[ShippingRule, ShippingRuleCreate, ShippingRuleUpdate, ShippingRuleResponse],
):
    _not_found_message = "Shipping rule not found"

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.SHIPPING_RULES_COLLECTION)

    def _to_response(self, entity: Any) -> ShippingRuleResponse:
        return ShippingRuleResponse.model_validate(entity)


# ==============================================================================
# QUOTES
# ==============================================================================

class ShippingService:
    """
    Shipping quotes from stored configuration.

    Loads every zone, rate and rule, converts them to engine specs and
    runs ``shipping_rules.quote``. Missing item prices, weights and
    categories are filled in from the catalog.
    """

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        self._adapter = adapter
        self.methods = ShippingMethodService(adapter)
        self.zones = ShippingZoneService(adapter)
        self.rates = ShippingRateService(adapter)
        self.rules = ShippingRuleService(adapter)

    @staticmethod
    def _method_spec(method: ShippingMethod) -> engine.MethodSpec:
        return engine.MethodSpec(
            id=method.id,
            code=method.code,
            name=method.name,
            type=method.type,
            settings=method.settings or {},
            is_active=method.is_active,
        )

    async def calculate(self, request: ShippingQuoteRequest) -> List[ShippingQuoteOption]:
        async with self._adapter.session() as session:
            product_ids = {item.product_id for item in request.items}
            products: Dict[str, Product] = {}
            if product_ids:
                result = await session.execute(select(Product).where(Product.id.in_(product_ids)))
                products = {p.id: p for p in result.scalars().all()}

            zones = (await session.execute(select(ShippingZone))).scalars().all()
            rates = (await session.execute(select(ShippingRate))).unique().scalars().all()
            rules = (await session.execute(select(ShippingRule))).scalars().all()

            subtotal = Decimal("0")
            weight = Decimal("0")
            category_ids: List[str] = []
            for item in request.items:
                product = products.get(item.product_id)
                price = item.price if item.price is not None else (product.price if product else Decimal("0"))
                unit_weight = item.weight
                if unit_weight is None and product is not None:
                    unit_weight = product.weight
                if unit_weight is None:
                    unit_weight = CheckoutConstants.DEFAULT_ITEM_WEIGHT_KG
                subtotal += Decimal(price) * item.quantity
                weight += Decimal(unit_weight) * item.quantity

                category_id = item.category_id or (product.category_id if product else None)
                if category_id:
                    category_ids.append(category_id)

            order = engine.OrderProfile(
                subtotal=request.subtotal if request.subtotal is not None else subtotal,
                weight=request.weight if request.weight is not None else weight,
                product_ids=[item.product_id for item in request.items],
                category_ids=category_ids,
                item_count=sum(item.quantity for item in request.items),
            )

            candidates = engine.quote(
                engine.Destination(
                    country=request.address.country,
                    state=request.address.state,
                    zip_code=request.address.zip_code,
                ),
                order,
                zones=[
                    engine.ZoneSpec(
                        id=z.id,
                        countries=z.countries or [],
                        states=z.states or [],
                        zip_codes=z.zip_codes or [],
                        is_active=z.is_active,
                    )
                    for z in zones
                ],
                rates=[
                    engine.RateSpec(
                        id=r.id,
                        zone_id=r.zone_id,
                        method=self._method_spec(r.method),
                        name=r.name,
                        cost=r.cost,
                        min_order_amount=r.min_order_amount,
                        max_order_amount=r.max_order_amount,
                        min_weight=r.min_weight,
                        max_weight=r.max_weight,
                        delivery_time=r.delivery_time,
                        is_active=r.is_active,
                        sort_order=r.sort_order,
                    )
                    for r in rates
                ],
                rules=[
                    engine.RuleSpec(
                        id=r.id,
                        condition=r.condition,
                        operator=r.operator,
                        value=r.value,
                        action=r.action,
                        action_value=r.action_value,
                        method_code=r.method_code,
                        priority=r.priority,
                        is_active=r.is_active,
                    )
                    for r in rules
                ],
            )

        logger.debug(f"Shipping quote for {request.address.country}: {len(candidates)} options")
        return [ShippingQuoteOption(**c.to_dict()) for c in candidates]
