# ==============================================================================
# CHECKOUT ENDPOINTS - Quotes and Order Placement
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from storefront.api.dependencies import CheckoutServiceDep, CurrentUserID, OptionalUserID
from storefront.core.constants import SuccessMessages
from storefront.schemas.base import APIResponse
from storefront.schemas.checkout import (
    CalculateRequest,
    CouponRequest,
    CouponResponse,
    CreateOrderRequest,
    GuestOrderRequest,
    OrderPlacedResponse,
    QuoteResponse,
    ShippingOption,
)

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.post(
    "/calculate",
    response_model=APIResponse[QuoteResponse],
    summary="Price a prospective order",
    description="Validates items against the catalog and returns the totals. Writes nothing.",
)
async def calculate(
    schema: CalculateRequest,
    service: CheckoutServiceDep,
    _: OptionalUserID,
) -> APIResponse[QuoteResponse]:
    quote = await service.calculate(schema.items, schema.shipping_address.country)
    return APIResponse.ok(data=QuoteResponse(**quote.to_dict()))


@router.get("/shipping-options", response_model=APIResponse[List[ShippingOption]])
async def shipping_options(
    service: CheckoutServiceDep,
) -> APIResponse[List[ShippingOption]]:
    return APIResponse.ok(data=service.shipping_options())


@router.post("/validate-coupon", response_model=APIResponse[CouponResponse])
async def validate_coupon(
    schema: CouponRequest,
    service: CheckoutServiceDep,
) -> APIResponse[CouponResponse]:
    return APIResponse.ok(data=service.validate_coupon(schema.code, schema.subtotal))


@router.post(
    "/create-order",
    response_model=APIResponse[OrderPlacedResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    schema: CreateOrderRequest,
    user_id: CurrentUserID,
    service: CheckoutServiceDep,
) -> APIResponse[OrderPlacedResponse]:
    placed = await service.create_order(schema, user_id=user_id)
    return APIResponse.ok(data=placed, message=SuccessMessages.ORDER_PLACED)


@router.post(
    "/guest",
    response_model=APIResponse[OrderPlacedResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_guest_order(
    schema: GuestOrderRequest,
    service: CheckoutServiceDep,
) -> APIResponse[OrderPlacedResponse]:
    placed = await service.create_order(schema, user_id=None)
    return APIResponse.ok(data=placed, message=SuccessMessages.ORDER_PLACED)
