# ==============================================================================
# SHIPPING ENDPOINTS - Rate Quotes & Shipping Configuration
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from storefront.api.dependencies import AdminUser, ShippingServiceDep
from storefront.core.constants import SuccessMessages
from storefront.schemas.base import APIResponse, MessageResponse
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

router = APIRouter(prefix="/shipping", tags=["Shipping"])


@router.post(
    "/calculate",
    response_model=APIResponse[List[ShippingQuoteOption]],
    summary="Quote shipping options",
    description="Options available for the address, cheapest first.",
)
async def calculate_shipping(
    schema: ShippingQuoteRequest,
    service: ShippingServiceDep,
) -> APIResponse[List[ShippingQuoteOption]]:
    return APIResponse.ok(data=await service.calculate(schema))


# ==============================================================================
# METHODS
# ==============================================================================

@router.get("/methods", response_model=APIResponse[List[ShippingMethodResponse]])
async def list_methods(_: AdminUser, service: ShippingServiceDep) -> APIResponse[List[ShippingMethodResponse]]:
    return APIResponse.ok(data=await service.methods.get_all(limit=1000, sort_by="sort_order"))


@router.post("/methods", response_model=APIResponse[ShippingMethodResponse], status_code=status.HTTP_201_CREATED)
async def create_method(
    schema: ShippingMethodCreate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingMethodResponse]:
    return APIResponse.ok(data=await service.methods.create(schema), message=SuccessMessages.CREATED)


@router.put("/methods/{method_id}", response_model=APIResponse[ShippingMethodResponse])
async def update_method(
    method_id: str,
    schema: ShippingMethodUpdate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingMethodResponse]:
    return APIResponse.ok(data=await service.methods.update(method_id, schema), message=SuccessMessages.UPDATED)


@router.delete("/methods/{method_id}", response_model=APIResponse[MessageResponse])
async def delete_method(method_id: str, _: AdminUser, service: ShippingServiceDep) -> APIResponse[MessageResponse]:
    await service.methods.delete(method_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


# ==============================================================================
# ZONES
# ==============================================================================

@router.get("/zones", response_model=APIResponse[List[ShippingZoneResponse]])
async def list_zones(_: AdminUser, service: ShippingServiceDep) -> APIResponse[List[ShippingZoneResponse]]:
    return APIResponse.ok(data=await service.zones.get_all(limit=1000, sort_by="name"))


@router.post("/zones", response_model=APIResponse[ShippingZoneResponse], status_code=status.HTTP_201_CREATED)
async def create_zone(
    schema: ShippingZoneCreate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingZoneResponse]:
    return APIResponse.ok(data=await service.zones.create(schema), message=SuccessMessages.CREATED)


@router.put("/zones/{zone_id}", response_model=APIResponse[ShippingZoneResponse])
async def update_zone(
    zone_id: str,
    schema: ShippingZoneUpdate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingZoneResponse]:
    return APIResponse.ok(data=await service.zones.update(zone_id, schema), message=SuccessMessages.UPDATED)


@router.delete("/zones/{zone_id}", response_model=APIResponse[MessageResponse])
async def delete_zone(zone_id: str, _: AdminUser, service: ShippingServiceDep) -> APIResponse[MessageResponse]:
    await service.zones.delete(zone_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


# ==============================================================================
# RATES
# ==============================================================================

@router.get("/rates", response_model=APIResponse[List[ShippingRateResponse]])
async def list_rates(_: AdminUser, service: ShippingServiceDep) -> APIResponse[List[ShippingRateResponse]]:
    return APIResponse.ok(data=await service.rates.get_all(limit=1000, sort_by="sort_order"))


@router.post("/rates", response_model=APIResponse[ShippingRateResponse], status_code=status.HTTP_201_CREATED)
async def create_rate(
    schema: ShippingRateCreate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingRateResponse]:
    return APIResponse.ok(data=await service.rates.create(schema), message=SuccessMessages.CREATED)


@router.put("/rates/{rate_id}", response_model=APIResponse[ShippingRateResponse])
async def update_rate(
    rate_id: str,
    schema: ShippingRateUpdate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingRateResponse]:
    return APIResponse.ok(data=await service.rates.update(rate_id, schema), message=SuccessMessages.UPDATED)


@router.delete("/rates/{rate_id}", response_model=APIResponse[MessageResponse])
async def delete_rate(rate_id: str, _: AdminUser, service: ShippingServiceDep) -> APIResponse[MessageResponse]:
    await service.rates.delete(rate_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


# ==============================================================================
# RULES
# ==============================================================================

@router.get("/rules", response_model=APIResponse[List[ShippingRuleResponse]])
async def list_rules(_: AdminUser, service: ShippingServiceDep) -> APIResponse[List[ShippingRuleResponse]]:
    return APIResponse.ok(
        data=await service.rules.get_all(limit=1000, sort_by="priority", sort_order="desc")
    )


@router.post("/rules", response_model=APIResponse[ShippingRuleResponse], status_code=status.HTTP_201_CREATED)
async def create_rule(
    schema: ShippingRuleCreate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingRuleResponse]:
    return APIResponse.ok(data=await service.rules.create(schema), message=SuccessMessages.CREATED)


@router.put("/rules/{rule_id}", response_model=APIResponse[ShippingRuleResponse])
async def update_rule(
    rule_id: str,
    schema: ShippingRuleUpdate,
    _: AdminUser,
    service: ShippingServiceDep,
) -> APIResponse[ShippingRuleResponse]:
    return APIResponse.ok(data=await service.rules.update(rule_id, schema), message=SuccessMessages.UPDATED)


@router.delete("/rules/{rule_id}", response_model=APIResponse[MessageResponse])
async def delete_rule(rule_id: str, _: AdminUser, service: ShippingServiceDep) -> APIResponse[MessageResponse]:
    await service.rules.delete(rule_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))
