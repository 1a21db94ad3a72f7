# ==============================================================================
# ORDER ENDPOINTS - Order History & Fulfilment
# ==============================================================================

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from storefront.api.dependencies import AdminUser, CurrentUser, OrderServiceDep
from storefront.core.constants import APIConstants, SuccessMessages
from storefront.schemas.base import (
    APIResponse,
    BulkDeleteRequest,
    BulkDeleteResult,
    PaginatedResponse,
)
from storefront.schemas.order import (
    BulkStatusResult,
    BulkStatusUpdate,
    OrderResponse,
    OrderStatusUpdate,
    OrderStatusValue,
    OrderTracking,
    PaymentStatusValue,
)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get(
    "",
    response_model=APIResponse[PaginatedResponse[OrderResponse]],
    summary="List orders",
    description="Admins see every order; customers see their own.",
)
async def list_orders(
    user: CurrentUser,
    service: OrderServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = APIConstants.DEFAULT_PAGE_SIZE,
    status: Optional[OrderStatusValue] = None,
    payment_status: Optional[PaymentStatusValue] = None,
    search: Optional[str] = None,
) -> APIResponse[PaginatedResponse[OrderResponse]]:
    result = await service.list_orders(
        user_id=user.user_id,
        is_admin=user.is_admin,
        page=page,
        page_size=page_size,
        status=status,
        payment_status=payment_status,
        search=search,
    )
    return APIResponse.ok(data=PaginatedResponse[OrderResponse](**result))


@router.patch(
    "/bulk/status",
    response_model=APIResponse[BulkStatusResult],
    summary="Update many orders' status (admin)",
)
async def bulk_update_status(
    schema: BulkStatusUpdate,
    _: AdminUser,
    service: OrderServiceDep,
) -> APIResponse[BulkStatusResult]:
    result = await service.bulk_update_status(schema.order_ids, schema.status)
    return APIResponse.ok(data=result)


@router.delete(
    "/bulk",
    response_model=APIResponse[BulkDeleteResult],
    summary="Delete orders (admin)",
)
async def bulk_delete_orders(
    schema: BulkDeleteRequest,
    _: AdminUser,
    service: OrderServiceDep,
) -> APIResponse[BulkDeleteResult]:
    deleted = await service.bulk_delete(schema.ids)
    return APIResponse.ok(data=BulkDeleteResult(deleted=deleted), message=SuccessMessages.DELETED)


router.add_api_route(
    "/bulk/delete",
    bulk_delete_orders,
    methods=["POST"],
    response_model=APIResponse[BulkDeleteResult],
    include_in_schema=False,
)


@router.get("/{order_id}", response_model=APIResponse[OrderResponse])
async def get_order(
    order_id: str,
    user: CurrentUser,
    service: OrderServiceDep,
) -> APIResponse[OrderResponse]:
    order = await service.get_order(order_id, user.user_id, is_admin=user.is_admin)
    return APIResponse.ok(data=order)


@router.get("/{order_id}/tracking", response_model=APIResponse[OrderTracking])
async def get_tracking(
    order_id: str,
    user: CurrentUser,
    service: OrderServiceDep,
) -> APIResponse[OrderTracking]:
    tracking = await service.tracking(order_id, user.user_id, is_admin=user.is_admin)
    return APIResponse.ok(data=tracking)


@router.patch(
    "/{order_id}/status",
    response_model=APIResponse[OrderResponse],
    summary="Update order status (admin)",
)
async def update_status(
    order_id: str,
    schema: OrderStatusUpdate,
    _: AdminUser,
    service: OrderServiceDep,
) -> APIResponse[OrderResponse]:
    order = await service.update_status(order_id, schema)
    return APIResponse.ok(data=order, message=SuccessMessages.ORDER_STATUS_UPDATED)
