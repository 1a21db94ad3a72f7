# ==============================================================================
# CART ENDPOINTS - Shopping Cart
# ==============================================================================
# Owner is the signed-in user, else the X-Session-ID header
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter, status

from storefront.api.dependencies import CartOwnerDep, CartServiceDep, CurrentUserID
from storefront.core.constants import SuccessMessages
from storefront.schemas.base import APIResponse, MessageResponse
from storefront.schemas.cart import (
    CartCountResponse,
    CartItemAdd,
    CartItemResponse,
    CartItemUpdate,
    CartMergeRequest,
    CartResponse,
)

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=APIResponse[CartResponse])
async def get_cart(
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[CartResponse]:
    return APIResponse.ok(data=await service.get_cart(owner))


@router.get("/count", response_model=APIResponse[CartCountResponse])
async def get_cart_count(
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[CartCountResponse]:
    return APIResponse.ok(data=CartCountResponse(count=await service.count(owner)))


@router.post(
    "/items",
    response_model=APIResponse[CartItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_cart_item(
    schema: CartItemAdd,
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[CartItemResponse]:
    item = await service.add_item(owner, schema)
    return APIResponse.ok(data=item, message=SuccessMessages.CART_ITEM_ADDED)


@router.put("/items/{item_id}", response_model=APIResponse[CartItemResponse])
async def update_cart_item(
    item_id: str,
    schema: CartItemUpdate,
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[CartItemResponse]:
    item = await service.update_item(owner, item_id, schema.quantity)
    return APIResponse.ok(data=item, message=SuccessMessages.UPDATED)


@router.delete("/items/{item_id}", response_model=APIResponse[MessageResponse])
async def remove_cart_item(
    item_id: str,
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[MessageResponse]:
    await service.remove_item(owner, item_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


@router.delete("", response_model=APIResponse[MessageResponse])
async def clear_cart(
    owner: CartOwnerDep,
    service: CartServiceDep,
) -> APIResponse[MessageResponse]:
    await service.clear(owner)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.CART_CLEARED))


@router.post("/merge", response_model=APIResponse[CartResponse])
async def merge_cart(
    schema: CartMergeRequest,
    user_id: CurrentUserID,
    service: CartServiceDep,
) -> APIResponse[CartResponse]:
    """Move the anonymous session cart onto the signed-in user."""
    cart = await service.merge(user_id, schema.session_id)
    return APIResponse.ok(data=cart, message=SuccessMessages.CART_MERGED)
