# ==============================================================================
# ADDRESS ENDPOINTS - Customer Address Book
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from storefront.api.dependencies import AddressServiceDep, CurrentUserID
from storefront.core.constants import SuccessMessages
from storefront.schemas.address import AddressCreate, AddressResponse, AddressUpdate
from storefront.schemas.base import APIResponse, MessageResponse

router = APIRouter(prefix="/addresses", tags=["Addresses"])


@router.get("", response_model=APIResponse[List[AddressResponse]])
async def list_addresses(
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[List[AddressResponse]]:
    return APIResponse.ok(data=await service.list_for_user(user_id))


@router.post(
    "",
    response_model=APIResponse[AddressResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_address(
    schema: AddressCreate,
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[AddressResponse]:
    address = await service.create_for_user(user_id, schema)
    return APIResponse.ok(data=address, message=SuccessMessages.CREATED)


@router.get("/{address_id}", response_model=APIResponse[AddressResponse])
async def get_address(
    address_id: str,
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[AddressResponse]:
    return APIResponse.ok(data=await service.get_for_user(user_id, address_id))


@router.put("/{address_id}", response_model=APIResponse[AddressResponse])
async def update_address(
    address_id: str,
    schema: AddressUpdate,
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[AddressResponse]:
    address = await service.update_for_user(user_id, address_id, schema)
    return APIResponse.ok(data=address, message=SuccessMessages.UPDATED)


@router.delete("/{address_id}", response_model=APIResponse[MessageResponse])
async def delete_address(
    address_id: str,
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[MessageResponse]:
    await service.delete_for_user(user_id, address_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


@router.post("/{address_id}/default", response_model=APIResponse[AddressResponse])
async def set_default_address(
    address_id: str,
    user_id: CurrentUserID,
    service: AddressServiceDep,
) -> APIResponse[AddressResponse]:
    return APIResponse.ok(data=await service.set_default(user_id, address_id))
