# ==============================================================================
# USERS ENDPOINTS - User Profile Routes
# ==============================================================================

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from storefront.api.dependencies import AdminUser, CurrentUserID, UserServiceDep
from storefront.core.constants import APIConstants
from storefront.schemas.base import (
    APIResponse,
    BulkDeleteRequest,
    BulkDeleteResult,
    PaginatedResponse,
)
from storefront.schemas.user import UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=APIResponse[UserResponse],
    summary="Get current user",
)
async def get_me(
    user_id: CurrentUserID,
    service: UserServiceDep,
) -> APIResponse[UserResponse]:
    user = await service.get_by_id(user_id)
    return APIResponse.ok(data=user)


@router.put(
    "/me",
    response_model=APIResponse[UserResponse],
    summary="Update current user",
)
async def update_me(
    user_id: CurrentUserID,
    schema: UserUpdate,
    service: UserServiceDep,
) -> APIResponse[UserResponse]:
    user = await service.update(user_id, schema)
    return APIResponse.ok(data=user, message="Profile updated successfully")


@router.get(
    "",
    response_model=APIResponse[PaginatedResponse[UserResponse]],
    summary="List users (admin)",
)
async def list_users(
    _: AdminUser,
    service: UserServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = APIConstants.DEFAULT_PAGE_SIZE,
) -> APIResponse[PaginatedResponse[UserResponse]]:
    result = await service.get_paginated(
        page=page,
        page_size=page_size,
        sort_by="created_at",
        sort_order="desc",
    )
    return APIResponse.ok(data=PaginatedResponse[UserResponse](**result))


@router.delete(
    "/bulk",
    response_model=APIResponse[BulkDeleteResult],
    summary="Deactivate customers (admin)",
    description="Soft delete; admin accounts among ``ids`` are skipped.",
)
async def bulk_delete_users(
    schema: BulkDeleteRequest,
    _: AdminUser,
    service: UserServiceDep,
) -> APIResponse[BulkDeleteResult]:
    deleted = await service.deactivate_customers(schema.ids)
    return APIResponse.ok(data=BulkDeleteResult(deleted=deleted))


# Clients that cannot send a DELETE body use the POST form
router.add_api_route(
    "/bulk/delete",
    bulk_delete_users,
    methods=["POST"],
    response_model=APIResponse[BulkDeleteResult],
    include_in_schema=False,
)
