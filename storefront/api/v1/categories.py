# ==============================================================================
# CATEGORY ENDPOINTS - Catalog Tree
# ==============================================================================
# Reads are public; writes require the admin role
# ==============================================================================

from __future__ import annotations

from typing import Annotated, List, Literal

from fastapi import APIRouter, Query, status

from storefront.api.dependencies import AdminUser, CategoryServiceDep, ProductServiceDep
from storefront.core.constants import APIConstants, SuccessMessages
from storefront.schemas.base import APIResponse, BulkDeleteResult, MessageResponse, PaginatedResponse
from storefront.schemas.category import (
    CategoryBulkDelete,
    CategoryCreate,
    CategoryProducts,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from storefront.schemas.product import ProductResponse

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "",
    response_model=APIResponse[List[CategoryTreeNode]],
    summary="List categories",
    description="Flat list (empty ``children``), or nested under parents with ``tree=true``.",
)
async def list_categories(
    service: CategoryServiceDep,
    tree: Annotated[bool, Query()] = False,
    include_inactive: Annotated[bool, Query()] = False,
) -> APIResponse[List[CategoryTreeNode]]:
    if tree:
        return APIResponse.ok(data=await service.tree(include_inactive=include_inactive))
    return APIResponse.ok(data=await service.list_categories(include_inactive=include_inactive))


@router.get("/slug/{slug}", response_model=APIResponse[CategoryResponse])
async def get_category_by_slug(
    slug: str,
    service: CategoryServiceDep,
) -> APIResponse[CategoryResponse]:
    return APIResponse.ok(data=await service.get_by_slug(slug))


@router.delete(
    "/bulk",
    response_model=APIResponse[BulkDeleteResult],
    summary="Deactivate categories (admin)",
)
async def bulk_delete_categories(
    schema: CategoryBulkDelete,
    _: AdminUser,
    service: CategoryServiceDep,
) -> APIResponse[BulkDeleteResult]:
    deleted = await service.bulk_delete(schema.ids, cascade=schema.cascade, force=schema.force)
    return APIResponse.ok(data=BulkDeleteResult(deleted=deleted), message=SuccessMessages.DELETED)


router.add_api_route(
    "/bulk",
    bulk_delete_categories,
    methods=["POST"],
    response_model=APIResponse[BulkDeleteResult],
    include_in_schema=False,
)


@router.get("/{category_id}", response_model=APIResponse[CategoryResponse])
async def get_category(
    category_id: str,
    service: CategoryServiceDep,
) -> APIResponse[CategoryResponse]:
    return APIResponse.ok(data=await service.get_by_id(category_id))


@router.get(
    "/{category_id}/products",
    response_model=APIResponse[CategoryProducts],
    summary="List a category's active products",
)
async def list_category_products(
    category_id: str,
    service: CategoryServiceDep,
    products: ProductServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = APIConstants.DEFAULT_PAGE_SIZE,
    sort_by: str = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> APIResponse[CategoryProducts]:
    category = await service.get_by_id(category_id)
    result = await products.search(
        page=page,
        page_size=page_size,
        category_id=category_id,
        is_active=True,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return APIResponse.ok(data=CategoryProducts(
        category=category,
        products=PaginatedResponse[ProductResponse](**result),
    ))


@router.post(
    "",
    response_model=APIResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    schema: CategoryCreate,
    _: AdminUser,
    service: CategoryServiceDep,
) -> APIResponse[CategoryResponse]:
    category = await service.create(schema)
    return APIResponse.ok(data=category, message=SuccessMessages.CREATED)


@router.put("/{category_id}", response_model=APIResponse[CategoryResponse])
async def update_category(
    category_id: str,
    schema: CategoryUpdate,
    _: AdminUser,
    service: CategoryServiceDep,
) -> APIResponse[CategoryResponse]:
    category = await service.update(category_id, schema)
    return APIResponse.ok(data=category, message=SuccessMessages.UPDATED)


@router.delete("/{category_id}", response_model=APIResponse[MessageResponse])
async def delete_category(
    category_id: str,
    _: AdminUser,
    service: CategoryServiceDep,
    force: Annotated[bool, Query()] = False,
) -> APIResponse[MessageResponse]:
    await service.delete(category_id, force=force)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))
