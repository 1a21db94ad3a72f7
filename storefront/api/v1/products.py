# ==============================================================================
# PRODUCT ENDPOINTS - Catalog
# ==============================================================================
# Reads are public; writes require the admin role
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Query, status

from storefront.api.dependencies import AdminUser, ProductServiceDep
from storefront.core.constants import APIConstants, SuccessMessages
from storefront.schemas.base import APIResponse, MessageResponse, PaginatedResponse
from storefront.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductImageCreate,
    ProductImageResponse,
    ProductResponse,
    ProductUpdate,
    VariantCreate,
    VariantResponse,
    VariantUpdate,
)

router = APIRouter(prefix="/products", tags=["Products"])


# ==============================================================================
# PRODUCTS
# ==============================================================================

@router.get(
    "",
    response_model=APIResponse[PaginatedResponse[ProductResponse]],
    summary="List products",
)
async def list_products(
    service: ProductServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = APIConstants.DEFAULT_PAGE_SIZE,
    category: Annotated[Optional[str], Query(description="Category ID")] = None,
    search: Optional[str] = None,
    min_price: Annotated[Optional[Decimal], Query(ge=0)] = None,
    max_price: Annotated[Optional[Decimal], Query(ge=0)] = None,
    is_active: Optional[bool] = True,
    featured: Optional[bool] = None,
    sort_by: str = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> APIResponse[PaginatedResponse[ProductResponse]]:
    result = await service.search(
        page=page,
        page_size=page_size,
        category_id=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        is_active=is_active,
        featured=featured,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return APIResponse.ok(data=PaginatedResponse[ProductResponse](**result))


@router.get(
    "/featured",
    response_model=APIResponse[List[ProductResponse]],
    summary="Featured products",
)
async def featured_products(
    service: ProductServiceDep,
    limit: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = 8,
) -> APIResponse[List[ProductResponse]]:
    return APIResponse.ok(data=await service.featured(limit=limit))


@router.get(
    "/related/{product_id}",
    response_model=APIResponse[List[ProductResponse]],
    summary="Products from the same category",
)
async def related_products(
    product_id: str,
    service: ProductServiceDep,
    limit: Annotated[int, Query(ge=1, le=APIConstants.MAX_PAGE_SIZE)] = 4,
) -> APIResponse[List[ProductResponse]]:
    return APIResponse.ok(data=await service.related(product_id, limit=limit))


@router.get(
    "/{id_or_slug}",
    response_model=APIResponse[ProductDetailResponse],
    summary="Get product by ID or slug",
)
async def get_product(
    id_or_slug: str,
    service: ProductServiceDep,
) -> APIResponse[ProductDetailResponse]:
    return APIResponse.ok(data=await service.get(id_or_slug))


@router.post(
    "",
    response_model=APIResponse[ProductDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    schema: ProductCreate,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[ProductDetailResponse]:
    product = await service.create(schema)
    return APIResponse.ok(data=product, message=SuccessMessages.CREATED)


@router.put("/{product_id}", response_model=APIResponse[ProductResponse])
async def update_product(
    product_id: str,
    schema: ProductUpdate,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[ProductResponse]:
    product = await service.update(product_id, schema)
    return APIResponse.ok(data=product, message=SuccessMessages.UPDATED)


@router.delete("/{product_id}", response_model=APIResponse[MessageResponse])
async def delete_product(
    product_id: str,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[MessageResponse]:
    await service.delete(product_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


# ==============================================================================
# VARIANTS
# ==============================================================================

@router.get("/{product_id}/variants", response_model=APIResponse[List[VariantResponse]])
async def list_variants(
    product_id: str,
    service: ProductServiceDep,
) -> APIResponse[List[VariantResponse]]:
    return APIResponse.ok(data=await service.list_variants(product_id))


@router.post(
    "/{product_id}/variants",
    response_model=APIResponse[VariantResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_variant(
    product_id: str,
    schema: VariantCreate,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[VariantResponse]:
    variant = await service.add_variant(product_id, schema)
    return APIResponse.ok(data=variant, message=SuccessMessages.CREATED)


@router.put("/{product_id}/variants/{variant_id}", response_model=APIResponse[VariantResponse])
async def update_variant(
    product_id: str,
    variant_id: str,
    schema: VariantUpdate,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[VariantResponse]:
    variant = await service.update_variant(product_id, variant_id, schema)
    return APIResponse.ok(data=variant, message=SuccessMessages.UPDATED)


@router.delete("/{product_id}/variants/{variant_id}", response_model=APIResponse[MessageResponse])
async def delete_variant(
    product_id: str,
    variant_id: str,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[MessageResponse]:
    await service.delete_variant(product_id, variant_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


# ==============================================================================
# IMAGES
# ==============================================================================

@router.post(
    "/{product_id}/images",
    response_model=APIResponse[ProductImageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_image(
    product_id: str,
    schema: ProductImageCreate,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[ProductImageResponse]:
    return APIResponse.ok(data=await service.add_image(product_id, schema))


@router.delete("/{product_id}/images/{image_id}", response_model=APIResponse[MessageResponse])
async def delete_image(
    product_id: str,
    image_id: str,
    _: AdminUser,
    service: ProductServiceDep,
) -> APIResponse[MessageResponse]:
    await service.delete_image(product_id, image_id)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))
