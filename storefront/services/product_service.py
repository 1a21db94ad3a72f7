# ==============================================================================
# PRODUCT SERVICE - Catalog Management
# ==============================================================================
# Business logic for products, variants and images
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.constants import DatabaseConstants as DC, ErrorMessages
from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.category import Category
from storefront.domain_models.product import Product, ProductImage, ProductVariant
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
from storefront.services.base_service import BaseService
from storefront.utils.helpers import calculate_offset, paginate_results, slugify

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("name", "price", "created_at", "updated_at", "quantity", "sku")


class ProductService(
    BaseService[Product, ProductCreate, ProductUpdate, ProductResponse]
):
    """
    Product service for catalog management.

    SKUs are unique and upper-cased; slugs are derived from the name
    and suffixed ``-2``, ``-3``... on collision. Deletion is soft.
    """

    _not_found_message = ErrorMessages.PRODUCT_NOT_FOUND

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.PRODUCTS_COLLECTION)

    def _to_response(self, entity: Any) -> ProductResponse:
        return ProductResponse.model_validate(entity, from_attributes=True)

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    @staticmethod
    async def _sku_taken(session: AsyncSession, sku: str) -> bool:
        product_hit = await session.scalar(select(Product.id).where(Product.sku == sku))
        if product_hit:
            return True
        variant_hit = await session.scalar(select(ProductVariant.id).where(ProductVariant.sku == sku))
        return variant_hit is not None

    @staticmethod
    async def _unique_slug(
        session: AsyncSession,
        base: str,
        exclude_id: Optional[str] = None,
    ) -> str:
        base = slugify(base)
        slug = base
        suffix = 1
        while True:
            hit = await session.scalar(select(Product.id).where(Product.slug == slug))
            if hit is None or hit == exclude_id:
                return slug
            suffix += 1
            slug = f"{base}-{suffix}"

    @staticmethod
    async def _check_category(session: AsyncSession, category_id: Optional[str]) -> None:
        if category_id and await session.get(Category, category_id) is None:
            raise NotFoundError(
                message=ErrorMessages.CATEGORY_NOT_FOUND,
                resource_type="category",
                resource_id=category_id,
            )

    async def _load_detail(self, session: AsyncSession, *conditions: Any) -> Optional[Product]:
        result = await session.execute(
            select(Product)
            .options(selectinload(Product.variants), selectinload(Product.images))
            .where(*conditions)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _build_variant(
        self,
        session: AsyncSession,
        product: Product,
        schema: VariantCreate,
    ) -> ProductVariant:
        sku = schema.sku or f"{product.sku}-{slugify(schema.name).upper()}"
        if await self._sku_taken(session, sku):
            raise ConflictError(message=f"SKU {sku} already exists", field="sku")
        data = schema.model_dump(exclude={"sku"})
        return ProductVariant(product_id=product.id, sku=sku, **data)

    # ==========================================================================
    # PRODUCTS
    # ==========================================================================

    async def create(self, schema: ProductCreate) -> ProductDetailResponse:
        """
        Create a product together with its images and variants.

        Raises:
            ConflictError: SKU or explicit slug already in use
            NotFoundError: Unknown category
        """
        data = schema.model_dump(exclude={"images", "variants"})

        async with self._adapter.session() as session:
            if await self._sku_taken(session, schema.sku):
                raise ConflictError(message=f"SKU {schema.sku} already exists", field="sku")
            await self._check_category(session, schema.category_id)

            if schema.slug:
                data["slug"] = slugify(schema.slug)
                if await session.scalar(select(Product.id).where(Product.slug == data["slug"])):
                    raise ConflictError(message="Product slug already exists", field="slug")
            else:
                data["slug"] = await self._unique_slug(session, schema.name)

            product = Product(**data)
            session.add(product)
            await session.flush()

            for image in schema.images:
                session.add(ProductImage(product_id=product.id, **image.model_dump()))
            for variant in schema.variants:
                session.add(await self._build_variant(session, product, variant))
                await session.flush()

            await session.flush()
            product = await self._load_detail(session, Product.id == product.id)
            response = ProductDetailResponse.model_validate(product)

        logger.info(f"Created product {response.sku} ({response.id})")
        return response

    async def get(self, id_or_slug: str) -> ProductDetailResponse:
        """Look up a product by ID, falling back to its slug."""
        async with self._adapter.session() as session:
            product = await self._load_detail(
                session, or_(Product.id == id_or_slug, Product.slug == id_or_slug),
            )
            if product is None:
                raise self._not_found(id_or_slug)
            return ProductDetailResponse.model_validate(product)

    async def update(self, id: str, schema: ProductUpdate) -> ProductResponse:
        data = schema.model_dump(exclude_unset=True)

        async with self._adapter.session() as session:
            product = await session.get(Product, id)
            if product is None:
                raise self._not_found(id)

            if data.get("sku") and data["sku"] != product.sku:
                if await self._sku_taken(session, data["sku"]):
                    raise ConflictError(message=f"SKU {data['sku']} already exists", field="sku")

            if "category_id" in data:
                await self._check_category(session, data["category_id"])

            if data.get("slug"):
                data["slug"] = slugify(data["slug"])
                hit = await session.scalar(select(Product.id).where(Product.slug == data["slug"]))
                if hit is not None and hit != id:
                    raise ConflictError(message="Product slug already exists", field="slug")

            for key, value in data.items():
                setattr(product, key, value)

            await session.flush()
            await session.refresh(product)
            return self._to_response(product)

    async def delete(self, id: str) -> bool:
        """Soft delete: the product is deactivated, never removed."""
        product = await self._adapter.update(self._collection_name, id, {"is_active": False})
        if product is None:
            raise self._not_found(id)
        logger.info(f"Deactivated product {id}")
        return True

    async def search(
        self,
        page: int = 1,
        page_size: int = 20,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        is_active: Optional[bool] = True,
        featured: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        """
        Filtered, sorted, paginated product listing.

        ``search`` matches name, description or SKU case-insensitively.

        Returns:
            Pagination dict with ``items`` as ProductResponse
        """
        conditions: List[Any] = []
        if category_id:
            conditions.append(Product.category_id == category_id)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
                func.lower(Product.sku).like(pattern),
            ))
        if min_price is not None:
            conditions.append(Product.price >= min_price)
        if max_price is not None:
            conditions.append(Product.price <= max_price)
        if is_active is not None:
            conditions.append(Product.is_active.is_(is_active))
        if featured is not None:
            conditions.append(Product.is_featured.is_(featured))

        column = getattr(Product, sort_by if sort_by in SORTABLE_FIELDS else "created_at")
        order = column.desc() if sort_order.lower() == "desc" else column.asc()
        where = and_(*conditions) if conditions else None

        async with self._adapter.session() as session:
            count_query = select(func.count(Product.id))
            query = select(Product).order_by(order, Product.id)
            if where is not None:
                count_query = count_query.where(where)
                query = query.where(where)

            total = await session.scalar(count_query) or 0
            result = await session.execute(
                query.offset(calculate_offset(page, page_size)).limit(page_size)
            )
            items = [self._to_response(p) for p in result.scalars().all()]

        return paginate_results(items, page, page_size, total)

    async def featured(self, limit: int = 8) -> List[ProductResponse]:
        """Newest active products, flagged ones first."""
        async with self._adapter.session() as session:
            result = await session.execute(
                select(Product)
                .where(Product.is_active.is_(True))
                .order_by(Product.is_featured.desc(), Product.created_at.desc(), Product.id)
                .limit(limit)
            )
            return [self._to_response(p) for p in result.scalars().all()]

    async def related(self, product_id: str, limit: int = 4) -> List[ProductResponse]:
        """
        Other active products from the same category.

        Uncategorised products have no related products.

        Raises:
            NotFoundError: Unknown product
        """
        async with self._adapter.session() as session:
            product = await session.get(Product, product_id)
            if product is None:
                raise self._not_found(product_id)
            if product.category_id is None:
                return []

            result = await session.execute(
                select(Product)
                .where(
                    Product.category_id == product.category_id,
                    Product.id != product_id,
                    Product.is_active.is_(True),
                )
                .order_by(Product.created_at.desc(), Product.id)
                .limit(limit)
            )
            return [self._to_response(p) for p in result.scalars().all()]

    # ==========================================================================
    # VARIANTS
    # ==========================================================================

    async def list_variants(self, product_id: str) -> List[VariantResponse]:
        async with self._adapter.session() as session:
            if await session.get(Product, product_id) is None:
                raise self._not_found(product_id)
            result = await session.execute(
                select(ProductVariant)
                .where(ProductVariant.product_id == product_id)
                .order_by(ProductVariant.created_at)
            )
            return [VariantResponse.model_validate(v) for v in result.scalars().all()]

    async def add_variant(self, product_id: str, schema: VariantCreate) -> VariantResponse:
        """
        Add a variant to a product.

        Raises:
            NotFoundError: Unknown product
            ConflictError: SKU already in use
        """
        async with self._adapter.session() as session:
            product = await session.get(Product, product_id)
            if product is None:
                raise self._not_found(product_id)
            variant = await self._build_variant(session, product, schema)
            session.add(variant)
            await session.flush()
            await session.refresh(variant)
            return VariantResponse.model_validate(variant)

    async def _get_variant(self, session: AsyncSession, product_id: str, variant_id: str) -> ProductVariant:
        variant = await session.get(ProductVariant, variant_id)
        if variant is None or variant.product_id != product_id:
            raise NotFoundError(
                message=ErrorMessages.VARIANT_NOT_FOUND,
                resource_type="product_variant",
                resource_id=variant_id,
            )
        return variant

    async def update_variant(
        self,
        product_id: str,
        variant_id: str,
        schema: VariantUpdate,
    ) -> VariantResponse:
        data = schema.model_dump(exclude_unset=True)
        async with self._adapter.session() as session:
            variant = await self._get_variant(session, product_id, variant_id)
            if data.get("sku") and data["sku"] != variant.sku:
                if await self._sku_taken(session, data["sku"]):
                    raise ConflictError(message=f"SKU {data['sku']} already exists", field="sku")
            for key, value in data.items():
                setattr(variant, key, value)
            await session.flush()
            await session.refresh(variant)
            return VariantResponse.model_validate(variant)

    async def delete_variant(self, product_id: str, variant_id: str) -> bool:
        async with self._adapter.session() as session:
            variant = await self._get_variant(session, product_id, variant_id)
            await session.delete(variant)
        return True

    # ==========================================================================
    # IMAGES
    # ==========================================================================

    async def add_image(self, product_id: str, schema: ProductImageCreate) -> ProductImageResponse:
        async with self._adapter.session() as session:
            if await session.get(Product, product_id) is None:
                raise self._not_found(product_id)
            image = ProductImage(product_id=product_id, **schema.model_dump())
            session.add(image)
            await session.flush()
            return ProductImageResponse.model_validate(image)

    async def delete_image(self, product_id: str, image_id: str) -> bool:
        async with self._adapter.session() as session:
            image = await session.get(ProductImage, image_id)
            if image is None or image.product_id != product_id:
                raise NotFoundError(
                    message="Product image not found",
                    resource_type="product_image",
                    resource_id=image_id,
                )
            await session.delete(image)
        return True
