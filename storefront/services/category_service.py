# ==============================================================================
# CATEGORY SERVICE - Catalog Tree Management
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import func, select, update

from storefront.core.constants import DatabaseConstants as DC, ErrorMessages
from storefront.core.exceptions import BusinessRuleError, ConflictError
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.category import Category
from storefront.domain_models.product import Product
from storefront.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from storefront.services.base_service import BaseService
from storefront.utils.helpers import slugify

logger = logging.getLogger(__name__)


class CategoryService(
    BaseService[Category, CategoryCreate, CategoryUpdate, CategoryResponse]
):
    """
    Category CRUD with slug allocation, a cycle guard on reparenting
    and soft deletion.
    """

    _not_found_message = ErrorMessages.CATEGORY_NOT_FOUND

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.CATEGORIES_COLLECTION)

    def _to_response(self, entity: Any) -> CategoryResponse:
        return CategoryResponse.model_validate(entity)

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    async def _unique_slug(self, base: str, exclude_id: Optional[str] = None) -> str:
        base = slugify(base)
        slug = base
        suffix = 1
        while True:
            existing = await self._adapter.find_one(self._collection_name, {"slug": slug})
            if existing is None or existing.id == exclude_id:
                return slug
            suffix += 1
            slug = f"{base}-{suffix}"

    async def _require(self, category_id: str) -> Category:
        category = await self._adapter.get_by_id(self._collection_name, category_id)
        if category is None:
            raise self._not_found(category_id)
        return category

    async def _descendant_ids(self, category_id: str) -> Set[str]:
        """IDs of every category below ``category_id``."""
        async with self._adapter.session() as session:
            result = await session.execute(select(Category.id, Category.parent_id))
            children: Dict[str, List[str]] = {}
            for child_id, parent_id in result.all():
                if parent_id is not None:
                    children.setdefault(parent_id, []).append(child_id)

        found: Set[str] = set()
        stack = list(children.get(category_id, []))
        while stack:
            current = stack.pop()
            if current in found:
                continue
            found.add(current)
            stack.extend(children.get(current, []))
        return found

    async def _check_parent(self, category_id: Optional[str], parent_id: Optional[str]) -> None:
        if parent_id is None:
            return
        await self._require(parent_id)
        if category_id is None:
            return
        if parent_id == category_id or parent_id in await self._descendant_ids(category_id):
            raise BusinessRuleError(
                message="A category cannot be moved under itself or one of its descendants",
                rule="category_cycle",
                details={"category_id": category_id, "parent_id": parent_id},
            )

    # ==========================================================================
    # CRUD
    # ==========================================================================

    async def create(self, schema: CategoryCreate) -> CategoryResponse:
        data = schema.model_dump()
        await self._check_parent(None, data.get("parent_id"))

        if data.get("slug"):
            data["slug"] = slugify(data["slug"])
            if await self._adapter.exists(self._collection_name, {"slug": data["slug"]}):
                raise ConflictError(message="Category slug already exists", field="slug")
        else:
            data["slug"] = await self._unique_slug(data["name"])

        category = await self._adapter.create(self._collection_name, data)
        logger.info(f"Created category {category.slug}")
        return self._to_response(category)

    async def update(self, id: str, schema: CategoryUpdate) -> CategoryResponse:
        """
        Update a category.

        Raises:
            NotFoundError: Unknown category or parent
            BusinessRuleError: ``parent_id`` would create a cycle
            ConflictError: Slug taken by another category
        """
        await self._require(id)
        data = schema.model_dump(exclude_unset=True)

        if "parent_id" in data:
            await self._check_parent(id, data["parent_id"])

        if data.get("slug"):
            data["slug"] = slugify(data["slug"])
            existing = await self._adapter.find_one(self._collection_name, {"slug": data["slug"]})
            if existing is not None and existing.id != id:
                raise ConflictError(message="Category slug already exists", field="slug")

        category = await self._adapter.update(self._collection_name, id, data)
        return self._to_response(category)

    async def get_by_slug(self, slug: str) -> CategoryResponse:
        category = await self._adapter.find_one(self._collection_name, {"slug": slug})
        if category is None:
            raise self._not_found(slug)
        return self._to_response(category)

    async def list_categories(self, include_inactive: bool = False) -> List[CategoryResponse]:
        filters = None if include_inactive else {"is_active": True}
        return await self.get_all(limit=10_000, filters=filters, sort_by="sort_order")

    async def tree(self, include_inactive: bool = False) -> List[CategoryTreeNode]:
        """Nest the flat listing under each node's parent; orphans become roots."""
        nodes = [
            CategoryTreeNode(**c.model_dump())
            for c in await self.list_categories(include_inactive=include_inactive)
        ]
        by_id = {node.id: node for node in nodes}

        roots: List[CategoryTreeNode] = []
        for node in nodes:
            parent = by_id.get(node.parent_id) if node.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    async def delete(self, id: str, force: bool = False) -> bool:
        """
        Soft-delete a category.

        Refused while active children or active products reference it,
        unless ``force`` is set; forced deletion moves the children up
        to this category's parent.

        Raises:
            NotFoundError: Unknown category
            ConflictError: Category still in use and ``force`` not set
        """
        category = await self._require(id)

        async with self._adapter.session() as session:
            children = await session.scalar(
                select(func.count(Category.id)).where(
                    Category.parent_id == id, Category.is_active.is_(True),
                )
            )
            products = await session.scalar(
                select(func.count(Product.id)).where(
                    Product.category_id == id, Product.is_active.is_(True),
                )
            )

            if (children or products) and not force:
                raise ConflictError(
                    message="Category has active subcategories or products",
                    field="category_id",
                    details={"children": children, "products": products},
                )

            if children:
                await session.execute(
                    update(Category)
                    .where(Category.parent_id == id)
                    .values(parent_id=category.parent_id)
                )

            await session.execute(
                update(Category).where(Category.id == id).values(is_active=False)
            )

        logger.info(f"Deactivated category {id} (force={force})")
        return True

    async def bulk_delete(self, ids: List[str], cascade: bool = False, force: bool = False) -> int:
        """
        Soft-delete several categories at once.

        Returns:
            Number of categories deactivated

        Raises:
            ConflictError: A selected category has active subcategories and
                ``cascade`` is off, or active products remain and ``force`` is off
        """
        targets = set(ids)
        if cascade:
            for category_id in ids:
                targets |= await self._descendant_ids(category_id)
        elif await self._adapter.exists(
            self._collection_name, {"parent_id": ids, "is_active": True},
        ):
            raise ConflictError(
                message="Categories with subcategories can only be deleted with cascade",
                field="ids",
            )

        if not force and await self._adapter.exists(
            DC.PRODUCTS_COLLECTION, {"category_id": targets, "is_active": True},
        ):
            raise ConflictError(
                message="Categories still hold active products",
                field="ids",
            )

        deactivated = await self._adapter.bulk_update(
            self._collection_name, {"id": targets}, {"is_active": False},
        )
        logger.info(f"Deactivated {deactivated} categories (cascade={cascade}, force={force})")
        return deactivated
