# ==============================================================================
# BASE SERVICE - Generic CRUD over a Registered Collection
# ==============================================================================
# Catalog, address, user and shipping services build on this class
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from storefront.core.exceptions import NotFoundError
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.utils.helpers import calculate_offset, paginate_results

EntityType = TypeVar("EntityType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)


class BaseService(ABC, Generic[EntityType, CreateSchemaType, UpdateSchemaType, ResponseSchemaType]):
    """
    CRUD for one collection registered with the SQL adapter.

    Subclasses provide ``_to_response`` and may override ``_prepare``
    to convert request payloads into column values.

    Example:
        >>> class ZoneService(BaseService[ShippingZone, ZoneCreate, ZoneUpdate, ZoneResponse]):
        ...     def _to_response(self, entity):
        ...         return ZoneResponse.model_validate(entity)
    """

    _not_found_message: Optional[str] = None

    def __init__(self, adapter: SQLAlchemyAdapter, collection_name: str) -> None:
        self._adapter = adapter
        self._collection_name = collection_name

    @abstractmethod
    def _to_response(self, entity: Any) -> ResponseSchemaType:
        """Build the response schema for a stored row."""

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Hook applied to create and update payloads before they are written."""
        return data

    def _not_found(self, id: Any) -> NotFoundError:
        return NotFoundError(
            message=self._not_found_message or f"{self._collection_name} not found",
            resource_type=self._collection_name,
            resource_id=id,
        )

    # ==========================================================================
    # CRUD
    # ==========================================================================

    async def create(self, schema: CreateSchemaType) -> ResponseSchemaType:
        data = self._prepare(schema.model_dump())
        row = await self._adapter.create(self._collection_name, data)
        return self._to_response(row)

    async def get_by_id(self, id: Any) -> ResponseSchemaType:
        row = await self._adapter.get_by_id(self._collection_name, id)
        if row is None:
            raise self._not_found(id)
        return self._to_response(row)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[ResponseSchemaType]:
        rows = await self._adapter.get_all(
            self._collection_name,
            skip=skip,
            limit=limit,
            filters=filters,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return [self._to_response(row) for row in rows]

    async def update(self, id: Any, schema: UpdateSchemaType) -> ResponseSchemaType:
        """
        Apply the fields set on ``schema``; unset fields keep their value.

        Raises:
            NotFoundError: Unknown ID
        """
        data = self._prepare(schema.model_dump(exclude_unset=True))
        row = await self._adapter.update(self._collection_name, id, data)
        if row is None:
            raise self._not_found(id)
        return self._to_response(row)

    async def delete(self, id: Any) -> bool:
        """Hard delete. Catalog services override this with a soft delete."""
        if not await self._adapter.delete(self._collection_name, id):
            raise self._not_found(id)
        return True

    async def get_paginated(
        self,
        page: int = 1,
        page_size: int = 20,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> Dict[str, Any]:
        """
        One page of rows plus pagination metadata.

        Returns:
            Dict with items, total, page, page_size, pages
        """
        items = await self.get_all(
            skip=calculate_offset(page, page_size),
            limit=page_size,
            filters=filters,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        total = await self._adapter.count(self._collection_name, filters)
        return paginate_results(items, page, page_size, total)
