# ==============================================================================
# ADDRESS SERVICE - Saved Customer Addresses
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy import select, update

from storefront.core.constants import DatabaseConstants as DC, ErrorMessages
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.address import Address, AddressType
from storefront.schemas.address import AddressCreate, AddressResponse, AddressUpdate
from storefront.services.base_service import BaseService

logger = logging.getLogger(__name__)


class AddressService(
    BaseService[Address, AddressCreate, AddressUpdate, AddressResponse]
):
    """
    Address book scoped to one user.

    Every lookup filters on ``user_id`` so a caller never sees another
    customer's address; a foreign ID is reported as not found.
    """

    _not_found_message = ErrorMessages.ADDRESS_NOT_FOUND

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.ADDRESSES_COLLECTION)

    def _to_response(self, entity: Any) -> AddressResponse:
        return AddressResponse.model_validate(entity)

    async def _owned(self, user_id: str, address_id: str) -> Address:
        address = await self._adapter.find_one(
            self._collection_name,
            {"id": address_id, "user_id": user_id},
        )
        if address is None:
            raise self._not_found(address_id)
        return address

    async def _clear_defaults(self, user_id: str, address_type: Any, keep_id: str) -> None:
        async with self._adapter.session() as session:
            await session.execute(
                update(Address)
                .where(
                    Address.user_id == user_id,
                    Address.type == AddressType(address_type),
                    Address.id != keep_id,
                )
                .values(is_default=False)
            )

    async def list_for_user(self, user_id: str) -> List[AddressResponse]:
        async with self._adapter.session() as session:
            result = await session.execute(
                select(Address)
                .where(Address.user_id == user_id)
                .order_by(Address.is_default.desc(), Address.created_at)
            )
            return [self._to_response(a) for a in result.scalars().all()]

    async def get_for_user(self, user_id: str, address_id: str) -> AddressResponse:
        return self._to_response(await self._owned(user_id, address_id))

    async def create_for_user(self, user_id: str, schema: AddressCreate) -> AddressResponse:
        data = schema.model_dump()
        data["user_id"] = user_id
        data["type"] = AddressType(data["type"])

        address = await self._adapter.create(self._collection_name, data)
        if address.is_default:
            await self._clear_defaults(user_id, address.type, address.id)
        return self._to_response(address)

    async def update_for_user(
        self,
        user_id: str,
        address_id: str,
        schema: AddressUpdate,
    ) -> AddressResponse:
        await self._owned(user_id, address_id)
        data = schema.model_dump(exclude_unset=True)
        if data.get("type"):
            data["type"] = AddressType(data["type"])
        if data.get("country"):
            data["country"] = data["country"].upper()

        address = await self._adapter.update(self._collection_name, address_id, data)
        if address.is_default:
            await self._clear_defaults(user_id, address.type, address.id)
        return self._to_response(address)

    async def delete_for_user(self, user_id: str, address_id: str) -> bool:
        await self._owned(user_id, address_id)
        return await self.delete(address_id)

    async def set_default(self, user_id: str, address_id: str) -> AddressResponse:
        """Flag an address as the default for its type, clearing its siblings."""
        address = await self._owned(user_id, address_id)
        await self._clear_defaults(user_id, address.type, address.id)
        address = await self._adapter.update(
            self._collection_name, address_id, {"is_default": True},
        )
        logger.info(f"Address {address_id} is now the default {address.type.value} address")
        return self._to_response(address)
