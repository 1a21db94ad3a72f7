# ==============================================================================
# ADDRESS SCHEMAS - Saved Addresses & Order Address Snapshots
# ==============================================================================

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator

from storefront.domain_models.address import AddressType
from storefront.schemas.base import BaseSchema, TimestampSchema


class AddressFields(BaseSchema):
    """Fields shared by saved addresses and checkout address snapshots."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    company: Optional[str] = Field(None, max_length=255)
    address1: str = Field(..., min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(
        "US",
        min_length=2,
        max_length=2,
        description="ISO 3166-1 alpha-2 country code",
    )
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        return v.upper()


class AddressCreate(AddressFields):
    """Schema for saving a new address."""

    type: Literal["billing", "shipping"] = "shipping"
    is_default: bool = False


class AddressUpdate(BaseSchema):
    """Schema for updating a saved address; omitted fields are unchanged."""

    type: Optional[Literal["billing", "shipping"]] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    company: Optional[str] = Field(None, max_length=255)
    address1: Optional[str] = Field(None, min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    phone: Optional[str] = Field(None, max_length=50)
    is_default: Optional[bool] = None


class AddressResponse(AddressFields, TimestampSchema):
    id: str
    user_id: str
    type: AddressType
    is_default: bool


class AddressSnapshot(AddressFields):
    """Address as copied onto an order; guest orders add contact details."""

    email: Optional[str] = None
    name: Optional[str] = None
