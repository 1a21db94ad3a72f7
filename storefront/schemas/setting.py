# ==============================================================================
# SETTING SCHEMAS - Store Configuration
# ==============================================================================

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field

from storefront.schemas.base import BaseSchema, TimestampSchema


class SettingUpdate(BaseSchema):
    """Body of ``PUT /settings/key/{key}``."""

    value: Any = None
    category: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    is_public: Optional[bool] = None


class SettingImportEntry(SettingUpdate):
    key: str = Field(..., min_length=1, max_length=100)


class SettingImport(BaseSchema):
    settings: List[SettingImportEntry]


class SettingResponse(TimestampSchema):
    id: str
    key: str
    value: Any = None
    category: str
    description: Optional[str] = None
    is_public: bool
