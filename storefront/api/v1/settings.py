# ==============================================================================
# SETTINGS ENDPOINTS - Store Configuration
# ==============================================================================
# Admin only, except the public subset
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body

from storefront.api.dependencies import AdminUser, SettingsManagerDep
from storefront.core.constants import SuccessMessages
from storefront.schemas.base import APIResponse, MessageResponse
from storefront.schemas.setting import SettingImport, SettingResponse, SettingUpdate

router = APIRouter(prefix="/settings", tags=["Settings"])

Grouped = Dict[str, Dict[str, Any]]


@router.get("", response_model=APIResponse[Grouped], summary="All settings, grouped by category")
async def get_all_settings(
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[Grouped]:
    return APIResponse.ok(data=await manager.get_all())


@router.get("/public", response_model=APIResponse[Grouped], summary="Public settings")
async def get_public_settings(
    manager: SettingsManagerDep,
) -> APIResponse[Grouped]:
    return APIResponse.ok(data=await manager.get_all(public_only=True))


@router.get("/category/{category}", response_model=APIResponse[Dict[str, Any]])
async def get_category_settings(
    category: str,
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[Dict[str, Any]]:
    return APIResponse.ok(data=await manager.get_by_category(category))


@router.put("/category/{category}", response_model=APIResponse[Dict[str, Any]])
async def update_category_settings(
    category: str,
    _: AdminUser,
    manager: SettingsManagerDep,
    values: Dict[str, Any] = Body(...),
) -> APIResponse[Dict[str, Any]]:
    updated = await manager.set_category(category, values)
    return APIResponse.ok(data=updated, message=SuccessMessages.UPDATED)


@router.get("/key/{key}", response_model=APIResponse[SettingResponse])
async def get_setting(
    key: str,
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[SettingResponse]:
    return APIResponse.ok(data=await manager.get_setting(key))


@router.put("/key/{key}", response_model=APIResponse[SettingResponse])
async def update_setting(
    key: str,
    schema: SettingUpdate,
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[SettingResponse]:
    setting = await manager.set(
        key,
        schema.value,
        category=schema.category,
        description=schema.description,
        is_public=schema.is_public,
    )
    return APIResponse.ok(data=setting, message=SuccessMessages.UPDATED)


@router.delete("/key/{key}", response_model=APIResponse[MessageResponse])
async def delete_setting(
    key: str,
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[MessageResponse]:
    await manager.delete(key)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.DELETED))


@router.post("/initialize", response_model=APIResponse[Dict[str, int]])
async def initialize_settings(
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[Dict[str, int]]:
    inserted = await manager.initialize_defaults()
    return APIResponse.ok(data={"inserted": inserted}, message=SuccessMessages.SETTINGS_INITIALIZED)


@router.get("/export", response_model=APIResponse[List[SettingResponse]])
async def export_settings(
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[List[SettingResponse]]:
    return APIResponse.ok(data=await manager.export())


@router.post("/import", response_model=APIResponse[Dict[str, int]])
async def import_settings(
    schema: SettingImport,
    _: AdminUser,
    manager: SettingsManagerDep,
) -> APIResponse[Dict[str, int]]:
    imported = await manager.import_settings(
        [entry.model_dump() for entry in schema.settings]
    )
    return APIResponse.ok(data={"imported": imported}, message=SuccessMessages.SETTINGS_IMPORTED)
