# ==============================================================================
# SETTINGS SERVICE - Cached Store Configuration Accessor
# ==============================================================================
# Key/value settings with a per-key, per-process TTL cache
# ==============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select

from storefront.core.constants import (
    DEFAULT_STORE_SETTINGS,
    CheckoutConstants,
    ErrorMessages,
    SettingKeys,
)
from storefront.core.exceptions import NotFoundError
from storefront.core.settings import settings
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.factory import DatabaseFactory
from storefront.domain_models.setting import Setting, normalize_setting_key
from storefront.schemas.setting import SettingResponse

logger = logging.getLogger(__name__)


# ==============================================================================
# CACHE ENTRY
# ==============================================================================

@dataclass
class CacheEntry:
    """
    Cached setting value.

    Attributes:
        value: Stored JSON value
        expires_at: Clock reading after which the entry is stale
    """
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


# ==============================================================================
# SETTINGS MANAGER
# ==============================================================================

class SettingsManager:
    """
    In-process accessor for the ``settings`` table.

    ``get`` serves non-null values from a per-key cache for
    ``SETTINGS_CACHE_TTL`` seconds; ``set``/``delete`` refresh or evict
    the entry they touch. Category and full listings always read the
    database. The cache is local to this process: other workers see a
    write only after their own entry expires.

    Attributes:
        _adapter: Database adapter (resolved lazily from the factory)
        _ttl: Cache lifetime in seconds
        _clock: Monotonic clock, injectable for tests
        _cache: Key -> CacheEntry

    Example:
        >>> rate = await settings_manager.get_tax_rate()
        >>> await settings_manager.set("tax_rate", 10, category="tax")
    """

    def __init__(
        self,
        adapter: Optional[SQLAlchemyAdapter] = None,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._adapter = adapter
        self._ttl = float(ttl if ttl is not None else settings.SETTINGS_CACHE_TTL)
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}

    @property
    def adapter(self) -> SQLAlchemyAdapter:
        if self._adapter is not None:
            return self._adapter
        return DatabaseFactory.get_adapter()

    # ==========================================================================
    # CACHE
    # ==========================================================================

    def _cache_get(self, key: str) -> Optional[CacheEntry]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._cache[key]
            return None
        return entry

    def _cache_put(self, key: str, value: Any) -> None:
        if value is None:
            self._cache.pop(key, None)
            return
        self._cache[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl)

    def clear_cache(self) -> None:
        """Drop every cached value."""
        self._cache.clear()

    # ==========================================================================
    # ROW ACCESS
    # ==========================================================================

    async def _find(self, key: str) -> Optional[Setting]:
        async with self.adapter.session() as session:
            result = await session.execute(select(Setting).where(Setting.key == key))
            return result.scalars().first()

    async def _query(self, *conditions: Any) -> List[Setting]:
        async with self.adapter.session() as session:
            query = select(Setting).order_by(Setting.category, Setting.key)
            if conditions:
                query = query.where(*conditions)
            result = await session.execute(query)
            return list(result.scalars().all())

    # ==========================================================================
    # KEY OPERATIONS
    # ==========================================================================

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Return the value stored under ``key``, or ``default``.

        Storage failures are logged and answered with ``default`` so a
        settings outage never fails a checkout quote.
        """
        key = normalize_setting_key(key)

        entry = self._cache_get(key)
        if entry is not None:
            return entry.value

        try:
            row = await self._find(key)
        except Exception as e:
            logger.error(f"Failed to read setting '{key}': {e}")
            return default

        if row is None or row.value is None:
            return default

        self._cache_put(key, row.value)
        return row.value

    async def get_setting(self, key: str) -> SettingResponse:
        """
        Return the full setting row.

        Raises:
            NotFoundError: If ``key`` does not exist
        """
        key = normalize_setting_key(key)
        row = await self._find(key)
        if row is None:
            raise NotFoundError(
                message=ErrorMessages.SETTING_NOT_FOUND,
                resource_type="setting",
                resource_id=key,
            )
        return SettingResponse.model_validate(row)

    async def set(
        self,
        key: str,
        value: Any,
        category: Optional[str] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
    ) -> SettingResponse:
        """
        Insert or update a setting and refresh its cache entry.

        Omitted ``category``/``description``/``is_public`` keep their
        stored values on update; new rows default to ``general``.
        """
        key = normalize_setting_key(key)

        async with self.adapter.session() as session:
            result = await session.execute(select(Setting).where(Setting.key == key))
            row = result.scalars().first()

            if row is None:
                row = Setting(
                    key=key,
                    value=value,
                    category=category or "general",
                    description=description,
                    is_public=bool(is_public),
                )
                session.add(row)
            else:
                row.value = value
                if category is not None:
                    row.category = category
                if description is not None:
                    row.description = description
                if is_public is not None:
                    row.is_public = is_public

            await session.flush()
            await session.refresh(row)
            response = SettingResponse.model_validate(row)

        self._cache_put(key, value)
        logger.info(f"Setting '{key}' updated")
        return response

    async def delete(self, key: str) -> None:
        """
        Remove a setting and evict it from the cache.

        Raises:
            NotFoundError: If ``key`` does not exist
        """
        key = normalize_setting_key(key)

        async with self.adapter.session() as session:
            result = await session.execute(select(Setting).where(Setting.key == key))
            row = result.scalars().first()
            if row is None:
                raise NotFoundError(
                    message=ErrorMessages.SETTING_NOT_FOUND,
                    resource_type="setting",
                    resource_id=key,
                )
            await session.delete(row)

        self._cache.pop(key, None)
        logger.info(f"Setting '{key}' deleted")

    # ==========================================================================
    # BULK OPERATIONS
    # ==========================================================================

    async def get_by_category(self, category: str) -> Dict[str, Any]:
        """Return ``{key: value}`` for one category, always from the database."""
        rows = await self._query(Setting.category == category)
        return {row.key: row.value for row in rows}

    async def get_all(self, public_only: bool = False) -> Dict[str, Dict[str, Any]]:
        """Return settings grouped as ``{category: {key: value}}``."""
        conditions = [Setting.is_public.is_(True)] if public_only else []
        grouped: Dict[str, Dict[str, Any]] = {}
        for row in await self._query(*conditions):
            grouped.setdefault(row.category, {})[row.key] = row.value
        return grouped

    async def set_category(self, category: str, values: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in values.items():
            await self.set(key, value, category=category)
        return await self.get_by_category(category)

    async def export(self) -> List[SettingResponse]:
        return [SettingResponse.model_validate(row) for row in await self._query()]

    async def import_settings(self, entries: List[Dict[str, Any]]) -> int:
        """Upsert each ``{key, value, category?, description?, is_public?}`` entry."""
        for entry in entries:
            await self.set(
                entry["key"],
                entry.get("value"),
                category=entry.get("category"),
                description=entry.get("description"),
                is_public=entry.get("is_public"),
            )
        logger.info(f"Imported {len(entries)} settings")
        return len(entries)

    async def initialize_defaults(self) -> int:
        """
        Insert every default setting that does not exist yet.

        Existing rows are left untouched.

        Returns:
            Number of rows inserted
        """
        inserted = 0
        async with self.adapter.session() as session:
            result = await session.execute(select(Setting.key))
            existing = set(result.scalars().all())

            for default in DEFAULT_STORE_SETTINGS:
                if default["key"] in existing:
                    continue
                session.add(Setting(
                    key=default["key"],
                    value=default["value"],
                    category=default["category"],
                    description=default.get("description"),
                    is_public=default.get("is_public", False),
                ))
                inserted += 1

        if inserted:
            logger.info(f"Seeded {inserted} default settings")
        return inserted

    # ==========================================================================
    # TYPED HELPERS
    # ==========================================================================

    async def _get_decimal(self, key: str, default: str = "0") -> Decimal:
        value = await self.get(key, default)
        try:
            return Decimal(str(value))
        except (ArithmeticError, ValueError):
            logger.warning(f"Setting '{key}' is not numeric: {value!r}")
            return Decimal(default)

    async def is_payment_method_enabled(self, method: str) -> bool:
        key = f"{method}{SettingKeys.PAYMENT_ENABLED_SUFFIX}"
        return bool(await self.get(key, False))

    async def is_tax_enabled(self) -> bool:
        return bool(await self.get(SettingKeys.TAX_ENABLED, False))

    async def get_tax_rate(self) -> Decimal:
        return await self._get_decimal(SettingKeys.TAX_RATE)

    async def get_free_shipping_threshold(self) -> Decimal:
        return await self._get_decimal(SettingKeys.FREE_SHIPPING_THRESHOLD)

    async def get_flat_rate_shipping(self) -> Decimal:
        return await self._get_decimal(SettingKeys.FLAT_RATE)

    async def get_currency(self) -> str:
        return str(await self.get(SettingKeys.CURRENCY, CheckoutConstants.DEFAULT_CURRENCY))

    async def get_store_name(self) -> str:
        return str(await self.get(SettingKeys.STORE_NAME, settings.APP_NAME))


# Process-wide accessor
settings_manager = SettingsManager()
