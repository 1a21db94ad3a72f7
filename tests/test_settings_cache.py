# ==============================================================================
# SETTINGS CACHE TESTS
# ==============================================================================
# TTL behaviour of the settings accessor, driven by a fake clock
# ==============================================================================

from decimal import Decimal

import pytest

from storefront.core.exceptions import NotFoundError
from storefront.services.settings_service import CacheEntry, SettingsManager


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_cache_entry_expiry_is_inclusive():
    entry = CacheEntry(value=1, expires_at=10.0)

    assert not entry.is_expired(9.99)
    assert entry.is_expired(10.0)


class TestSettingsCache:

    @pytest.mark.asyncio
    async def test_value_served_from_cache_until_ttl(self, adapter):
        clock = FakeClock()
        manager = SettingsManager(adapter, ttl=300, clock=clock)
        other_process = SettingsManager(adapter, ttl=300, clock=clock)

        assert await manager.get("tax_rate") == 8.5

        await other_process.set("tax_rate", 10)
        assert await manager.get("tax_rate") == 8.5

        clock.advance(299)
        assert await manager.get("tax_rate") == 8.5

        clock.advance(1)
        assert await manager.get("tax_rate") == 10

    @pytest.mark.asyncio
    async def test_set_refreshes_own_entry(self, adapter):
        manager = SettingsManager(adapter, ttl=300, clock=FakeClock())

        assert await manager.get("currency") == "USD"
        await manager.set("currency", "EUR")

        assert await manager.get("currency") == "EUR"

    @pytest.mark.asyncio
    async def test_delete_evicts_entry(self, adapter):
        manager = SettingsManager(adapter, ttl=300, clock=FakeClock())

        assert await manager.get("store_name") == "My Store"
        await manager.delete("store_name")

        assert await manager.get("store_name", "fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_missing_key_returns_default_and_is_not_cached(self, adapter):
        manager = SettingsManager(adapter, ttl=300, clock=FakeClock())

        assert await manager.get("loyalty_points", 0) == 0
        await SettingsManager(adapter).set("loyalty_points", 5)

        assert await manager.get("loyalty_points", 0) == 5

    @pytest.mark.asyncio
    async def test_keys_are_normalized(self, adapter):
        manager = SettingsManager(adapter, ttl=300, clock=FakeClock())

        await manager.set("  Store Motto ", "Buy more")

        assert await manager.get("store_motto") == "Buy more"
        setting = await manager.get_setting("STORE MOTTO")
        assert setting.key == "store_motto"
        assert setting.category == "general"

    @pytest.mark.asyncio
    async def test_delete_unknown_key(self, adapter):
        manager = SettingsManager(adapter)

        with pytest.raises(NotFoundError):
            await manager.delete("no_such_key")

    @pytest.mark.asyncio
    async def test_typed_helpers(self, adapter):
        manager = SettingsManager(adapter)

        assert await manager.is_tax_enabled() is True
        assert await manager.get_tax_rate() == Decimal("8.5")
        assert await manager.get_free_shipping_threshold() == Decimal("50")
        assert await manager.is_payment_method_enabled("stripe") is True
        assert await manager.is_payment_method_enabled("paypal") is False

    @pytest.mark.asyncio
    async def test_non_numeric_value_falls_back(self, adapter):
        manager = SettingsManager(adapter)

        await manager.set("tax_rate", "a lot")
        assert await manager.get_tax_rate() == Decimal("0")

    @pytest.mark.asyncio
    async def test_initialize_defaults_keeps_existing(self, adapter):
        manager = SettingsManager(adapter)
        await manager.set("flat_rate", 12)

        inserted = await manager.initialize_defaults()

        assert inserted == 0
        assert await manager.get("flat_rate") == 12
