# ==============================================================================
# DATABASE FACTORY - Adapter Instantiation & Lifecycle Management
# ==============================================================================
# Factory Pattern for creating and managing database adapters
# Singleton caching for efficient resource utilization
# ==============================================================================

from __future__ import annotations

import logging
from typing import Dict, Optional

from storefront.core.constants import DatabaseConstants as DC
from storefront.core.exceptions import DatabaseError
from storefront.core.settings import settings, DatabaseType
from storefront.database.adapters.postgresql_adapter import PostgreSQLAdapter
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.adapters.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """
    Factory class for creating and managing database adapters.

    Class Attributes:
        _instances: Cache of initialized adapter instances

    Example:
        >>> await DatabaseFactory.initialize()
        >>> adapter = DatabaseFactory.get_adapter()
        >>> product = await adapter.get_by_id("products", product_id)
        >>> await DatabaseFactory.shutdown()
    """

    _instances: Dict[DatabaseType, SQLAlchemyAdapter] = {}

    @classmethod
    def create_adapter(
        cls,
        db_type: Optional[DatabaseType] = None,
        database_url: Optional[str] = None,
    ) -> SQLAlchemyAdapter:
        """
        Create and return the adapter for ``db_type``.

        Returns the cached instance if available.

        Raises:
            ValueError: If database type is not supported
        """
        db_type = db_type or settings.DATABASE_TYPE

        if db_type in cls._instances:
            return cls._instances[db_type]

        adapter: SQLAlchemyAdapter

        if db_type == DatabaseType.SQLITE:
            adapter = SQLiteAdapter(database_url=database_url)
            logger.info("Created SQLite adapter")

        elif db_type == DatabaseType.POSTGRESQL:
            adapter = PostgreSQLAdapter(database_url=database_url)
            logger.info("Created PostgreSQL adapter")

        else:
            raise ValueError(f"Unsupported database type: {db_type}")

        cls._instances[db_type] = adapter
        return adapter

    @classmethod
    async def initialize(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> SQLAlchemyAdapter:
        """
        Create the adapter, connect it and register all models.

        Should be called at application startup.

        Raises:
            DatabaseError: If connection fails
        """
        adapter = cls.create_adapter(db_type)

        try:
            cls._register_models(adapter)
            await adapter.connect()
            logger.info(
                f"Database initialized: {db_type or settings.DATABASE_TYPE}"
            )
            return adapter
        except DatabaseError:
            raise
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise DatabaseError(f"Failed to initialize database: {e}")

    @classmethod
    def _register_models(cls, adapter: SQLAlchemyAdapter) -> None:
        """Register all domain models with the adapter."""
        from storefront.domain_models import (
            Address,
            CartItem,
            Category,
            Order,
            OrderItem,
            Product,
            ProductImage,
            ProductVariant,
            Setting,
            ShippingMethod,
            ShippingRate,
            ShippingRule,
            ShippingZone,
            User,
        )

        adapter.register_model(DC.USERS_COLLECTION, User)
        adapter.register_model(DC.ADDRESSES_COLLECTION, Address)
        adapter.register_model(DC.CATEGORIES_COLLECTION, Category)
        adapter.register_model(DC.PRODUCTS_COLLECTION, Product)
        adapter.register_model(DC.PRODUCT_VARIANTS_COLLECTION, ProductVariant)
        adapter.register_model(DC.PRODUCT_IMAGES_COLLECTION, ProductImage)
        adapter.register_model(DC.CART_ITEMS_COLLECTION, CartItem)
        adapter.register_model(DC.ORDERS_COLLECTION, Order)
        adapter.register_model(DC.ORDER_ITEMS_COLLECTION, OrderItem)
        adapter.register_model(DC.SETTINGS_COLLECTION, Setting)
        adapter.register_model(DC.SHIPPING_METHODS_COLLECTION, ShippingMethod)
        adapter.register_model(DC.SHIPPING_ZONES_COLLECTION, ShippingZone)
        adapter.register_model(DC.SHIPPING_RATES_COLLECTION, ShippingRate)
        adapter.register_model(DC.SHIPPING_RULES_COLLECTION, ShippingRule)

        logger.info("Registered all domain models with adapter")

    @classmethod
    async def shutdown(cls) -> None:
        """
        Close all database connections.

        Should be called at application shutdown.
        """
        for db_type, adapter in cls._instances.items():
            try:
                await adapter.disconnect()
                logger.info(f"Disconnected: {db_type}")
            except Exception as e:
                logger.error(f"Error disconnecting {db_type}: {e}")

        cls._instances.clear()
        logger.info("All database connections closed")

    @classmethod
    def get_adapter(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> SQLAlchemyAdapter:
        """
        Get the existing adapter instance.

        Raises:
            RuntimeError: If adapter not initialized
        """
        db_type = db_type or settings.DATABASE_TYPE

        if db_type not in cls._instances:
            raise RuntimeError(
                f"Database adapter for {db_type} not initialized. "
                f"Call DatabaseFactory.initialize() first."
            )

        return cls._instances[db_type]

    @classmethod
    def is_initialized(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> bool:
        db_type = db_type or settings.DATABASE_TYPE
        return db_type in cls._instances

    @classmethod
    async def health_check(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> bool:
        """Return True if the adapter exists and answers a trivial query."""
        if not cls.is_initialized(db_type):
            return False
        return await cls.get_adapter(db_type).health_check()

    @classmethod
    def reset(cls) -> None:
        """
        Reset factory state.

        Clears adapter cache without disconnecting. Used by tests.
        """
        cls._instances.clear()
