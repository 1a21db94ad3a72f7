# ==============================================================================
# REPOSITORIES PACKAGE INITIALIZATION
# ==============================================================================

"""
Repository Pattern Implementation
=================================

Session-bound repositories used inside a ``UnitOfWork``:
- BaseRepository: Generic query helpers over one model
- InventoryRepository: Conditional stock decrements
- OrderRepository: Order persistence and numbering checks
"""

from storefront.database.repositories.base_repository import BaseRepository
from storefront.database.repositories.inventory_repository import InventoryRepository
from storefront.database.repositories.order_repository import OrderRepository

__all__ = [
    "BaseRepository",
    "InventoryRepository",
    "OrderRepository",
]
