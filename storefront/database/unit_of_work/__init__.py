# ==============================================================================
# UNIT OF WORK PACKAGE INITIALIZATION
# ==============================================================================

from storefront.database.unit_of_work.uow import UnitOfWork

__all__ = ["UnitOfWork"]
