# ==============================================================================
# BASE REPOSITORY - Session-Bound Data Access
# ==============================================================================

from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain_models.base import SQLBase

ModelType = TypeVar("ModelType", bound=SQLBase)


class BaseRepository(Generic[ModelType]):
    """
    Repository over one model, bound to a ``UnitOfWork`` session.

    Repositories never open, commit or close sessions; every write they
    stage belongs to the enclosing unit's transaction.
    """

    model: Optional[Type[ModelType]] = None

    def __init__(self, session: AsyncSession) -> None:
        if self.model is None:
            raise ValueError(f"{self.__class__.__name__} must set `model`")
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session
