"""
Entity Storage contract consumed by the vault connector.

Storage is partitioned by ``request_context.tenant_id`` and addressed
inside a partition by the entity ``id``. ``remove`` is not required to
signal a missing id; callers check with ``get`` first.
"""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from ..models import RequestContext

T = TypeVar("T", bound=BaseModel)


class EntityStorage(ABC, Generic[T]):
    """Per-tenant keyed store of pydantic entities."""

    def __init__(self, model: type[T]):
        self._model = model

    @property
    def entity_name(self) -> str:
        return self._model.__name__

    @abstractmethod
    async def get(self, request_context: RequestContext, id: str) -> Optional[T]:
        """Return the entity stored under ``id`` or None."""

    @abstractmethod
    async def set(self, request_context: RequestContext, entity: T) -> None:
        """Insert or replace the entity under ``entity.id``."""

    @abstractmethod
    async def remove(self, request_context: RequestContext, id: str) -> None:
        """Delete the entity under ``id``."""
