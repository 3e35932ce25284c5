"""In-process entity storage, one dict per tenant."""
import logging
from typing import Optional

from ..models import RequestContext
from .base import EntityStorage, T

logger = logging.getLogger("vault.storage")


class MemoryEntityStorage(EntityStorage[T]):
    """Keeps copies of entities in memory.

    Entities are copied on the way in and out so callers never share
    state with the store.

    Args:
        model: Entity model class.
        initial_values: Optional mapping of tenant id to a list of entities.
    """

    def __init__(
        self,
        model: type[T],
        initial_values: Optional[dict[str, list[T]]] = None,
    ):
        super().__init__(model)
        self._store: dict[str, dict[str, T]] = {}
        for tenant_id, entities in (initial_values or {}).items():
            partition = self._store.setdefault(tenant_id, {})
            for entity in entities:
                partition[entity.id] = entity.model_copy(deep=True)

    def get_store(self, tenant_id: str) -> Optional[list[T]]:
        """Return the entities of a tenant, None if the tenant holds nothing."""
        partition = self._store.get(tenant_id)
        if not partition:
            return None
        return [entity.model_copy(deep=True) for entity in partition.values()]

    async def get(self, request_context: RequestContext, id: str) -> Optional[T]:
        entity = self._store.get(request_context.tenant_id, {}).get(id)
        if entity is None:
            return None
        return entity.model_copy(deep=True)

    async def set(self, request_context: RequestContext, entity: T) -> None:
        partition = self._store.setdefault(request_context.tenant_id, {})
        partition[entity.id] = entity.model_copy(deep=True)
        logger.debug(
            "Memory set: tenant=%s %s=%s",
            request_context.tenant_id, self.entity_name, entity.id,
        )

    async def remove(self, request_context: RequestContext, id: str) -> None:
        partition = self._store.get(request_context.tenant_id)
        if partition is not None:
            partition.pop(id, None)
            if not partition:
                del self._store[request_context.tenant_id]
        logger.debug(
            "Memory remove: tenant=%s %s=%s",
            request_context.tenant_id, self.entity_name, id,
        )
