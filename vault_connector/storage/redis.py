"""
Redis-backed entity storage.

Works with any asyncio Redis client exposing ``get``/``set``/``delete``
(e.g. ``redis.asyncio.Redis``). Entities are stored as orjson documents
under ``{prefix}:{entity_name}:{tenant}:{id}``, where ``tenant`` is the
unpadded urlsafe base64 form of the tenant id so it never contains ``:``.

Security Note:
    Key material is stored as-is; protect the Redis instance accordingly.
"""
import base64
import logging
from typing import Any, Optional

import orjson

from ..exceptions import SerializationError
from ..models import RequestContext
from .base import EntityStorage, T

logger = logging.getLogger("vault.storage")


def tenant_segment(tenant_id: str) -> str:
    """Encode a tenant id as a Redis key segment free of ``:``."""
    encoded = base64.urlsafe_b64encode(tenant_id.encode("utf-8"))
    return encoded.rstrip(b"=").decode("ascii")


class RedisEntityStorage(EntityStorage[T]):
    """Entity storage on top of an asyncio Redis client."""

    def __init__(self, model: type[T], redis: Any, prefix: str = "vault"):
        super().__init__(model)
        if redis is None:
            raise RuntimeError("RedisEntityStorage requires a redis client")
        self._redis = redis
        self._prefix = prefix

    def _redis_key(self, request_context: RequestContext, id: str) -> str:
        """Build Redis key."""
        tenant = tenant_segment(request_context.tenant_id)
        return f"{self._prefix}:{self.entity_name}:{tenant}:{id}"

    async def get(self, request_context: RequestContext, id: str) -> Optional[T]:
        raw = await self._redis.get(self._redis_key(request_context, id))
        if raw is None:
            return None
        try:
            return self._model.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValueError) as err:
            raise SerializationError(
                f"Corrupt {self.entity_name} entry {id}: {err}"
            ) from err

    async def set(self, request_context: RequestContext, entity: T) -> None:
        await self._redis.set(
            self._redis_key(request_context, entity.id),
            orjson.dumps(entity.model_dump(mode="json")),
        )
        logger.debug(
            "Redis set: tenant=%s %s=%s",
            request_context.tenant_id, self.entity_name, entity.id,
        )

    async def remove(self, request_context: RequestContext, id: str) -> None:
        await self._redis.delete(self._redis_key(request_context, id))
        logger.debug(
            "Redis remove: tenant=%s %s=%s",
            request_context.tenant_id, self.entity_name, id,
        )
