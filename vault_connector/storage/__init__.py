"""Entity storage backends for vault keys and secrets."""
from .base import EntityStorage
from .memory import MemoryEntityStorage
from .redis import RedisEntityStorage

__all__ = [
    "EntityStorage",
    "MemoryEntityStorage",
    "RedisEntityStorage",
]
