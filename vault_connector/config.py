"""
Vault Configuration — Validated settings and connector factory.

Reads settings from environment variables:
    VAULT_STORAGE_BACKEND = memory | redis
    VAULT_REDIS_PREFIX = <key prefix>
    VAULT_MNEMONIC_STRENGTH = 128 | 160 | 192 | 224 | 256

Security Note:
    Never log key material. Only log key names, tenants and identities.
"""
import os
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .models import VaultKey, VaultSecret
from .storage import MemoryEntityStorage, RedisEntityStorage

logger = logging.getLogger("vault.connector")

_MNEMONIC_STRENGTHS = (128, 160, 192, 224, 256)


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    storage_backend: str = Field(default="memory")
    redis_prefix: str = Field(default="vault", min_length=1)
    mnemonic_strength: int = Field(default=256)

    @field_validator("storage_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate storage backend is supported."""
        v = v.lower()
        if v not in ("memory", "redis"):
            raise ValueError(f"Unsupported storage backend: {v}")
        return v

    @field_validator("mnemonic_strength")
    @classmethod
    def validate_strength(cls, v: int) -> int:
        """BIP39 only defines a fixed set of entropy sizes."""
        if v not in _MNEMONIC_STRENGTHS:
            raise ValueError(
                f"mnemonic_strength must be one of {_MNEMONIC_STRENGTHS}, got {v}"
            )
        return v

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Returns:
            Populated VaultConfig instance.
        """
        values: dict[str, Any] = {}
        env_map = {
            "VAULT_STORAGE_BACKEND": "storage_backend",
            "VAULT_REDIS_PREFIX": "redis_prefix",
            "VAULT_MNEMONIC_STRENGTH": "mnemonic_strength",
        }
        for env_name, field in env_map.items():
            raw = os.environ.get(env_name)
            if raw is not None:
                values[field] = raw
        return cls(**values)


def create_vault_connector(
    config: Optional[VaultConfig] = None,
    redis: Any = None,
):
    """Build a connector wired to the configured storage backend.

    Args:
        config: Vault settings, loaded from the environment when omitted.
        redis: asyncio Redis client, required by the ``redis`` backend.

    Returns:
        EntityStorageVaultConnector instance.

    Raises:
        RuntimeError: If the redis backend is selected without a client.
    """
    from .connector import EntityStorageVaultConnector

    config = config or VaultConfig.from_env()
    if config.storage_backend == "redis":
        if redis is None:
            raise RuntimeError(
                "VAULT_STORAGE_BACKEND=redis requires a redis client"
            )
        key_storage = RedisEntityStorage(VaultKey, redis, prefix=config.redis_prefix)
        secret_storage = RedisEntityStorage(VaultSecret, redis, prefix=config.redis_prefix)
    else:
        key_storage = MemoryEntityStorage(VaultKey)
        secret_storage = MemoryEntityStorage(VaultSecret)
    logger.info("Vault connector using %s storage", config.storage_backend)
    return EntityStorageVaultConnector(
        key_storage=key_storage,
        secret_storage=secret_storage,
        config=config,
    )
