"""Vault Connector — Tenant-scoped signing keys and secrets.

Keys and secrets live in two entity storages partitioned by tenant and
addressed by ``identity/name``.

Security Note (Threat Model):
    Key material is kept by the entity storage as base64 text and is
    decoded in process memory for the duration of a single operation.
    Protecting the storage backend itself is out of scope.
"""

from .version import __version__
from .config import VaultConfig, create_vault_connector
from .connector import EntityStorageVaultConnector
from .exceptions import (
    AlreadyExistsError,
    CryptoError,
    DecryptionError,
    NotFoundError,
    SerializationError,
    ValidationError,
    VaultError,
)
from .models import (
    RequestContext,
    VaultEncryptionType,
    VaultKey,
    VaultKeyPair,
    VaultKeyType,
    VaultSecret,
)
from .storage import EntityStorage, MemoryEntityStorage, RedisEntityStorage

__all__ = [
    "__version__",
    "VaultConfig",
    "create_vault_connector",
    "EntityStorageVaultConnector",
    "AlreadyExistsError",
    "CryptoError",
    "DecryptionError",
    "NotFoundError",
    "SerializationError",
    "ValidationError",
    "VaultError",
    "RequestContext",
    "VaultEncryptionType",
    "VaultKey",
    "VaultKeyPair",
    "VaultKeyType",
    "VaultSecret",
    "EntityStorage",
    "MemoryEntityStorage",
    "RedisEntityStorage",
]
