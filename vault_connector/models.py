"""
Vault Models — Key/secret records, request context and type enumerations.

Records are the storage-level representation handed to the entity
storage backends. Key material is kept as base64 text so any backend
able to persist strings can hold it.
"""
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class VaultKeyType(str, Enum):
    """Asymmetric key algorithms the vault can create and use."""

    ED25519 = "Ed25519"
    SECP256K1 = "Secp256k1"


class VaultEncryptionType(str, Enum):
    """Authenticated ciphers available for encrypt/decrypt."""

    CHACHA20_POLY1305 = "ChaCha20Poly1305"


@dataclass(frozen=True)
class RequestContext:
    """Caller scope threaded through every vault operation.

    ``tenant_id`` selects the storage partition, ``identity`` prefixes
    every entity id inside it.
    """

    tenant_id: str
    identity: str

    def entity_id(self, name: str) -> str:
        """Build the composite ``identity/name`` id."""
        return f"{self.identity}/{name}"


class VaultKey(BaseModel):
    """Persisted key pair."""

    id: str
    type: VaultKeyType
    private_key: str = Field(description="base64 encoded private key")
    public_key: str = Field(description="base64 encoded public key")


class VaultSecret(BaseModel):
    """Persisted secret, ``data`` holds the JSON text of the value."""

    id: str
    data: str


@dataclass(frozen=True)
class VaultKeyPair:
    """Key material returned by ``get_key``."""

    type: VaultKeyType
    private_key: bytes
    public_key: bytes
