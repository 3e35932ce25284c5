"""
EntityStorageVaultConnector — Tenant-scoped keys and secrets over entity storage.

Provides the public API of the vault:
- ``create_key`` / ``add_key`` / ``get_key`` / ``rename_key`` / ``remove_key``
- ``sign`` / ``verify`` / ``encrypt`` / ``decrypt``
- ``set_secret`` / ``get_secret`` / ``remove_secret``

Every operation validates its arguments, builds the ``identity/name`` id
from the request context and re-reads the storage; nothing is cached
between calls.

Security Note:
    Never log plaintext, ciphertext, secret values or key material.
    Only log tenants, identities and names.
"""
import logging
from typing import Any, Optional

from . import crypto
from .config import VaultConfig
from .exceptions import AlreadyExistsError, NotFoundError
from .guards import (
    guard_bytes,
    guard_length,
    guard_object,
    guard_one_of,
    guard_request_context,
    guard_string,
)
from .models import (
    RequestContext,
    VaultEncryptionType,
    VaultKey,
    VaultKeyPair,
    VaultKeyType,
    VaultSecret,
)
from .storage import EntityStorage

logger = logging.getLogger("vault.connector")


class EntityStorageVaultConnector:
    """Vault operations on top of two entity storages.

    Args:
        key_storage: Storage for ``VaultKey`` records.
        secret_storage: Storage for ``VaultSecret`` records.
        config: Optional settings, defaults are used when omitted.
    """

    def __init__(
        self,
        key_storage: EntityStorage[VaultKey],
        secret_storage: EntityStorage[VaultSecret],
        config: Optional[VaultConfig] = None,
    ):
        guard_object("key_storage", key_storage)
        guard_object("secret_storage", secret_storage)
        self._keys = key_storage
        self._secrets = secret_storage
        self._config = config or VaultConfig()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_vault_key(
        self, request_context: RequestContext, key_name: str,
    ) -> VaultKey:
        """Load a key record or raise NotFoundError."""
        vault_key = await self._keys.get(
            request_context, request_context.entity_id(key_name),
        )
        if vault_key is None:
            raise NotFoundError(key_name, code="keyNotFound")
        return vault_key

    async def _ensure_key_absent(
        self, request_context: RequestContext, key_name: str,
    ) -> None:
        existing = await self._keys.get(
            request_context, request_context.entity_id(key_name),
        )
        if existing is not None:
            raise AlreadyExistsError(key_name, code="keyAlreadyExists")

    async def _store_key(
        self,
        request_context: RequestContext,
        key_name: str,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: bytes,
    ) -> None:
        vault_key = VaultKey(
            id=request_context.entity_id(key_name),
            type=key_type,
            private_key=crypto.b64e(private_key),
            public_key=crypto.b64e(public_key),
        )
        await self._keys.set(request_context, vault_key)

    # ------------------------------------------------------------------
    # Key lifecycle
    # ------------------------------------------------------------------

    async def create_key(
        self,
        request_context: RequestContext,
        key_name: str,
        key_type: VaultKeyType,
    ) -> bytes:
        """Generate a new key pair and store it under ``key_name``.

        Args:
            request_context: Tenant and identity of the caller.
            key_name: Name of the key to create.
            key_type: Algorithm of the key.

        Returns:
            The raw public key.

        Raises:
            ValidationError: On missing or invalid arguments.
            AlreadyExistsError: If ``key_name`` is already taken.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        key_type = guard_one_of("key_type", key_type, VaultKeyType)

        # check before generating so existing material is never overwritten
        await self._ensure_key_absent(request_context, key_name)

        private_key, public_key = crypto.generate_key(
            key_type, strength=self._config.mnemonic_strength,
        )
        await self._store_key(
            request_context, key_name, key_type, private_key, public_key,
        )
        logger.debug(
            "Vault create key: tenant=%s identity=%s key=%s type=%s",
            request_context.tenant_id, request_context.identity,
            key_name, key_type.value,
        )
        return public_key

    async def add_key(
        self,
        request_context: RequestContext,
        key_name: str,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: bytes,
    ) -> None:
        """Import an existing key pair under ``key_name``.

        Raises:
            ValidationError: On missing arguments or key sizes that do not
                match ``key_type``.
            AlreadyExistsError: If ``key_name`` is already taken.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        key_type = guard_one_of("key_type", key_type, VaultKeyType)
        guard_bytes("private_key", private_key)
        guard_bytes("public_key", public_key)
        algorithm = crypto.get_algorithm(key_type)
        guard_length("private_key", private_key, algorithm.private_key_size)
        guard_length("public_key", public_key, algorithm.public_key_size)

        await self._ensure_key_absent(request_context, key_name)

        await self._store_key(
            request_context, key_name, key_type,
            bytes(private_key), bytes(public_key),
        )
        logger.debug(
            "Vault add key: tenant=%s identity=%s key=%s type=%s",
            request_context.tenant_id, request_context.identity,
            key_name, key_type.value,
        )

    async def get_key(
        self, request_context: RequestContext, key_name: str,
    ) -> VaultKeyPair:
        """Return the type and both halves of a stored key.

        This exposes private key material; prefer ``sign``/``decrypt``
        when the caller only needs to use the key.

        Raises:
            NotFoundError: If the key does not exist.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)

        vault_key = await self._get_vault_key(request_context, key_name)
        return VaultKeyPair(
            type=vault_key.type,
            private_key=crypto.b64d(vault_key.private_key),
            public_key=crypto.b64d(vault_key.public_key),
        )

    async def rename_key(
        self,
        request_context: RequestContext,
        key_name: str,
        new_name: str,
    ) -> None:
        """Move a key to ``new_name``.

        The old record is removed before the new one is written, as two
        separate storage calls: a failure in between loses the key.
        An existing key under ``new_name`` is overwritten.

        Raises:
            NotFoundError: If ``key_name`` does not exist.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        guard_string("new_name", new_name)

        vault_key = await self._get_vault_key(request_context, key_name)

        await self._keys.remove(
            request_context, request_context.entity_id(key_name),
        )
        renamed = vault_key.model_copy(
            update={"id": request_context.entity_id(new_name)},
        )
        await self._keys.set(request_context, renamed)
        logger.debug(
            "Vault rename key: tenant=%s identity=%s key=%s new_name=%s",
            request_context.tenant_id, request_context.identity,
            key_name, new_name,
        )

    async def remove_key(
        self, request_context: RequestContext, key_name: str,
    ) -> None:
        """Delete a key.

        Raises:
            NotFoundError: If the key does not exist.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)

        await self._get_vault_key(request_context, key_name)
        await self._keys.remove(
            request_context, request_context.entity_id(key_name),
        )
        logger.debug(
            "Vault remove key: tenant=%s identity=%s key=%s",
            request_context.tenant_id, request_context.identity, key_name,
        )

    # ------------------------------------------------------------------
    # Key use
    # ------------------------------------------------------------------

    async def sign(
        self, request_context: RequestContext, key_name: str, data: bytes,
    ) -> bytes:
        """Sign ``data`` with the private half of ``key_name``.

        Raises:
            NotFoundError: If the key does not exist.
            CryptoError: If the stored private key is unusable.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        guard_bytes("data", data)

        vault_key = await self._get_vault_key(request_context, key_name)
        return crypto.sign(
            vault_key.type, crypto.b64d(vault_key.private_key), bytes(data),
        )

    async def verify(
        self,
        request_context: RequestContext,
        key_name: str,
        data: bytes,
        signature: bytes,
    ) -> bool:
        """Verify ``signature`` over ``data`` with the public half of ``key_name``.

        Returns:
            False for a mismatched signature, never raises for it.

        Raises:
            NotFoundError: If the key does not exist.
            CryptoError: If the stored public key is unusable.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        guard_bytes("data", data)
        guard_bytes("signature", signature)

        vault_key = await self._get_vault_key(request_context, key_name)
        return crypto.verify(
            vault_key.type,
            crypto.b64d(vault_key.public_key),
            bytes(data),
            bytes(signature),
        )

    async def encrypt(
        self,
        request_context: RequestContext,
        key_name: str,
        encryption_type: VaultEncryptionType,
        data: bytes,
    ) -> bytes:
        """Encrypt ``data`` with a key from the vault.

        A fresh random nonce is generated on every call.

        Returns:
            Envelope bytes: [nonce 12B][ciphertext + tag 16B].

        Raises:
            NotFoundError: If the key does not exist.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        encryption_type = guard_one_of(
            "encryption_type", encryption_type, VaultEncryptionType,
        )
        guard_bytes("data", data)

        vault_key = await self._get_vault_key(request_context, key_name)
        return crypto.encrypt_envelope(
            encryption_type, crypto.b64d(vault_key.private_key), data,
        )

    async def decrypt(
        self,
        request_context: RequestContext,
        key_name: str,
        encryption_type: VaultEncryptionType,
        encrypted_data: bytes,
    ) -> bytes:
        """Decrypt an envelope produced by ``encrypt``.

        Raises:
            NotFoundError: If the key does not exist.
            CryptoError: If the envelope is malformed.
            DecryptionError: If the envelope fails authentication.
        """
        guard_request_context(request_context)
        guard_string("key_name", key_name)
        encryption_type = guard_one_of(
            "encryption_type", encryption_type, VaultEncryptionType,
        )
        guard_bytes("encrypted_data", encrypted_data)

        vault_key = await self._get_vault_key(request_context, key_name)
        return crypto.decrypt_envelope(
            encryption_type, crypto.b64d(vault_key.private_key), encrypted_data,
        )

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def set_secret(
        self, request_context: RequestContext, secret_name: str, value: Any,
    ) -> None:
        """Store a secret, replacing any previous value.

        Supported types: str, int, float, dict, list, bytes, bool, None.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        guard_request_context(request_context)
        guard_string("secret_name", secret_name)

        vault_secret = VaultSecret(
            id=request_context.entity_id(secret_name),
            data=crypto.serialize_value(value),
        )
        await self._secrets.set(request_context, vault_secret)
        logger.debug(
            "Vault set secret: tenant=%s identity=%s secret=%s",
            request_context.tenant_id, request_context.identity, secret_name,
        )

    async def get_secret(
        self, request_context: RequestContext, secret_name: str,
    ) -> Any:
        """Return a stored secret value.

        Raises:
            NotFoundError: If the secret does not exist.
            SerializationError: If the stored value is corrupt.
        """
        guard_request_context(request_context)
        guard_string("secret_name", secret_name)

        vault_secret = await self._secrets.get(
            request_context, request_context.entity_id(secret_name),
        )
        if vault_secret is None:
            raise NotFoundError(secret_name, code="secretNotFound")
        return crypto.deserialize_value(vault_secret.data)

    async def remove_secret(
        self, request_context: RequestContext, secret_name: str,
    ) -> None:
        """Delete a stored secret.

        Raises:
            NotFoundError: If the secret does not exist.
        """
        guard_request_context(request_context)
        guard_string("secret_name", secret_name)

        secret_id = request_context.entity_id(secret_name)
        vault_secret = await self._secrets.get(request_context, secret_id)
        if vault_secret is None:
            raise NotFoundError(secret_name, code="secretNotFound")
        await self._secrets.remove(request_context, secret_id)
        logger.debug(
            "Vault remove secret: tenant=%s identity=%s secret=%s",
            request_context.tenant_id, request_context.identity, secret_name,
        )
