"""Vault error hierarchy.

Every error carries a machine-readable ``code`` next to its message so
callers can branch on the failure kind without parsing text.
"""
from typing import Any, Optional


class VaultError(Exception):
    """Base exception for all vault errors."""

    code: str = "vaultError"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(VaultError):
    """A required argument is missing, empty or outside its allowed set.

    Raised before any storage or cryptographic call is made.
    """

    def __init__(self, property: str, value: Any, reason: str) -> None:
        super().__init__(
            f"{reason}: {property} (value={value!r})", code=reason,
        )
        self.property = property
        self.value = value
        self.reason = reason


class AlreadyExistsError(VaultError):
    """Raised when creating an entity whose id is already taken."""

    code = "alreadyExists"

    def __init__(self, existing_id: str, code: Optional[str] = None) -> None:
        super().__init__(f"{existing_id} already exists", code=code)
        self.existing_id = existing_id


class NotFoundError(VaultError):
    """Raised when an operation needs an entity that does not exist."""

    code = "notFound"

    def __init__(self, not_found_id: str, code: Optional[str] = None) -> None:
        super().__init__(f"{not_found_id} not found", code=code)
        self.not_found_id = not_found_id


class CryptoError(VaultError):
    """Failure inside a cryptographic primitive or malformed key material."""

    code = "cryptoError"


class DecryptionError(CryptoError):
    """Authenticated decryption failed (tampered or foreign envelope)."""

    code = "decryptionFailed"


class SerializationError(VaultError):
    """A secret value could not be serialized or deserialized."""

    code = "serializationError"
