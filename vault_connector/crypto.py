"""
Vault Crypto Core — Key generation, signing, envelope encryption and
secret serialization.

Key generation: BIP39 mnemonic → 64-byte seed → first 32 bytes feed the
key algorithm of the requested ``VaultKeyType``.

Envelope encryption: symmetric key = first 32 bytes of the stored
private key; format is ``[nonce 12B][ciphertext + tag 16B]``.

Security Note:
    Never log plaintext, ciphertext or key material.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable

import orjson
from mnemonic import Mnemonic
from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .exceptions import CryptoError, DecryptionError, SerializationError
from .models import VaultEncryptionType, VaultKeyType

logger = logging.getLogger("vault.connector")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # Poly1305 tag
KEY_LENGTH = 32  # 256-bit symmetric key
SEED_SIZE = 32

_BYTES_WRAPPER_KEY = "__vault_bytes_b64__"
_BIGINT_WRAPPER_KEY = "__vault_bigint__"
_LITERAL_WRAPPER_KEY = "__vault_literal__"
_RESERVED_KEYS = frozenset({
    _BYTES_WRAPPER_KEY, _BIGINT_WRAPPER_KEY, _LITERAL_WRAPPER_KEY,
})

_MNEMONIC = Mnemonic("english")


def b64e(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64d(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (ValueError, UnicodeEncodeError) as err:
        raise CryptoError(f"Malformed base64 key material: {err}") from err


# ---------------------------------------------------------------------------
# Key algorithms
# ---------------------------------------------------------------------------

def _ed25519_from_seed(seed: bytes) -> tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    public_key = sk.public_key().public_bytes_raw()
    # private key is stored as seed || public key
    return seed + public_key, public_key


def _ed25519_sign(private_key: bytes, data: bytes) -> bytes:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(private_key[:SEED_SIZE])
    return sk.sign(data)


def _ed25519_verify(public_key: bytes, data: bytes, signature: bytes) -> bool:
    pk = ed25519.Ed25519PublicKey.from_public_bytes(public_key)
    try:
        pk.verify(signature, data)
        return True
    except InvalidSignature:
        return False


def _secp256k1_from_seed(seed: bytes) -> tuple[bytes, bytes]:
    sk = ec.derive_private_key(int.from_bytes(seed, "big"), ec.SECP256K1())
    public_key = sk.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )
    return seed, public_key


def _secp256k1_sign(private_key: bytes, data: bytes) -> bytes:
    sk = ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256K1())
    return sk.sign(data, ec.ECDSA(hashes.SHA256()))


def _secp256k1_verify(public_key: bytes, data: bytes, signature: bytes) -> bool:
    pk = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), public_key)
    try:
        pk.verify(signature, data, ec.ECDSA(hashes.SHA256()))
        return True
    except InvalidSignature:
        return False


@dataclass(frozen=True)
class KeyAlgorithm:
    """Primitives and fixed key sizes for one ``VaultKeyType``."""

    private_key_size: int
    public_key_size: int
    from_seed: Callable[[bytes], tuple[bytes, bytes]]
    sign: Callable[[bytes, bytes], bytes]
    verify: Callable[[bytes, bytes, bytes], bool]


KEY_ALGORITHMS: dict[VaultKeyType, KeyAlgorithm] = {
    VaultKeyType.ED25519: KeyAlgorithm(
        private_key_size=64,
        public_key_size=32,
        from_seed=_ed25519_from_seed,
        sign=_ed25519_sign,
        verify=_ed25519_verify,
    ),
    VaultKeyType.SECP256K1: KeyAlgorithm(
        private_key_size=32,
        public_key_size=33,
        from_seed=_secp256k1_from_seed,
        sign=_secp256k1_sign,
        verify=_secp256k1_verify,
    ),
}


def get_algorithm(key_type: VaultKeyType) -> KeyAlgorithm:
    try:
        return KEY_ALGORITHMS[key_type]
    except KeyError:
        raise CryptoError(f"Unsupported key type: {key_type}") from None


# ---------------------------------------------------------------------------
# Key generation, signing
# ---------------------------------------------------------------------------

def generate_key(key_type: VaultKeyType, strength: int = 256) -> tuple[bytes, bytes]:
    """Generate a fresh key pair from a random BIP39 mnemonic.

    Args:
        key_type: Algorithm of the key pair.
        strength: Mnemonic entropy in bits.

    Returns:
        Tuple of (private_key, public_key) raw bytes.
    """
    algorithm = get_algorithm(key_type)
    words = _MNEMONIC.generate(strength=strength)
    seed = Mnemonic.to_seed(words)
    return algorithm.from_seed(seed[:SEED_SIZE])


def sign(key_type: VaultKeyType, private_key: bytes, data: bytes) -> bytes:
    algorithm = get_algorithm(key_type)
    try:
        return algorithm.sign(private_key, data)
    except ValueError as err:
        raise CryptoError(f"Unable to sign with {key_type.value} key: {err}") from err


def verify(
    key_type: VaultKeyType,
    public_key: bytes,
    data: bytes,
    signature: bytes,
) -> bool:
    """Check ``signature`` over ``data``.

    Returns False for a mismatched or malformed signature; raises
    :class:`CryptoError` only when the public key itself is unusable.
    """
    algorithm = get_algorithm(key_type)
    try:
        return algorithm.verify(public_key, data, signature)
    except ValueError as err:
        raise CryptoError(f"Invalid {key_type.value} public key: {err}") from err


# ---------------------------------------------------------------------------
# Envelope encryption
# ---------------------------------------------------------------------------

CIPHERS: dict[VaultEncryptionType, type] = {
    VaultEncryptionType.CHACHA20_POLY1305: ChaCha20Poly1305,
}


def _get_cipher(encryption_type: VaultEncryptionType, private_key: bytes) -> Any:
    try:
        cipher_cls = CIPHERS[encryption_type]
    except KeyError:
        raise CryptoError(f"Unsupported encryption type: {encryption_type}") from None
    if len(private_key) < KEY_LENGTH:
        raise CryptoError(
            f"Private key too short for {encryption_type.value}: "
            f"{len(private_key)} bytes (minimum {KEY_LENGTH})"
        )
    return cipher_cls(private_key[:KEY_LENGTH])


def encrypt_envelope(
    encryption_type: VaultEncryptionType,
    private_key: bytes,
    plaintext: bytes,
) -> bytes:
    """Encrypt plaintext under the key with a fresh random nonce.

    Format: [nonce 12B][encrypted_payload + tag 16B]

    Returns:
        Envelope bytes.
    """
    cipher = _get_cipher(encryption_type, private_key)
    nonce = os.urandom(NONCE_SIZE)
    ct = cipher.encrypt(nonce, bytes(plaintext), None)
    return nonce + ct


def decrypt_envelope(
    encryption_type: VaultEncryptionType,
    private_key: bytes,
    envelope: bytes,
) -> bytes:
    """Split and authenticate an envelope, returning the plaintext.

    Raises:
        CryptoError: If the envelope is shorter than nonce + tag.
        DecryptionError: If authentication fails.
    """
    _min = NONCE_SIZE + TAG_SIZE
    if len(envelope) < _min:
        raise CryptoError(
            f"Encrypted data too short: {len(envelope)} bytes "
            f"(minimum {_min})"
        )
    cipher = _get_cipher(encryption_type, private_key)
    nonce = bytes(envelope[:NONCE_SIZE])
    ct = bytes(envelope[NONCE_SIZE:])
    try:
        return cipher.decrypt(nonce, ct, None)
    except InvalidTag as err:
        raise DecryptionError("Authentication of encrypted data failed") from err


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

# orjson handles integers in [-2**63, 2**64 - 1]
_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 64 - 1


def _tag_value(value: Any) -> Any:
    """Replace values JSON cannot carry natively with single-key tag dicts.

    Caller dicts that look like a tag are wrapped under the literal tag,
    so they never decode as something else.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {_BYTES_WRAPPER_KEY: b64e(bytes(value))}
    if isinstance(value, int) and not isinstance(value, bool):
        if value < _INT_MIN or value > _INT_MAX:
            return {_BIGINT_WRAPPER_KEY: str(value)}
        return value
    if isinstance(value, dict):
        tagged = {key: _tag_value(item) for key, item in value.items()}
        if len(value) == 1 and next(iter(value)) in _RESERVED_KEYS:
            return {_LITERAL_WRAPPER_KEY: tagged}
        return tagged
    if isinstance(value, (list, tuple)):
        return [_tag_value(item) for item in value]
    return value


def _untag_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_untag_value(item) for item in value]
    if not isinstance(value, dict):
        return value
    if len(value) == 1:
        key, inner = next(iter(value.items()))
        if key == _BYTES_WRAPPER_KEY:
            try:
                return base64.b64decode(inner, validate=True)
            except (TypeError, ValueError) as err:
                raise SerializationError(f"Malformed bytes value: {err}") from err
        if key == _BIGINT_WRAPPER_KEY:
            try:
                return int(inner)
            except (TypeError, ValueError) as err:
                raise SerializationError(f"Malformed integer value: {err}") from err
        if key == _LITERAL_WRAPPER_KEY:
            if not isinstance(inner, dict):
                raise SerializationError("Malformed literal value")
            return {k: _untag_value(item) for k, item in inner.items()}
    return {k: _untag_value(item) for k, item in value.items()}


def serialize_value(value: Any) -> str:
    """Serialize a Python value to JSON text for storage.

    Supports: str, int, float, dict, list, bytes, bool, None.
    bytes values are wrapped as {"__vault_bytes_b64__": "<base64>"} and
    integers outside the 64-bit range as {"__vault_bigint__": "<digits>"}.

    Raises:
        SerializationError: If the value is not JSON representable.
    """
    try:
        return orjson.dumps(_tag_value(value)).decode("utf-8")
    except orjson.JSONEncodeError as err:
        raise SerializationError(f"Value is not serializable: {err}") from err


def deserialize_value(data: str) -> Any:
    """Deserialize JSON text from ``serialize_value`` back to a Python value.

    Raises:
        SerializationError: If the stored text or one of its tags is malformed.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as err:
        raise SerializationError(f"Stored value is not valid JSON: {err}") from err
    return _untag_value(parsed)
