"""Shared fixtures for the vault connector test suite."""
import pytest

from vault_connector import (
    EntityStorageVaultConnector,
    MemoryEntityStorage,
    RequestContext,
    VaultKey,
    VaultKeyType,
    VaultSecret,
)

TEST_TENANT_ID = "test-tenant"
TEST_IDENTITY_ID = "test-identity"
TEST_KEY_NAME = "test-key"
TEST_SECRET_NAME = "test-secret"

# Ed25519 key stored as seed || public key, with a signature over b"\x01\x02\x03\x04\x05"
TEST_PRIVATE_KEY = (
    "q61H8fLd9KjrFUOPvr0mEahicyBULexUvE3IA/pBuL2//coUiJ6//lz9Oo+L2XKPttxDQ3nsUGckE4TodvYKVQ=="
)
TEST_PUBLIC_KEY = "v/3KFIiev/5c/TqPi9lyj7bcQ0N57FBnJBOE6Hb2ClU="
TEST_SIGNATURE = (
    "xYHh6iMIUHWdAUcgj6ZiAVtpwl03k730MhupevDePA3OrDZ+8GsoVoOC+0MGSm75C1m6cnE9AlTHRcMWnN7rBQ=="
)
TEST_DATA = bytes([1, 2, 3, 4, 5])


class FakeRedis:
    """Minimal asyncio Redis stand-in backed by a dict."""

    def __init__(self):
        self.data: dict[str, bytes] = {}

    async def get(self, key: str):
        return self.data.get(key)

    async def set(self, key: str, value):
        if isinstance(value, str):
            value = value.encode("utf-8")
        self.data[key] = value
        return True

    async def delete(self, key: str):
        return 1 if self.data.pop(key, None) is not None else 0


def make_vault_key(name: str = TEST_KEY_NAME, identity: str = TEST_IDENTITY_ID) -> VaultKey:
    return VaultKey(
        id=f"{identity}/{name}",
        type=VaultKeyType.ED25519,
        private_key=TEST_PRIVATE_KEY,
        public_key=TEST_PUBLIC_KEY,
    )


@pytest.fixture
def context():
    """Request context for the default tenant and identity."""
    return RequestContext(tenant_id=TEST_TENANT_ID, identity=TEST_IDENTITY_ID)


@pytest.fixture
def key_storage():
    """Empty in-memory key storage."""
    return MemoryEntityStorage(VaultKey)


@pytest.fixture
def secret_storage():
    """Empty in-memory secret storage."""
    return MemoryEntityStorage(VaultSecret)


@pytest.fixture
def seeded_key_storage():
    """Key storage holding the fixture Ed25519 key."""
    return MemoryEntityStorage(
        VaultKey, initial_values={TEST_TENANT_ID: [make_vault_key()]},
    )


@pytest.fixture
def connector(key_storage, secret_storage):
    """Connector over empty storages."""
    return EntityStorageVaultConnector(
        key_storage=key_storage, secret_storage=secret_storage,
    )


@pytest.fixture
def seeded_connector(seeded_key_storage, secret_storage):
    """Connector whose key storage holds the fixture key."""
    return EntityStorageVaultConnector(
        key_storage=seeded_key_storage, secret_storage=secret_storage,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()
