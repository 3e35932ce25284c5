"""
Tests for the entity storage backends.

Tests cover:
- Memory storage partitioning, copies and initial values
- Redis storage key layout and round trips (fake client)
"""
import orjson
import pytest

from vault_connector import (
    MemoryEntityStorage,
    RedisEntityStorage,
    RequestContext,
    SerializationError,
    VaultKey,
    VaultKeyType,
    VaultSecret,
)
from vault_connector.storage.redis import tenant_segment

from conftest import TEST_TENANT_ID, make_vault_key


@pytest.fixture
def other_context():
    return RequestContext(tenant_id="other-tenant", identity="someone")


class TestMemoryEntityStorage:
    """Tests for MemoryEntityStorage."""

    @pytest.mark.asyncio
    async def test_set_get_remove(self, context, key_storage):
        key = make_vault_key()
        await key_storage.set(context, key)
        assert await key_storage.get(context, key.id) == key
        await key_storage.remove(context, key.id)
        assert await key_storage.get(context, key.id) is None

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self, context, key_storage):
        await key_storage.remove(context, "nobody/nothing")
        assert key_storage.get_store(TEST_TENANT_ID) is None

    @pytest.mark.asyncio
    async def test_partitioned_by_tenant(self, context, other_context, key_storage):
        key = make_vault_key()
        await key_storage.set(context, key)
        assert await key_storage.get(other_context, key.id) is None
        assert key_storage.get_store("other-tenant") is None

    @pytest.mark.asyncio
    async def test_returns_copies(self, context, seeded_key_storage):
        key = await seeded_key_storage.get(context, make_vault_key().id)
        key.public_key = "changed"
        again = await seeded_key_storage.get(context, key.id)
        assert again.public_key != "changed"

    def test_initial_values(self, seeded_key_storage):
        store = seeded_key_storage.get_store(TEST_TENANT_ID)
        assert len(store) == 1
        assert store[0].type == VaultKeyType.ED25519


class TestRedisEntityStorage:
    """Tests for RedisEntityStorage."""

    def test_requires_client(self):
        with pytest.raises(RuntimeError):
            RedisEntityStorage(VaultKey, None)

    @pytest.mark.asyncio
    async def test_key_layout(self, context, fake_redis):
        storage = RedisEntityStorage(VaultKey, fake_redis, prefix="vault")
        key = make_vault_key()
        await storage.set(context, key)

        # "test-tenant" as unpadded urlsafe base64
        redis_key = f"vault:VaultKey:dGVzdC10ZW5hbnQ:{key.id}"
        assert redis_key in fake_redis.data
        document = orjson.loads(fake_redis.data[redis_key])
        assert document["type"] == "Ed25519"
        assert document["id"] == key.id

    @pytest.mark.asyncio
    async def test_round_trip(self, context, fake_redis):
        storage = RedisEntityStorage(VaultKey, fake_redis)
        key = make_vault_key()
        await storage.set(context, key)
        assert await storage.get(context, key.id) == key
        await storage.remove(context, key.id)
        assert await storage.get(context, key.id) is None

    @pytest.mark.asyncio
    async def test_keys_and_secrets_share_client(self, context, fake_redis):
        keys = RedisEntityStorage(VaultKey, fake_redis)
        secrets = RedisEntityStorage(VaultSecret, fake_redis)
        await keys.set(context, make_vault_key(name="shared"))
        await secrets.set(context, VaultSecret(id=make_vault_key(name="shared").id, data="1"))
        assert len(fake_redis.data) == 2
        assert (await secrets.get(context, make_vault_key(name="shared").id)).data == "1"

    @pytest.mark.asyncio
    async def test_corrupt_entry(self, context, fake_redis):
        storage = RedisEntityStorage(VaultSecret, fake_redis)
        fake_redis.data[f"vault:VaultSecret:{tenant_segment(TEST_TENANT_ID)}:a/b"] = b"{broken"
        with pytest.raises(SerializationError):
            await storage.get(context, "a/b")

    @pytest.mark.asyncio
    async def test_partitioned_by_tenant(self, fake_redis):
        storage = RedisEntityStorage(VaultSecret, fake_redis)
        owner = RequestContext(tenant_id="acme:alice", identity="x")
        intruder = RequestContext(tenant_id="acme", identity="alice:x")
        await storage.set(owner, VaultSecret(id=owner.entity_id("pw"), data='"s3cret"'))

        assert intruder.entity_id("pw") == "alice:x/pw"
        assert await storage.get(intruder, intruder.entity_id("pw")) is None
        assert (await storage.get(owner, owner.entity_id("pw"))).data == '"s3cret"'

    def test_tenant_segment(self):
        assert tenant_segment("test-tenant") == "dGVzdC10ZW5hbnQ"
        assert ":" not in tenant_segment("acme:alice")
        assert tenant_segment("acme:alice") != tenant_segment("acme")
