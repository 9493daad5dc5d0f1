"""Tests for the ``TenantStore`` client and its Redis backing."""

import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from guildkeeper.core.models import TenantDocument
from guildkeeper.errors import StoreConnectionError, StoreError


def test_create_if_absent_only_writes_once(store, fake_redis) -> None:
    first = TenantDocument(guild_id="1", name="First")
    second = TenantDocument(guild_id="1", name="Second")

    assert asyncio.run(store.create_if_absent(first)) is True
    assert asyncio.run(store.create_if_absent(second)) is False
    assert asyncio.run(store.get("1")).name == "First"
    assert list(fake_redis.data) == ["1"]


def test_get_missing_returns_none(store) -> None:
    assert asyncio.run(store.get("404")) is None


def test_put_overwrites(store) -> None:
    asyncio.run(store.put(TenantDocument(guild_id="1", name="Before")))
    asyncio.run(store.put(TenantDocument(guild_id="1", name="After")))
    assert asyncio.run(store.get("1")).name == "After"


def test_exists_and_delete(store) -> None:
    async def scenario():
        await store.put(TenantDocument(guild_id="1", name="Guild"))
        assert await store.exists("1")
        assert await store.delete("1") is True
        assert not await store.exists("1")
        assert await store.delete("1") is False

    asyncio.run(scenario())


def test_stored_value_is_json(store, fake_redis) -> None:
    asyncio.run(store.put(TenantDocument(guild_id="1", name="Guild")))
    assert fake_redis.data["1"].startswith(b"{")
    assert b'"schema_version":1' in fake_redis.data["1"]


def test_connection_errors_are_translated(kv, store, fake_redis) -> None:
    fake_redis.error = RedisConnectionError("refused")
    with pytest.raises(StoreConnectionError):
        asyncio.run(kv.ping())
    with pytest.raises(StoreConnectionError):
        asyncio.run(store.get("1"))


def test_other_redis_errors_are_store_errors(store, fake_redis) -> None:
    fake_redis.error = ResponseError("WRONGTYPE")
    with pytest.raises(StoreError) as info:
        asyncio.run(store.exists("1"))
    assert not isinstance(info.value, StoreConnectionError)


def test_close_releases_client(kv, fake_redis) -> None:
    asyncio.run(kv.close())
    assert fake_redis.closed
