"""Redis implementation of :class:`~guildkeeper.adapters.base.KeyValueStore`.

A single :class:`redis.asyncio.Redis` client, backed by a bounded
connection pool, is created at startup and shared by the whole process.
"""

from __future__ import annotations

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from ..errors import StoreConnectionError, StoreError
from .base import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """Key-value store backed by a Redis server."""

    def __init__(self, client: aioredis.Redis) -> None:
        """Wrap an existing ``client``; see :meth:`from_url` for the usual path."""
        self.client = client

    @classmethod
    def from_url(cls, url: str, max_connections: int = 80) -> RedisKeyValueStore:
        """Create a store with its own pool of at most ``max_connections``."""
        pool = aioredis.ConnectionPool.from_url(url, max_connections=max_connections)
        return cls(aioredis.Redis.from_pool(pool))

    async def _call(self, op: str, *args, **kwargs):
        try:
            return await getattr(self.client, op)(*args, **kwargs)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreConnectionError(f"Redis {op.upper()} failed: {exc}") from exc
        except RedisError as exc:
            raise StoreError(f"Redis {op.upper()} failed: {exc}") from exc

    # ------------------------------------------------------------------
    async def ping(self) -> None:
        await self._call("ping")

    async def get(self, key: str) -> bytes | None:
        return await self._call("get", key)

    async def set(self, key: str, value: bytes) -> None:
        await self._call("set", key, value)

    async def set_if_absent(self, key: str, value: bytes) -> bool:
        # SET NX replies None when the key already exists
        return bool(await self._call("set", key, value, nx=True))

    async def exists(self, key: str) -> bool:
        return await self._call("exists", key) == 1

    async def delete(self, key: str) -> bool:
        return await self._call("delete", key) > 0

    async def close(self) -> None:
        """Release the client and its pooled connections."""
        await self.client.aclose()
