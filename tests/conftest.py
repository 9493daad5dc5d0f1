"""Shared fixtures: an in-memory Redis client and gateway stand-ins."""

from __future__ import annotations

import asyncio
import datetime
import types
from datetime import UTC

import pytest

from guildkeeper.adapters.base import Adapter
from guildkeeper.adapters.redis_store import RedisKeyValueStore
from guildkeeper.commands import CommandTable, register_commands
from guildkeeper.core.storage import TenantStore
from guildkeeper.data.store import RecordMutator
from guildkeeper.dispatch import Dispatcher
from guildkeeper.events import LifecycleHandlers

GUILD_ID = 81384788765712384
ALICE_ID = 80351110224678912
BOB_ID = 175928847299117063
CAROL_ID = 222079895583457280


class FakeRedis:
    """Implements the subset of ``redis.asyncio.Redis`` the store uses.

    Every command yields to the event loop once, like a real round trip,
    so concurrent tasks interleave between GET and SET.
    """

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.error: Exception | None = None
        self.closed = False

    async def _round_trip(self) -> None:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error

    async def ping(self) -> bool:
        await self._round_trip()
        return True

    async def get(self, key):
        await self._round_trip()
        return self.data.get(key)

    async def set(self, key, value, nx=False):
        await self._round_trip()
        if nx and key in self.data:
            return None
        self.data[key] = value if isinstance(value, bytes) else str(value).encode()
        return True

    async def exists(self, key):
        await self._round_trip()
        return int(key in self.data)

    async def delete(self, key):
        await self._round_trip()
        return int(self.data.pop(key, None) is not None)

    async def aclose(self) -> None:
        self.closed = True


class RecordingAdapter(Adapter):
    """Adapter that records outbound actions instead of calling Discord."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.actions: list[tuple] = []
        self.error: Exception | None = None

    async def send_message(self, channel_id, content):
        if self.error is not None:
            raise self.error
        self.sent.append((channel_id, content))

    async def kick_member(self, guild_id, member_id, reason=""):
        if self.error is not None:
            raise self.error
        self.actions.append(("kick", guild_id, member_id, reason))

    async def ban_member(self, guild_id, member_id, reason=""):
        if self.error is not None:
            raise self.error
        self.actions.append(("ban", guild_id, member_id, reason))

    async def add_role(self, guild_id, member_id, role_id):
        if self.error is not None:
            raise self.error
        self.actions.append(("add_role", guild_id, member_id, role_id))


def _member(member_id, name, guild=None, nick=None):
    return types.SimpleNamespace(
        id=member_id,
        name=name,
        discriminator="0",
        nick=nick,
        joined_at=datetime.datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        roles=[types.SimpleNamespace(id=GUILD_ID)],
        guild=guild,
        bot=False,
    )


@pytest.fixture
def make_member():
    return _member


@pytest.fixture
def guild():
    g = types.SimpleNamespace(id=GUILD_ID, name="Test Guild", members=[])
    g.members = [_member(ALICE_ID, "alice", g), _member(BOB_ID, "bob", g)]
    return g


@pytest.fixture
def make_message(guild):
    def factory(content, author_id=ALICE_ID, in_guild=True, channel_id=1001, bot=False):
        channel = types.SimpleNamespace(id=channel_id, name="general")
        author = types.SimpleNamespace(id=author_id, name="alice", bot=bot)
        return types.SimpleNamespace(
            content=content,
            channel=channel,
            author=author,
            guild=guild if in_guild else None,
        )

    return factory


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def kv(fake_redis):
    return RedisKeyValueStore(fake_redis)


@pytest.fixture
def store(kv):
    return TenantStore(kv)


@pytest.fixture
def mutator(store):
    return RecordMutator(store)


@pytest.fixture
def adapter():
    return RecordingAdapter()


@pytest.fixture
def table():
    return register_commands(CommandTable())


@pytest.fixture
def dispatcher(store, mutator, table, adapter):
    return Dispatcher(store, mutator, table, adapter)


@pytest.fixture
def lifecycle(store, mutator, adapter):
    return LifecycleHandlers(store, mutator, adapter)
