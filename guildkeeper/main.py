from __future__ import annotations

import asyncio

from .adapters.discord import DiscordAdapter
from .adapters.redis_store import RedisKeyValueStore
from .bot import GuildKeeperBot
from .commands import CommandTable, register_commands
from .config import load_settings
from .core.storage import TenantStore
from .data.store import RecordMutator
from .dispatch import Dispatcher
from .errors import StoreError
from .events import LifecycleHandlers
from .logging_config import setup_logging


def main() -> int:
    settings = load_settings()
    log = setup_logging(settings.log_level)
    if not settings.token:
        log.error(
            "DISCORD_BOT_TOKEN is not set. "
            "Export it in your environment before running."
        )
        return 2

    async def runner():
        kv = RedisKeyValueStore.from_url(
            settings.redis_url, max_connections=settings.redis_max_connections
        )
        try:
            await kv.ping()
        except StoreError as exc:
            log.error("Cannot reach the store at %s: %s", settings.redis_url, exc)
            await kv.close()
            return 1

        store = TenantStore(kv)
        table = register_commands(CommandTable())
        mutator = RecordMutator(
            store,
            default_prefix=settings.default_prefix,
            default_disabled=table.disabled_by_default(),
        )
        adapter = DiscordAdapter(settings.token)
        dispatcher = Dispatcher(
            store, mutator, table, adapter, default_prefix=settings.default_prefix
        )
        bot = GuildKeeperBot(
            dispatcher,
            LifecycleHandlers(store, mutator, adapter),
            command_prefix=settings.default_prefix,
        )
        try:
            async with bot:
                await bot.start(settings.token)
        except KeyboardInterrupt:
            log.info("Shutting down...")
        finally:
            await adapter.close()
            await kv.close()
        return 0

    return asyncio.run(runner())


if __name__ == "__main__":
    raise SystemExit(main())
