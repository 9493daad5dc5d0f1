"""Discord client wiring gateway events to the dispatcher and lifecycle handlers."""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from .core.models import DEFAULT_PREFIX
from .dispatch import Dispatcher
from .events import LifecycleHandlers
from .logging_config import setup_logging


class GuildKeeperBot(commands.Bot):
    """``discord.py`` bot that hands every event to injected handlers.

    Commands are resolved by :class:`~guildkeeper.dispatch.Dispatcher` with
    per-guild prefixes, so the ``commands.Bot`` command processing is not
    used.
    """

    def __init__(
        self, dispatcher: Dispatcher, lifecycle: LifecycleHandlers, **kwargs: Any
    ) -> None:
        """Initialize the bot with the intents needed to read prefixed messages."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        intents.message_content = True
        intents.members = True
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", DEFAULT_PREFIX),
            intents=intents,
            **kwargs,
        )
        self.log = setup_logging()
        self.dispatcher = dispatcher
        self.lifecycle = lifecycle

    async def on_ready(self) -> None:
        """Register guilds that were joined while the bot was offline."""
        for guild in self.guilds:
            try:
                await self.lifecycle.tenant_joined(guild)
            except Exception:  # pragma: no cover - keep registering other guilds
                self.log.exception(
                    "Failed to register guild %s", getattr(guild, "id", "?")
                )
        await self.change_presence(activity=discord.Game(name="Moderating"))
        self.log.info(
            "Logged in as %s (%s)",
            self.user,
            self.user.id if self.user else "?",
        )

    async def on_message(self, message: discord.Message) -> None:
        await self.dispatcher.dispatch(message)

    async def on_guild_join(self, guild: discord.Guild) -> None:
        await self.lifecycle.tenant_joined(guild)

    async def on_guild_remove(self, guild: discord.Guild) -> None:
        await self.lifecycle.tenant_left(guild)

    async def on_member_join(self, member: discord.Member) -> None:
        await self.lifecycle.member_joined(member)

    async def on_member_remove(self, member: discord.Member) -> None:
        await self.lifecycle.member_left(member)


__all__ = ["GuildKeeperBot"]
