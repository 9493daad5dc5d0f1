"""Handlers for guild and member lifecycle events."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .adapters.base import Adapter
from .commands.utils import format_member_message
from .core.models import TenantDocument
from .core.storage import TenantStore
from .data.models import MutationStatus
from .data.store import RecordMutator
from .errors import DocumentDecodeError, StoreError

log = logging.getLogger("guildkeeper.events")


class LifecycleHandlers:
    """Keep guild documents in step with the guilds and members the bot sees."""

    def __init__(self, store: TenantStore, mutator: RecordMutator, adapter: Adapter) -> None:
        self.store = store
        self.mutator = mutator
        self.adapter = adapter

    # ------------------------------------------------------------------
    # Guilds
    # ------------------------------------------------------------------
    async def tenant_joined(self, guild: Any) -> None:
        """Create the guild's document the first time the bot joins it."""
        try:
            if await self.store.exists(str(guild.id)):
                return
        except StoreError:
            log.exception("Could not check registration of guild %s", guild.id)
            return
        result = await self.mutator.register_tenant(guild)
        if result.applied:
            log.info("New guild added: %s (%s)", guild.name, guild.id)

    async def tenant_left(self, guild: Any) -> None:
        """Drop the guild's document when the bot is removed from it."""
        guild_id = str(guild.id)
        result = await self.mutator.delete_tenant(guild_id)
        if result.status is MutationStatus.STORE_ERROR:
            log.error("Could not remove guild %s", guild_id)
        elif result.applied:
            log.info("Guild removed: %s (%s)", guild.name, guild_id)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    async def member_joined(self, member: Any) -> None:
        """Record the new member, then send the welcome and join-log messages.

        Store and decode errors propagate: without the guild's document the
        handler has nothing to act on.
        """
        guild = member.guild
        guild_id = str(guild.id)
        document = await self.store.get(guild_id)
        if document is None:
            await self.mutator.register_tenant(guild)
            document = await self.store.get(guild_id)
            if document is None:
                raise StoreError(f"Guild {guild_id} could not be registered")

        await self.mutator.register_member(guild_id, member)
        await self.announce(document.welcome_channel, document.welcome_message, guild, member)
        await self.announce(
            document.member_add_channel, document.member_add_message, guild, member
        )

    async def member_left(self, member: Any) -> None:
        """Send the goodbye and leave-log messages. The member's record is kept."""
        guild = member.guild
        document = await self._try_load(str(guild.id))
        if document is None:
            return
        await self.announce(document.goodbye_channel, document.goodbye_message, guild, member)
        await self.announce(
            document.member_remove_channel, document.member_remove_message, guild, member
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _try_load(self, guild_id: str) -> TenantDocument | None:
        try:
            document = await self.store.get(guild_id)
        except (StoreError, DocumentDecodeError):
            log.exception("Could not load document for guild %s", guild_id)
            return None
        if document is None:
            log.debug("Guild %s has no document", guild_id)
        return document

    async def announce(self, channel_id: str, template: str, guild: Any, member: Any) -> bool:
        """Send ``template`` formatted for ``member`` if both parts are configured."""
        if not channel_id or not template:
            return False
        content = format_member_message(template, guild, member)
        try:
            await self.adapter.send_message(channel_id, content)
        except httpx.HTTPError:
            log.warning("Could not send message to channel %s", channel_id, exc_info=True)
            return False
        return True
