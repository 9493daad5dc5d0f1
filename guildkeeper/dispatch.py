"""Turn inbound messages into command invocations."""

from __future__ import annotations

import logging
from typing import Any

from .adapters.base import Adapter
from .commands.table import CommandContext, CommandTable
from .commands.utils import parse_command, resolve_mentions, split_arguments
from .core.models import DEFAULT_PREFIX, TenantDocument
from .core.storage import TenantStore
from .data.store import RecordMutator
from .errors import DocumentDecodeError, StoreError

log = logging.getLogger("guildkeeper.dispatch")


class Dispatcher:
    """Resolve the guild context, prefix and command for each message.

    Messages that are not commands, or that a guild's settings reject, are
    dropped without any reply. Unknown command names go to the table's
    fallback command.
    """

    def __init__(
        self,
        store: TenantStore,
        mutator: RecordMutator,
        table: CommandTable,
        adapter: Adapter,
        default_prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self.store = store
        self.mutator = mutator
        self.table = table
        self.adapter = adapter
        self.default_prefix = default_prefix

    async def dispatch(self, message: Any) -> CommandContext | None:
        """Handle one message; return the context of the invoked command."""
        channel = getattr(message, "channel", None)
        if channel is None:
            return None
        if getattr(message.author, "bot", False):
            return None

        guild = getattr(message, "guild", None)
        tenant: TenantDocument | None = None
        prefix = self.default_prefix
        if guild is not None:
            tenant = await self.load_tenant(guild)
            if tenant is None:
                return None
            prefix = tenant.prefix or self.default_prefix

        content = message.content or ""
        if not content.startswith(prefix):
            return None

        name, rest = parse_command(content, prefix)
        command = self.table.resolve(name)
        raw_args = split_arguments(rest, command.delimiter)
        member_ids = [m.id for m in tenant.members] if tenant else []
        mentions = resolve_mentions(raw_args, member_ids)

        ctx = CommandContext(
            adapter=self.adapter,
            mutator=self.mutator,
            message=message,
            channel=channel,
            command=command,
            name=name,
            prefix=prefix,
            guild=guild,
            tenant=tenant,
            raw_args=raw_args,
            args=mentions.args,
            members=mentions.members,
            channels=mentions.channels,
            roles=mentions.roles,
        )

        if guild is None:
            if command.guild_only:
                log.debug("Ignoring guild-only command %s in a direct message", name)
                return None
        elif not self.is_permitted(ctx):
            return None

        log.info(
            "%s (%s) ran %s%s in %s",
            message.author,
            ctx.author_id,
            prefix,
            command.name,
            ctx.guild_id or "DM",
        )
        await command.invoke(ctx, ctx.args)
        return ctx

    async def load_tenant(self, guild: Any) -> TenantDocument | None:
        """Fetch the guild's document, registering the guild on first sight."""
        guild_id = str(guild.id)
        try:
            tenant = await self.store.get(guild_id)
            if tenant is None:
                result = await self.mutator.register_tenant(guild)
                tenant = result.document or await self.store.get(guild_id)
        except StoreError:
            log.warning("Could not load document for guild %s", guild_id, exc_info=True)
            return None
        except DocumentDecodeError:
            log.exception("Document for guild %s is unreadable", guild_id)
            return None
        return tenant

    def is_permitted(self, ctx: CommandContext) -> bool:
        """Apply the guild's blocked-channel, blocked-member and disabled lists."""
        tenant = ctx.tenant
        if tenant is None:
            return False
        if str(ctx.channel.id) in tenant.blocked_channels:
            log.debug("Channel %s is blocked in guild %s", ctx.channel.id, tenant.guild_id)
            return False
        if ctx.author_id in tenant.blocked_members:
            log.debug("Member %s is blocked in guild %s", ctx.author_id, tenant.guild_id)
            return False
        if ctx.command.name in tenant.disabled_commands:
            log.debug("Command %s is disabled in guild %s", ctx.command.name, tenant.guild_id)
            return False
        return True
