"""Registration of the bot's prefix commands."""

from __future__ import annotations

import logging

import httpx

from ..data.models import MutationResult, MutationStatus
from ..data.store import describe_channel
from .table import Command, CommandContext, CommandTable
from .utils import parse_duration

log = logging.getLogger("guildkeeper.commands")


def _reason(args: list[str]) -> str:
    return " ".join(args) or "No reason given"


def _log_outcome(ctx: CommandContext, member_id: str, result: MutationResult) -> None:
    if result.status is MutationStatus.TARGET_NOT_FOUND:
        log.info(
            "%s in guild %s: no record for member %s", ctx.name, ctx.guild_id, member_id
        )
    elif not result.applied:
        log.warning(
            "%s in guild %s for member %s not recorded (%s)",
            ctx.name,
            ctx.guild_id,
            member_id,
            result.status.value,
        )


def _action_reply(member_id: str, action: str, reason: str, result: MutationResult) -> str:
    reply = f"<@{member_id}> has been {action}: {reason}"
    if result.status is MutationStatus.STORE_ERROR:
        reply += " (not recorded in the moderation history)"
    return reply


def register_commands(table: CommandTable) -> CommandTable:
    """Register the moderation commands and the unknown-command fallback."""

    @table.command("warn", aliases=("w",), description="Warn one or more members")
    async def warn(ctx: CommandContext, args: list[str]) -> None:
        if not ctx.members:
            await ctx.reply(f"Usage: `{ctx.prefix}warn @member [reason]`")
            return
        reason = _reason(args)
        for member_id in ctx.members:
            result = await ctx.mutator.log_warning(
                ctx.guild_id, member_id, describe_channel(ctx.channel), reason
            )
            _log_outcome(ctx, member_id, result)
            if result.applied:
                await ctx.reply(f"<@{member_id}> has been warned: {reason}")

    @table.command("kick", description="Kick one or more members")
    async def kick(ctx: CommandContext, args: list[str]) -> None:
        if not ctx.members:
            await ctx.reply(f"Usage: `{ctx.prefix}kick @member [reason]`")
            return
        reason = _reason(args)
        for member_id in ctx.members:
            try:
                await ctx.adapter.kick_member(ctx.guild_id, member_id, reason)
            except httpx.HTTPError:
                log.warning("Could not kick %s from guild %s", member_id, ctx.guild_id, exc_info=True)
                continue
            result = await ctx.mutator.log_kick(
                ctx.guild_id, member_id, describe_channel(ctx.channel), reason
            )
            _log_outcome(ctx, member_id, result)
            await ctx.reply(_action_reply(member_id, "kicked", reason, result))

    @table.command("ban", description="Ban one or more members")
    async def ban(ctx: CommandContext, args: list[str]) -> None:
        if not ctx.members:
            await ctx.reply(f"Usage: `{ctx.prefix}ban @member [reason]`")
            return
        reason = _reason(args)
        for member_id in ctx.members:
            try:
                await ctx.adapter.ban_member(ctx.guild_id, member_id, reason)
            except httpx.HTTPError:
                log.warning("Could not ban %s from guild %s", member_id, ctx.guild_id, exc_info=True)
                continue
            result = await ctx.mutator.log_ban(
                ctx.guild_id, member_id, describe_channel(ctx.channel), reason
            )
            _log_outcome(ctx, member_id, result)
            await ctx.reply(_action_reply(member_id, "banned", reason, result))

    @table.command("mute", description="Mute members using the configured muted role")
    async def mute(ctx: CommandContext, args: list[str]) -> None:
        if not ctx.members:
            await ctx.reply(f"Usage: `{ctx.prefix}mute @member [duration] [reason]`")
            return
        role = ctx.tenant.muted_role if ctx.tenant else ""
        if not role:
            await ctx.reply("No muted role is configured for this server.")
            return
        duration = parse_duration(args[0]) if args else None
        if duration is not None:
            args = args[1:]
        reason = _reason(args)
        for member_id in ctx.members:
            try:
                await ctx.adapter.add_role(ctx.guild_id, member_id, role)
            except httpx.HTTPError:
                log.warning("Could not mute %s in guild %s", member_id, ctx.guild_id, exc_info=True)
                continue
            result = await ctx.mutator.log_mute(
                ctx.guild_id, member_id, describe_channel(ctx.channel), reason, duration
            )
            _log_outcome(ctx, member_id, result)
            await ctx.reply(_action_reply(member_id, "muted", reason, result))

    @table.command("prefix", description="Show or change the command prefix")
    async def prefix(ctx: CommandContext, args: list[str]) -> None:
        if not args:
            await ctx.reply(f"The current prefix is `{ctx.prefix}`")
            return
        result = await ctx.mutator.set_prefix(ctx.guild_id, args[0])
        if result.applied:
            await ctx.reply(f"Prefix changed to `{args[0]}`")

    async def unknown(ctx: CommandContext, args: list[str]) -> None:
        await ctx.reply(f"Unknown command `{ctx.name}`.")

    table.set_fallback(Command(name="unknown", handler=unknown, guild_only=False))
    return table
