"""Read-modify-write operations on tenant documents."""

from __future__ import annotations

import asyncio
import datetime
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Any

import discord

from ..core.models import DEFAULT_PREFIX, MemberRecord, TenantDocument
from ..core.storage import TenantStore
from ..errors import StoreError
from .models import ModerationKind, MutationResult, MutationStatus

log = logging.getLogger("guildkeeper.mutator")


def describe_channel(channel: Any) -> str:
    """Return the ``"<name> / <id>"`` label stored on moderation entries."""
    return f"{getattr(channel, 'name', '')} / {channel.id}"


def member_record(member: Any, guild_id: str | None = None) -> MemberRecord:
    """Build a fresh :class:`MemberRecord` from a gateway member object."""
    return MemberRecord(
        id=str(member.id),
        username=member.name,
        discriminator=str(getattr(member, "discriminator", "0") or "0"),
        nickname=getattr(member, "nick", None),
        created_at=discord.utils.snowflake_time(int(member.id)),
        joined_at=getattr(member, "joined_at", None),
        roles=[
            str(role.id)
            for role in getattr(member, "roles", [])
            if str(role.id) != guild_id  # skip @everyone
        ],
    )


def seed_document(
    guild: Any, prefix: str = DEFAULT_PREFIX, disabled_commands: Iterable[str] = ()
) -> TenantDocument:
    """Build the initial document for ``guild`` with one record per member."""
    guild_id = str(guild.id)
    return TenantDocument(
        guild_id=guild_id,
        name=guild.name,
        prefix=prefix,
        members=[member_record(m, guild_id) for m in getattr(guild, "members", [])],
        disabled_commands=list(disabled_commands),
    )


class RecordMutator:
    """Apply single semantic changes to one guild's document.

    Every mutation fetches the full document, changes it in memory and
    writes the whole document back. Mutations for the same guild are
    serialised by a per-guild :class:`asyncio.Lock` so that concurrent
    updates cannot overwrite each other.
    """

    def __init__(
        self,
        store: TenantStore,
        default_prefix: str = DEFAULT_PREFIX,
        default_disabled: Iterable[str] = (),
    ) -> None:
        self.store = store
        self.default_prefix = default_prefix
        # commands that start switched off in new guilds
        self.default_disabled = list(default_disabled)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock_for(self, guild_id: str) -> asyncio.Lock:
        return self._locks[str(guild_id)]

    # ------------------------------------------------------------------
    # Generic update
    # ------------------------------------------------------------------
    async def update(
        self, guild_id: str, change: Callable[[TenantDocument], MutationStatus]
    ) -> MutationResult:
        """Run ``change`` against the stored document and persist the result.

        The document is written back only if ``change`` modified it. Decode
        failures propagate as :class:`~guildkeeper.errors.DocumentDecodeError`.
        """
        guild_id = str(guild_id)
        async with self.lock_for(guild_id):
            try:
                document = await self.store.get(guild_id)
            except StoreError:
                log.warning("Could not read document for guild %s", guild_id, exc_info=True)
                return MutationResult(MutationStatus.STORE_ERROR)
            if document is None:
                return MutationResult(MutationStatus.TENANT_NOT_FOUND)

            before = document.model_copy(deep=True)
            status = change(document)
            if document != before:
                try:
                    await self.store.put(document)
                except StoreError:
                    log.warning("Could not write document for guild %s", guild_id, exc_info=True)
                    return MutationResult(MutationStatus.STORE_ERROR, before)
            return MutationResult(status, document)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    async def register_tenant(self, guild: Any) -> MutationResult:
        """Create the document for ``guild`` unless one already exists."""
        document = seed_document(guild, self.default_prefix, self.default_disabled)
        async with self.lock_for(document.guild_id):
            try:
                created = await self.store.create_if_absent(document)
            except StoreError:
                log.warning("Could not register guild %s", document.guild_id, exc_info=True)
                return MutationResult(MutationStatus.STORE_ERROR)
        if not created:
            return MutationResult(MutationStatus.ALREADY_EXISTS)
        log.info(
            "Registered guild %s (%s) with %d members",
            document.name,
            document.guild_id,
            len(document.members),
        )
        return MutationResult(MutationStatus.APPLIED, document)

    async def delete_tenant(self, guild_id: str) -> MutationResult:
        """Remove the guild's document and forget its lock.

        Runs under the guild's lock so an update already in progress
        finishes its write before the document is removed.
        """
        guild_id = str(guild_id)
        async with self.lock_for(guild_id):
            try:
                if not await self.store.exists(guild_id):
                    return MutationResult(MutationStatus.TENANT_NOT_FOUND)
                await self.store.delete(guild_id)
            except StoreError:
                log.warning("Could not delete document for guild %s", guild_id, exc_info=True)
                return MutationResult(MutationStatus.STORE_ERROR)
            # tasks already waiting hold this lock object; later callers get a new one
            self._locks.pop(guild_id, None)
        return MutationResult(MutationStatus.APPLIED)

    async def register_member(self, guild_id: str, member: Any) -> MutationResult:
        """Add a record for ``member``; refresh it if one is already present."""
        fresh = member_record(member, str(guild_id))

        def change(document: TenantDocument) -> MutationStatus:
            existing = document.find_member(fresh.id)
            if existing is None:
                document.members.append(fresh)
                return MutationStatus.APPLIED
            if existing.username != fresh.username:
                existing.previous_usernames.append(existing.username)
                existing.username = fresh.username
            if existing.nickname and existing.nickname != fresh.nickname:
                existing.previous_nicknames.append(existing.nickname)
            existing.nickname = fresh.nickname
            existing.discriminator = fresh.discriminator
            existing.joined_at = fresh.joined_at or existing.joined_at
            existing.roles = fresh.roles
            return MutationStatus.ALREADY_EXISTS

        return await self.update(guild_id, change)

    # ------------------------------------------------------------------
    # Moderation history
    # ------------------------------------------------------------------
    async def append_entry(
        self,
        guild_id: str,
        member_id: str,
        kind: ModerationKind,
        channel: str,
        reason: str = "",
        duration: datetime.timedelta | None = None,
    ) -> MutationResult:
        """Append one moderation entry of ``kind`` to ``member_id``'s history."""
        fields: dict[str, Any] = {"channel": channel, "reason": reason}
        if kind is ModerationKind.MUTE:
            fields["duration"] = duration or datetime.timedelta(0)
        entry = kind.entry_type(**fields)

        def change(document: TenantDocument) -> MutationStatus:
            record = document.find_member(str(member_id))
            if record is None:
                return MutationStatus.TARGET_NOT_FOUND
            getattr(record, kind.value).append(entry)
            return MutationStatus.APPLIED

        result = await self.update(guild_id, change)
        if result.status is MutationStatus.TARGET_NOT_FOUND:
            log.debug("No record for member %s in guild %s", member_id, guild_id)
        return result

    async def log_warning(self, guild_id: str, member_id: str, channel: str, reason: str = "") -> MutationResult:
        return await self.append_entry(guild_id, member_id, ModerationKind.WARNING, channel, reason)

    async def log_kick(self, guild_id: str, member_id: str, channel: str, reason: str = "") -> MutationResult:
        return await self.append_entry(guild_id, member_id, ModerationKind.KICK, channel, reason)

    async def log_ban(self, guild_id: str, member_id: str, channel: str, reason: str = "") -> MutationResult:
        return await self.append_entry(guild_id, member_id, ModerationKind.BAN, channel, reason)

    async def log_mute(
        self,
        guild_id: str,
        member_id: str,
        channel: str,
        reason: str = "",
        duration: datetime.timedelta | None = None,
    ) -> MutationResult:
        return await self.append_entry(
            guild_id, member_id, ModerationKind.MUTE, channel, reason, duration
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    async def set_prefix(self, guild_id: str, prefix: str) -> MutationResult:
        def change(document: TenantDocument) -> MutationStatus:
            document.prefix = prefix
            return MutationStatus.APPLIED

        return await self.update(guild_id, change)
