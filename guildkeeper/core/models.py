"""Data models for a guild's persisted state.

Each guild is stored as a single :class:`TenantDocument`. The models are
implemented using :mod:`pydantic` so that they provide runtime validation
and a lossless JSON encoding, which is what the key-value store holds.
"""

from __future__ import annotations

import datetime
from datetime import UTC

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = 1
DEFAULT_PREFIX = "+"


def _now() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class ModerationEntry(BaseModel):
    """One logged moderation action against a member.

    Attributes
    ----------
    channel:
        Display string of the channel the action was taken in, formatted as
        ``"<name> / <id>"``.
    reason:
        Free-text reason given by the moderator.
    created_at:
        When the entry was recorded.

    """

    model_config = ConfigDict(frozen=True)

    channel: str
    reason: str = ""
    created_at: datetime.datetime = Field(default_factory=_now)


class WarningEntry(ModerationEntry):
    """A warning issued to a member."""


class KickEntry(ModerationEntry):
    """A kick of a member."""


class BanEntry(ModerationEntry):
    """A ban of a member."""


class MuteEntry(ModerationEntry):
    """A mute of a member for ``duration``."""

    duration: datetime.timedelta = datetime.timedelta(0)


class MemberRecord(BaseModel):
    """Per-user state and moderation history within one guild."""

    id: str
    username: str
    discriminator: str = "0"
    nickname: str | None = None
    created_at: datetime.datetime | None = None
    joined_at: datetime.datetime | None = None
    previous_usernames: list[str] = Field(default_factory=list)
    previous_nicknames: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    warnings: list[WarningEntry] = Field(default_factory=list)
    kicks: list[KickEntry] = Field(default_factory=list)
    bans: list[BanEntry] = Field(default_factory=list)
    mutes: list[MuteEntry] = Field(default_factory=list)


class TenantDocument(BaseModel):
    """The full persisted state of one guild."""

    schema_version: int = SCHEMA_VERSION
    guild_id: str
    name: str
    prefix: str = DEFAULT_PREFIX
    members: list[MemberRecord] = Field(default_factory=list)
    blocked_channels: list[str] = Field(default_factory=list)
    blocked_members: list[str] = Field(default_factory=list)
    welcome_message: str = ""
    welcome_channel: str = ""
    goodbye_message: str = ""
    goodbye_channel: str = ""
    member_add_message: str = ""
    member_add_channel: str = ""
    member_remove_message: str = ""
    member_remove_channel: str = ""
    events: list[str] = Field(default_factory=list)
    disabled_commands: list[str] = Field(default_factory=list)
    birthday_role: str = ""
    muted_role: str = ""
    auto_roles: list[str] = Field(default_factory=list)

    def find_member(self, member_id: str) -> MemberRecord | None:
        """Return the record for ``member_id`` or ``None`` if absent."""
        return next((m for m in self.members if m.id == member_id), None)
