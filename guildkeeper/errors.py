"""Exception hierarchy shared by the storage and dispatch layers."""

from __future__ import annotations


class GuildKeeperError(Exception):
    """Base class for all errors raised by :mod:`guildkeeper`."""


class StoreError(GuildKeeperError):
    """A key-value store operation failed."""


class StoreConnectionError(StoreError):
    """The key-value store could not be reached."""


class DocumentDecodeError(GuildKeeperError):
    """A stored tenant document could not be decoded.

    Raised instead of falling back to an empty document so that a corrupt
    entry is never silently overwritten by the next write.
    """

    def __init__(self, guild_id: str, reason: str) -> None:
        super().__init__(f"Could not decode document for guild {guild_id}: {reason}")
        self.guild_id = guild_id
        self.reason = reason
