"""Base interfaces for the external services the bot talks to."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Adapter(ABC):
    """Abstract adapter for outbound chat-platform actions."""

    @abstractmethod
    async def send_message(self, channel_id: str, content: str) -> None:
        """Send ``content`` to the specified ``channel_id``."""

    @abstractmethod
    async def kick_member(self, guild_id: str, member_id: str, reason: str = "") -> None:
        """Remove ``member_id`` from ``guild_id``."""

    @abstractmethod
    async def ban_member(self, guild_id: str, member_id: str, reason: str = "") -> None:
        """Ban ``member_id`` from ``guild_id``."""

    @abstractmethod
    async def add_role(self, guild_id: str, member_id: str, role_id: str) -> None:
        """Grant ``role_id`` to ``member_id``."""


class KeyValueStore(ABC):
    """Abstract byte-string key-value store without transactions."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise :class:`~guildkeeper.errors.StoreConnectionError` if unreachable."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the value stored at ``key`` or ``None``."""

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Unconditionally store ``value`` at ``key``."""

    @abstractmethod
    async def set_if_absent(self, key: str, value: bytes) -> bool:
        """Store ``value`` only if ``key`` is unset. Return ``True`` if written."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return whether ``key`` is set."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove ``key``. Return ``True`` if something was removed."""
