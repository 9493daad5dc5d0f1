"""Discord adapter implementing the :class:`~guildkeeper.adapters.base.Adapter`.

The adapter only covers the outbound actions the bot performs. It uses
:mod:`httpx` to communicate with Discord's HTTP API which keeps the
implementation independent of the gateway connection while remaining fully
asynchronous.
"""

from __future__ import annotations

import httpx

from .base import Adapter


class DiscordAdapter(Adapter):
    """Adapter that sends requests directly to the Discord HTTP API."""

    api_base = "https://discord.com/api/v10"

    def __init__(self, token: str, client: httpx.AsyncClient | None = None) -> None:
        """Store authentication ``token`` and optional HTTP ``client``."""
        self.token = token
        self.client = client or httpx.AsyncClient()

    def _headers(self, reason: str = "") -> dict[str, str]:
        headers = {"Authorization": f"Bot {self.token}"}
        if reason:
            headers["X-Audit-Log-Reason"] = reason[:512]
        return headers

    # ------------------------------------------------------------------
    async def send_message(self, channel_id: str, content: str) -> None:
        """Send a message to a channel.

        Parameters
        ----------
        channel_id:
            Identifier of the Discord channel.
        content:
            Message body to send.

        """
        url = f"{self.api_base}/channels/{channel_id}/messages"
        payload = {"content": content}
        response = await self.client.post(url, json=payload, headers=self._headers())
        response.raise_for_status()

    async def kick_member(self, guild_id: str, member_id: str, reason: str = "") -> None:
        """Kick a member from a guild."""
        url = f"{self.api_base}/guilds/{guild_id}/members/{member_id}"
        response = await self.client.delete(url, headers=self._headers(reason))
        response.raise_for_status()

    async def ban_member(self, guild_id: str, member_id: str, reason: str = "") -> None:
        """Ban a member from a guild."""
        url = f"{self.api_base}/guilds/{guild_id}/bans/{member_id}"
        response = await self.client.put(url, json={}, headers=self._headers(reason))
        response.raise_for_status()

    async def add_role(self, guild_id: str, member_id: str, role_id: str) -> None:
        """Add a role to a guild member."""
        url = f"{self.api_base}/guilds/{guild_id}/members/{member_id}/roles/{role_id}"
        response = await self.client.put(url, headers=self._headers())
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
