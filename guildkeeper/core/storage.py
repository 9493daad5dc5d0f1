"""Document store client mapping guild ids to :class:`TenantDocument` values."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ..adapters.base import KeyValueStore
from ..errors import DocumentDecodeError
from .models import SCHEMA_VERSION, TenantDocument

log = logging.getLogger("guildkeeper.storage")


class TenantStore:
    """Persist one :class:`TenantDocument` per guild in a key-value store.

    The store has no notion of partial updates: every write replaces the
    whole encoded document stored under the guild id. Serialising concurrent
    writers is the caller's job (see :class:`~guildkeeper.data.store.RecordMutator`).
    """

    def __init__(self, kv: KeyValueStore) -> None:
        """Use ``kv`` for all reads and writes."""
        self.kv = kv

    # ------------------------------------------------------------------
    # Encoding
    @staticmethod
    def encode(document: TenantDocument) -> bytes:
        """Serialise ``document`` to JSON bytes."""
        return document.model_dump_json().encode("utf-8")

    @staticmethod
    def decode(raw: bytes | str, guild_id: str = "?") -> TenantDocument:
        """Parse ``raw`` into a document.

        Raises :class:`DocumentDecodeError` for malformed JSON, values that
        fail validation, or a document written by a newer schema.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise DocumentDecodeError(guild_id, f"invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise DocumentDecodeError(guild_id, "expected a JSON object")
        version = data.get("schema_version", SCHEMA_VERSION)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise DocumentDecodeError(guild_id, f"unsupported schema_version {version!r}")
        try:
            return TenantDocument.model_validate(data)
        except ValidationError as exc:
            raise DocumentDecodeError(guild_id, str(exc)) from exc

    # ------------------------------------------------------------------
    # Store operations
    async def exists(self, guild_id: str) -> bool:
        """Return whether a document is stored for ``guild_id``."""
        return await self.kv.exists(guild_id)

    async def delete(self, guild_id: str) -> bool:
        """Remove the document for ``guild_id``."""
        return await self.kv.delete(guild_id)

    async def create_if_absent(self, document: TenantDocument) -> bool:
        """Store ``document`` unless its guild already has one.

        Returns ``True`` if the document was written.
        """
        created = await self.kv.set_if_absent(document.guild_id, self.encode(document))
        if not created:
            log.debug("Document for guild %s already exists", document.guild_id)
        return created

    async def get(self, guild_id: str) -> TenantDocument | None:
        """Fetch the document for ``guild_id``; ``None`` if it is not stored."""
        raw = await self.kv.get(guild_id)
        if raw is None:
            return None
        return self.decode(raw, guild_id)

    async def put(self, document: TenantDocument) -> None:
        """Unconditionally overwrite the stored document."""
        await self.kv.set(document.guild_id, self.encode(document))
