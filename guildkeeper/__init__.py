"""Core package for guildkeeper.

This module exposes the guild document models and the storage layer so
that consumers of the package can simply import them from ``guildkeeper``.
"""

from .core.models import MemberRecord, ModerationEntry, TenantDocument
from .core.storage import TenantStore
from .data.store import RecordMutator

__all__ = ["MemberRecord", "ModerationEntry", "TenantDocument", "TenantStore", "RecordMutator"]
