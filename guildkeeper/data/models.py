from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type

from ..core.models import (
    BanEntry,
    KickEntry,
    ModerationEntry,
    MuteEntry,
    TenantDocument,
    WarningEntry,
)

class ModerationKind(str, Enum):
    WARNING = "warnings"
    KICK = "kicks"
    BAN = "bans"
    MUTE = "mutes"

    @property
    def entry_type(self) -> Type[ModerationEntry]:
        return _ENTRY_TYPES[self]

_ENTRY_TYPES = {
    ModerationKind.WARNING: WarningEntry,
    ModerationKind.KICK: KickEntry,
    ModerationKind.BAN: BanEntry,
    ModerationKind.MUTE: MuteEntry,
}

class MutationStatus(str, Enum):
    APPLIED = "applied"
    ALREADY_EXISTS = "already_exists"
    TENANT_NOT_FOUND = "tenant_not_found"
    TARGET_NOT_FOUND = "target_not_found"
    STORE_ERROR = "store_error"

@dataclass
class MutationResult:
    status: MutationStatus
    document: Optional[TenantDocument] = None  # state after the mutation, if read

    @property
    def applied(self) -> bool:
        return self.status is MutationStatus.APPLIED

    def __bool__(self) -> bool:
        return self.applied
