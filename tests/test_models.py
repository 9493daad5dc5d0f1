"""Tests for the guild document models and their encoding."""

import datetime
import json
from datetime import UTC

import pytest
from pydantic import ValidationError

from guildkeeper.core.models import (
    SCHEMA_VERSION,
    MemberRecord,
    MuteEntry,
    TenantDocument,
    WarningEntry,
)
from guildkeeper.core.storage import TenantStore
from guildkeeper.errors import DocumentDecodeError


def _document() -> TenantDocument:
    when = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    member = MemberRecord(
        id="1",
        username="alice",
        nickname="Al",
        created_at=when,
        joined_at=when,
        previous_usernames=["alicia"],
        roles=["10", "11"],
        warnings=[WarningEntry(channel="general / 5", reason="spam", created_at=when)],
        mutes=[
            MuteEntry(
                channel="general / 5",
                reason="flood",
                created_at=when,
                duration=datetime.timedelta(minutes=10),
            )
        ],
    )
    return TenantDocument(
        guild_id="99",
        name="Guild",
        prefix="!",
        members=[member, MemberRecord(id="2", username="bob")],
        blocked_channels=["7"],
        welcome_message="Hi {mention}",
        welcome_channel="8",
        disabled_commands=["ban"],
        muted_role="12",
        auto_roles=["13"],
    )


def test_document_defaults() -> None:
    """Unspecified fields on ``TenantDocument`` use sensible defaults."""
    doc = TenantDocument(guild_id="1", name="Guild")
    assert doc.schema_version == SCHEMA_VERSION
    assert doc.prefix == "+"
    assert doc.members == []
    assert doc.welcome_channel == ""


def test_member_defaults() -> None:
    member = MemberRecord(id="1", username="alice")
    assert member.warnings == member.kicks == member.bans == member.mutes == []
    assert member.nickname is None


def test_encode_decode_round_trip() -> None:
    doc = _document()
    assert TenantStore.decode(TenantStore.encode(doc)) == doc


def test_find_member() -> None:
    doc = _document()
    assert doc.find_member("2").username == "bob"
    assert doc.find_member("3") is None


def test_entries_are_immutable() -> None:
    entry = WarningEntry(channel="general / 5", reason="spam")
    with pytest.raises(ValidationError):
        entry.reason = "changed"


def test_decode_without_schema_version() -> None:
    raw = json.dumps({"guild_id": "1", "name": "Old guild", "prefix": "?"})
    doc = TenantStore.decode(raw, "1")
    assert doc.schema_version == SCHEMA_VERSION
    assert doc.prefix == "?"


def test_decode_rejects_newer_schema() -> None:
    raw = json.dumps({"schema_version": SCHEMA_VERSION + 1, "guild_id": "1", "name": "x"})
    with pytest.raises(DocumentDecodeError):
        TenantStore.decode(raw, "1")


@pytest.mark.parametrize("raw", [b"not json", b"[]", b'{"name": "no id"}'])
def test_decode_rejects_malformed(raw) -> None:
    with pytest.raises(DocumentDecodeError) as info:
        TenantStore.decode(raw, "42")
    assert info.value.guild_id == "42"
