from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Iterable
from typing import Any, NamedTuple

log = logging.getLogger("guildkeeper.commands")

_NAME = re.compile(r"\S*")
_MEMBER_MENTION = re.compile(r"<@!?(\d+)>")
_CHANNEL_MENTION = re.compile(r"<#(\d+)>")
_ROLE_MENTION = re.compile(r"<@&(\d+)>")
_DURATION_PART = re.compile(r"(\d+)([smhdw])")
_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


class Mentions(NamedTuple):
    args: list[str]
    members: list[str]
    channels: list[str]
    roles: list[str]


def parse_command(content: str, prefix: str) -> tuple[str, str]:
    """Split ``content`` into the command name and the remaining text.

    ``content`` must start with ``prefix``. The name is the first
    whitespace-delimited token directly after the prefix.
    """
    body = content[len(prefix):]
    name = _NAME.match(body).group(0)
    return name, body[len(name):]


def split_arguments(rest: str, delimiter: str = " ") -> list[str]:
    """Split the text after the command name into non-empty arguments."""
    if not delimiter or delimiter.isspace():
        return rest.split()
    return [part.strip() for part in rest.split(delimiter) if part.strip()]


def resolve_mentions(args: Iterable[str], member_ids: Iterable[str] = ()) -> Mentions:
    """Pull member, channel and role references out of ``args``.

    Mentions are recognised by their ``<@id>``/``<#id>``/``<@&id>`` markup;
    bare ids are taken as members when they belong to a known member.
    """
    known = set(member_ids)
    remaining: list[str] = []
    members: list[str] = []
    channels: list[str] = []
    roles: list[str] = []
    for arg in args:
        if m := _ROLE_MENTION.fullmatch(arg):
            roles.append(m.group(1))
        elif m := _MEMBER_MENTION.fullmatch(arg):
            members.append(m.group(1))
        elif m := _CHANNEL_MENTION.fullmatch(arg):
            channels.append(m.group(1))
        elif arg in known:
            members.append(arg)
        else:
            remaining.append(arg)
    return Mentions(remaining, members, channels, roles)


def parse_duration(token: str) -> datetime.timedelta | None:
    """Parse ``"90s"``, ``"10m"``, ``"1h30m"`` style durations."""
    token = token.strip().lower()
    if not token or _DURATION_PART.sub("", token):
        return None
    seconds = sum(int(n) * _UNITS[u] for n, u in _DURATION_PART.findall(token))
    return datetime.timedelta(seconds=seconds)


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def format_member_message(template: str, guild: Any, member: Any) -> str:
    """Fill the welcome/goodbye ``template`` for ``member`` of ``guild``."""
    values = _Placeholders(
        user=str(member),
        username=member.name,
        mention=f"<@{member.id}>",
        guild=guild.name,
        member_count=getattr(guild, "member_count", None) or len(getattr(guild, "members", [])),
    )
    try:
        return template.format_map(values)
    except (ValueError, AttributeError, IndexError, KeyError):
        log.warning("Malformed message template %r; sending it unformatted", template)
        return template
