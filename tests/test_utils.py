import datetime
import types

import pytest

from guildkeeper.commands.utils import (
    format_member_message,
    parse_command,
    parse_duration,
    resolve_mentions,
    split_arguments,
)


def test_parse_command_takes_first_token() -> None:
    assert parse_command("+warn @user spam", "+") == ("warn", " @user spam")
    assert parse_command("+ping", "+") == ("ping", "")
    assert parse_command("!!Help me", "!!") == ("Help", " me")


def test_parse_command_space_after_prefix_gives_empty_name() -> None:
    assert parse_command("+ warn", "+") == ("", " warn")


def test_split_arguments_on_whitespace() -> None:
    assert split_arguments(" @user spam", " ") == ["@user", "spam"]
    assert split_arguments("  a   b ", " ") == ["a", "b"]
    assert split_arguments("", " ") == []


def test_split_arguments_custom_delimiter() -> None:
    assert split_arguments(" first thing, second , ,third", ",") == [
        "first thing",
        "second",
        "third",
    ]


def test_resolve_mentions() -> None:
    mentions = resolve_mentions(
        ["<@1>", "<@!2>", "<#3>", "<@&4>", "5", "6", "because"], member_ids=["5"]
    )
    assert mentions.members == ["1", "2", "5"]
    assert mentions.channels == ["3"]
    assert mentions.roles == ["4"]
    assert mentions.args == ["6", "because"]


@pytest.mark.parametrize(
    "token,expected",
    [
        ("30s", datetime.timedelta(seconds=30)),
        ("10m", datetime.timedelta(minutes=10)),
        ("1h30m", datetime.timedelta(hours=1, minutes=30)),
        ("2D", datetime.timedelta(days=2)),
        ("1w", datetime.timedelta(weeks=1)),
    ],
)
def test_parse_duration(token, expected) -> None:
    assert parse_duration(token) == expected


@pytest.mark.parametrize("token", ["", "soon", "10", "5x", "m10"])
def test_parse_duration_rejects(token) -> None:
    assert parse_duration(token) is None


def test_format_member_message() -> None:
    guild = types.SimpleNamespace(name="Guild", member_count=12)
    member = types.SimpleNamespace(id=5, name="alice")
    text = format_member_message("Welcome {mention} to {guild}! You are #{member_count}. {other}", guild, member)
    assert text == "Welcome <@5> to Guild! You are #12. {other}"


def test_format_member_message_malformed_template() -> None:
    guild = types.SimpleNamespace(name="Guild", members=[])
    member = types.SimpleNamespace(id=5, name="alice")
    assert format_member_message("Hi {", guild, member) == "Hi {"
