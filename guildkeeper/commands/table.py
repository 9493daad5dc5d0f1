"""Command metadata, per-message context and the name -> command registry."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..adapters.base import Adapter
from ..core.models import TenantDocument
from ..data.store import RecordMutator

Handler = Callable[["CommandContext", list[str]], Awaitable[None]]


@dataclass
class Command:
    """A named, invokable bot command."""

    name: str
    handler: Handler
    aliases: tuple[str, ...] = ()
    delimiter: str = " "  # separates arguments after the command name
    guild_only: bool = True
    disabled_by_default: bool = False
    description: str = ""

    async def invoke(self, ctx: CommandContext, args: list[str]) -> None:
        await self.handler(ctx, args)


@dataclass
class CommandContext:
    """Everything a command needs to act on one inbound message."""

    adapter: Adapter
    mutator: RecordMutator
    message: Any
    channel: Any
    command: Command
    name: str
    prefix: str
    guild: Any | None = None
    tenant: TenantDocument | None = None
    raw_args: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    members: list[str] = field(default_factory=list)
    channels: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)

    @property
    def guild_id(self) -> str | None:
        return str(self.guild.id) if self.guild is not None else None

    @property
    def author_id(self) -> str:
        return str(self.message.author.id)

    async def reply(self, content: str) -> None:
        """Send ``content`` to the channel the command came from."""
        await self.adapter.send_message(str(self.channel.id), content)


class CommandTable:
    """Registry mapping command names and aliases to :class:`Command` objects.

    The table is filled once at startup. Lookups that miss return the
    fallback command so the dispatcher never has to handle unknown names.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._lookup: dict[str, Command] = {}
        self.fallback: Command | None = None

    def add(self, command: Command) -> Command:
        for key in (command.name, *command.aliases):
            key = key.lower()
            if key in self._lookup:
                raise ValueError(f"Command name or alias {key!r} is already registered")
            self._lookup[key] = command
        self._commands[command.name] = command
        return command

    def command(self, name: str, **options: Any) -> Callable[[Handler], Command]:
        """Decorator registering an async handler under ``name``."""

        def decorator(func: Handler) -> Command:
            return self.add(Command(name=name, handler=func, **options))

        return decorator

    def set_fallback(self, command: Command) -> None:
        self.fallback = command

    def get(self, name: str) -> Command | None:
        return self._lookup.get(name.lower())

    def resolve(self, name: str) -> Command:
        """Return the command for ``name`` or alias, else the fallback."""
        command = self.get(name)
        if command is not None:
            return command
        if self.fallback is None:
            raise LookupError(f"No command named {name!r} and no fallback registered")
        return self.fallback

    def disabled_by_default(self) -> list[str]:
        return [c.name for c in self._commands.values() if c.disabled_by_default]

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lookup
