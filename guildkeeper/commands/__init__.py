"""Prefix commands and the registry the dispatcher resolves them from."""

from .register import register_commands
from .table import Command, CommandContext, CommandTable

__all__ = ["Command", "CommandContext", "CommandTable", "register_commands"]
