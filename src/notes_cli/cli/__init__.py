"""Command-line interface for the notes service."""

from notes_cli.cli.app import main, run
from notes_cli.cli.builtin_commands import (
    AddCommand,
    ListCommand,
    RemoveCommand,
    UpdateCommand,
    create_default_registry,
)
from notes_cli.cli.commands import (
    Command,
    CommandContext,
    CommandName,
    CommandRegistry,
    UsageError,
    parse_task_number,
)

__all__ = [
    "AddCommand",
    "Command",
    "CommandContext",
    "CommandName",
    "CommandRegistry",
    "ListCommand",
    "RemoveCommand",
    "UpdateCommand",
    "UsageError",
    "create_default_registry",
    "main",
    "parse_task_number",
    "run",
]
