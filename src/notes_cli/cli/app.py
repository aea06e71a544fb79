"""Command-line entry point for the notes CLI.

One invocation runs one subcommand:

    notes list
    notes add <task>
    notes update <task_num> <item>
    notes remove <task_num>

Arguments are validated before telemetry or the HTTP client are set up, so
a usage error never reaches the network. Every failure is reported once on
stderr and turned into exit status 1.
"""

import os
import sys
from typing import BinaryIO, Sequence

import httpx
from rich.console import Console

from notes_cli.cli.builtin_commands import create_default_registry
from notes_cli.cli.commands import (
    Command,
    CommandContext,
    CommandName,
    CommandRegistry,
    UsageError,
)
from notes_cli.client import TaskClient, TaskServiceError
from notes_cli.config import NotesSettings, get_settings
from notes_cli.constants import BASE_URL
from notes_cli.logging import bind_context, clear_context, configure_logging, get_logger
from notes_cli.telemetry import start_telemetry

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

HELP_ARGS = frozenset({"help", "-h", "--help"})


def _consoles() -> tuple[Console, Console]:
    """Consoles for help output (stdout) and diagnostics (stderr).

    Markup and emoji codes are off: messages carry server and user text
    verbatim.
    """
    out = Console(markup=False, emoji=False, highlight=False, soft_wrap=True)
    err = Console(
        stderr=True, markup=False, emoji=False, highlight=False, soft_wrap=True
    )
    return out, err


def _run_command(
    command: Command,
    args: tuple,
    settings: NotesSettings,
    transport: httpx.BaseTransport | None,
    stdout: BinaryIO,
    err: Console,
) -> int:
    """Run a validated command with telemetry and an HTTP client in scope."""
    with start_telemetry(settings) as telemetry, httpx.Client(transport=transport) as http:
        ctx = CommandContext(
            client=TaskClient(telemetry.instrument(http), BASE_URL),
            stdout=stdout,
        )
        try:
            with telemetry.span(
                f"notes {command.name.value}",
                {"notes.command": command.name.value},
            ):
                command.execute(ctx, *args)
        except TaskServiceError as e:
            logger.debug("Command failed", error=str(e))
            err.print(f"{command.failure_message}: {e}", style="red")
            return EXIT_FAILURE
    return EXIT_OK


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: NotesSettings | None = None,
    registry: CommandRegistry | None = None,
    transport: httpx.BaseTransport | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """Run the CLI and return the process exit status.

    Args:
        argv: Arguments after the program name (defaults to sys.argv[1:])
        settings: Settings to use instead of the loaded ones
        registry: Command registry (defaults to list/add/update/remove)
        transport: httpx transport override, e.g. httpx.MockTransport
        stdout: Binary stream for command output (defaults to sys.stdout.buffer)

    Returns:
        0 on success, 1 on any failure
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if settings is None:
        settings = get_settings()
    if registry is None:
        registry = create_default_registry()
    configure_logging(settings)
    out, err = _consoles()

    if not args or args[0] in HELP_ARGS:
        out.print(registry.format_help(), end="")
        return EXIT_OK

    name = CommandName.parse(args[0])
    command = registry.get(name) if name is not None else None
    if command is None:
        err.print("Invalid command", style="red")
        err.print(registry.format_help(), end="")
        return EXIT_FAILURE

    try:
        parsed = command.parse_args(args[1:])
    except UsageError as e:
        err.print(str(e), style="red")
        if e.show_help:
            err.print(registry.format_help(), end="")
        return EXIT_FAILURE

    bind_context(command=command.name.value)
    try:
        return _run_command(
            command,
            parsed,
            settings,
            transport,
            stdout if stdout is not None else sys.stdout.buffer,
            err,
        )
    finally:
        clear_context()


def run() -> None:
    """Console script entry point."""
    status = main()
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        # Reader is gone; point stdout at devnull so the exit flush stays quiet
        os.dup2(os.open(os.devnull, os.O_WRONLY), sys.stdout.fileno())
        status = EXIT_FAILURE
    sys.exit(status)
