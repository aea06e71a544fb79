"""Subcommand registry and base command class.

Every subcommand is a Command subclass keyed by a CommandName member.
Commands validate their positional arguments in parse_args() before any
network activity, then execute() against the injected TaskClient.

Example of a command:

    class ListCommand(Command):
        def __init__(self):
            super().__init__(
                name=CommandName.LIST,
                description="Print all tasks",
                params=[],
                failure_message="Unable to list tasks",
            )

        def execute(self, ctx: CommandContext) -> None:
            ctx.client.list_tasks(ctx.stdout)
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Sequence

from notes_cli.client import TaskClient
from notes_cli.constants import INT32_MAX, INT32_MIN, PROG_NAME

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


class CommandName(str, Enum):
    """Known subcommands."""

    LIST = "list"
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"

    @classmethod
    def parse(cls, text: str) -> "CommandName | None":
        """Map argv[1] onto a member, None when unknown."""
        try:
            return cls(text)
        except ValueError:
            return None


class UsageError(Exception):
    """Bad command line, detected before any request is sent.

    Attributes:
        show_help: Whether the usage text should follow the message
    """

    def __init__(self, message: str, show_help: bool = True) -> None:
        super().__init__(message)
        self.show_help = show_help


def parse_task_number(text: str) -> int:
    """Parse a task number as a 32-bit signed decimal integer.

    Accepts an optional sign followed by ASCII digits, nothing else.

    Raises:
        UsageError: If the text is not a decimal integer or out of range
    """
    if not _DECIMAL_RE.fullmatch(text):
        reason = "invalid syntax"
    else:
        value = int(text)
        if INT32_MIN <= value <= INT32_MAX:
            return value
        reason = "value out of range"
    raise UsageError(
        f'Unable to convert task_num into int32: parsing "{text}": {reason}',
        show_help=False,
    )


@dataclass
class CommandContext:
    """Everything a command needs to run."""

    client: TaskClient
    stdout: BinaryIO


class Command(ABC):
    """Base class for subcommands.

    Subclasses declare their positional parameters; the arity check is
    derived from them. Override parse_args() to convert values and
    execute() to perform the request.
    """

    def __init__(
        self,
        name: CommandName,
        description: str,
        params: list[str] | None = None,
        examples: list[str] | None = None,
        failure_message: str | None = None,
    ) -> None:
        """Initialize the command.

        Args:
            name: Subcommand this class implements
            description: Short description for the help text
            params: Names of the positional parameters, in order
            examples: Example invocations shown in the help text
            failure_message: Prefix for reporting a failed request
        """
        self.name = name
        self.description = description
        self.params = params or []
        self.examples = examples or []
        self.failure_message = failure_message or f"Unable to {name.value} task"

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def usage(self) -> str:
        return " ".join([PROG_NAME, self.name.value, *self.params])

    def parse_args(self, args: Sequence[str]) -> tuple[Any, ...]:
        """Validate positional arguments and convert them.

        Args:
            args: Arguments following the subcommand name

        Returns:
            Converted arguments, passed on to execute()

        Raises:
            UsageError: On a wrong argument count or bad value
        """
        if len(args) != self.arity:
            raise UsageError("Invalid usage")
        return tuple(args)

    @abstractmethod
    def execute(self, ctx: CommandContext, *args: Any) -> None:
        """Perform the request.

        Raises:
            TaskServiceError: If the service call fails
        """


class CommandRegistry:
    """Registry of subcommands, in registration order."""

    def __init__(self) -> None:
        self._commands: dict[CommandName, Command] = {}

    def register(self, command: Command) -> None:
        self._commands[command.name] = command

    def get(self, name: CommandName) -> Command | None:
        return self._commands.get(name)

    def all_commands(self) -> list[Command]:
        return list(self._commands.values())

    def format_help(self) -> str:
        """Build the usage text shown by the CLI."""
        lines = ["TODO CLI application", "Usage:"]
        lines.extend(f"  {cmd.usage}" for cmd in self.all_commands())

        examples = [ex for cmd in self.all_commands() for ex in cmd.examples]
        if examples:
            lines.append("Example:")
            lines.extend(f"  {ex}" for ex in examples)

        return "\n".join(lines) + "\n"
