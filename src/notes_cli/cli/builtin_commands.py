"""The four task subcommands."""

from typing import Sequence

from notes_cli.cli.commands import (
    Command,
    CommandContext,
    CommandName,
    CommandRegistry,
    parse_task_number,
)


class ListCommand(Command):
    """Print every task, exactly as the service returns them."""

    def __init__(self) -> None:
        super().__init__(
            name=CommandName.LIST,
            description="Print all tasks",
            examples=["notes list"],
            failure_message="Unable to list tasks",
        )

    def execute(self, ctx: CommandContext) -> None:
        ctx.client.list_tasks(ctx.stdout)


class AddCommand(Command):
    """Create a task."""

    def __init__(self) -> None:
        super().__init__(
            name=CommandName.ADD,
            description="Add a task",
            params=["task"],
            examples=["notes add 'Buy milk'"],
        )

    def execute(self, ctx: CommandContext, description: str) -> None:
        ctx.client.add_task(description)


class UpdateCommand(Command):
    """Replace the description of an existing task."""

    def __init__(self) -> None:
        super().__init__(
            name=CommandName.UPDATE,
            description="Change the description of a task",
            params=["task_num", "item"],
        )

    def parse_args(self, args: Sequence[str]) -> tuple[int, str]:
        task_num, description = super().parse_args(args)
        return parse_task_number(task_num), description

    def execute(self, ctx: CommandContext, index: int, description: str) -> None:
        ctx.client.update_task(index, description)


class RemoveCommand(Command):
    """Delete a task."""

    def __init__(self) -> None:
        super().__init__(
            name=CommandName.REMOVE,
            description="Remove a task",
            params=["task_num"],
        )

    def parse_args(self, args: Sequence[str]) -> tuple[int]:
        (task_num,) = super().parse_args(args)
        return (parse_task_number(task_num),)

    def execute(self, ctx: CommandContext, index: int) -> None:
        ctx.client.remove_task(index)


def create_default_registry() -> CommandRegistry:
    """Registry with list, add, update and remove."""
    registry = CommandRegistry()
    for command in (ListCommand(), AddCommand(), UpdateCommand(), RemoveCommand()):
        registry.register(command)
    return registry
