"""Exec command data models."""

from dataclasses import dataclass, field
from typing import Union

from remote_ops.errors import ConfigurationError
from remote_ops.models.collection import split_members
from remote_ops.utils.validation import require_text


@dataclass(frozen=True)
class ExecCommand:
    """Ordered shell commands, each run in its own exec session."""

    name: str
    commands: tuple[str, ...]

    def __post_init__(self) -> None:
        require_text(self.name, "name", "command")
        commands = self.commands
        if isinstance(commands, str):
            commands = (commands,)
        commands = tuple(commands)
        if not commands:
            raise ConfigurationError(f"'{self.name}': at least one command is required")
        for command in commands:
            require_text(command, "commands", self.name)
        object.__setattr__(self, "commands", commands)


@dataclass(frozen=True)
class ExecCommandCollection:
    """Named group of exec commands.

    Iteration follows member names, not declaration order. Number the
    names (01_stop, 02_deploy) or split the work into separate tasks when
    one command has to run before another.
    """

    name: str
    members: tuple[str, ...] = ()
    inline: tuple["Command", ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        require_text(self.name, "name", "command collection")
        names, inline = split_members(
            self.name, self.members, (ExecCommand, ExecCommandCollection)
        )
        object.__setattr__(self, "members", names)
        object.__setattr__(self, "inline", self.inline + inline)


@dataclass
class CommandResult:
    """Outcome of one remote command.

    Stdout is streamed to the output sink as it arrives; only its line
    count is kept here.
    """

    error: str
    returncode: int | None
    exit_message: str = ""
    line_count: int = 0


Command = Union[ExecCommand, ExecCommandCollection]
