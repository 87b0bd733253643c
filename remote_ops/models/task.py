"""Invocable task records.

A task selects one remote root and one operation root. Exec tasks run
commands; transfer tasks move files. The two are never mixed.
"""

from dataclasses import dataclass
from typing import Union

from remote_ops.models.transfer import TransferProtocol
from remote_ops.utils.validation import require_text


@dataclass(frozen=True)
class ExecTask:
    """Run a command tree on a remote tree.

    With ``prefix_lines`` every stdout line is written as
    ``user@host:port|> line``, which keeps aggregated output from several
    remotes readable.
    """

    name: str
    remote: str
    command: str
    prefix_lines: bool = False

    def __post_init__(self) -> None:
        require_text(self.name, "name", "task")
        require_text(self.remote, "remote", self.name)
        require_text(self.command, "command", self.name)


@dataclass(frozen=True)
class TransferTask:
    """Run a file command tree on a remote tree."""

    name: str
    remote: str
    files: str
    protocol: TransferProtocol = TransferProtocol.SFTP

    def __post_init__(self) -> None:
        require_text(self.name, "name", "task")
        require_text(self.remote, "remote", self.name)
        require_text(self.files, "files", self.name)
        if not isinstance(self.protocol, TransferProtocol):
            raise TypeError(f"'{self.name}': unsupported protocol {self.protocol!r}")


Task = Union[ExecTask, TransferTask]
