"""Sequential execution of operations across remotes.

For a remote root and an operation root:

1. Both are flattened first, so configuration errors surface before any
   network traffic. Uploads are checked for local sources and absolute
   remote paths at the same time.
2. Remotes are visited one at a time in name order. Each gets one
   connection, closed on every exit path.
3. Operations run in name order on that connection; exec commands open one
   session per command string.
4. The first failure propagates and nothing else runs: not the remaining
   commands, operations, or remotes.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import asyncssh

from remote_ops.config.settings import DEFAULT_SEPARATOR
from remote_ops.flatten import flatten, flatten_all
from remote_ops.models import (
    ExecCommand,
    ExecTask,
    FileContent,
    RemoteAddress,
    Task,
    TransferProtocol,
    TransferTask,
)
from remote_ops.services.connection import open_connection
from remote_ops.services.executors import run_exec_command, stdout_sink
from remote_ops.services.transfer import (
    check_transfer,
    open_file_transfer,
    transfer_file,
)

if TYPE_CHECKING:
    from remote_ops.config.host_keys import HostKeyVerifier
    from remote_ops.protocols import OutputSink
    from remote_ops.registry import Inventory, Registry

logger = logging.getLogger(__name__)

RemoteAction = Callable[["asyncssh.SSHClientConnection", RemoteAddress], Awaitable[None]]


def _flatten_roots(registry: "Registry[Any]", roots: Any) -> tuple[Any, ...]:
    """Flatten one operation root, or the union of a list of roots."""
    if isinstance(roots, (list, tuple)):
        return flatten_all(registry, roots)
    return flatten(registry, roots)


@dataclass(frozen=True)
class Plan:
    """Resolved remotes and operations of one invocation, in run order."""

    remotes: tuple[RemoteAddress, ...]
    operations: tuple[Any, ...]


class Orchestrator:
    """Runs exec commands or file transfers on flattened remotes."""

    def __init__(
        self,
        inventory: "Inventory",
        host_keys: "HostKeyVerifier",
        sink: "OutputSink | None" = None,
        separator: str = DEFAULT_SEPARATOR,
    ) -> None:
        """Initialize orchestrator.

        Args:
            inventory: Declared remotes, commands, files and tasks
            host_keys: Host key verification policy
            sink: Receives command output lines and separators (stdout if None)
            separator: Line written between remotes
        """
        self.inventory = inventory
        self.host_keys = host_keys
        self.sink = sink or stdout_sink
        self.separator = separator

    def resolve(self, task: Task | str) -> Plan:
        """Flatten a task's roots without connecting anywhere.

        Raises:
            ConfigurationError: On unknown names or cycles
            TransferError: On an upload/download that cannot run
        """
        if isinstance(task, str):
            task = self.inventory.get_task(task)

        remotes = flatten(self.inventory.remotes, task.remote)
        if isinstance(task, ExecTask):
            operations = flatten(self.inventory.commands, task.command)
        elif isinstance(task, TransferTask):
            operations = flatten(self.inventory.files, task.files)
            for file in operations:
                check_transfer(file)
        else:
            raise TypeError(f"Unsupported task type: {type(task).__name__}")
        return Plan(remotes=remotes, operations=operations)

    async def run_task(self, task: Task | str) -> None:
        """Run a registered task by name or value."""
        if isinstance(task, str):
            task = self.inventory.get_task(task)

        logger.info("Running task '%s'", task.name)
        if isinstance(task, ExecTask):
            await self.run_commands(task.remote, task.command, task.prefix_lines)
        elif isinstance(task, TransferTask):
            await self.transfer_files(task.remote, task.files, task.protocol)
        else:
            raise TypeError(f"Unsupported task type: {type(task).__name__}")
        logger.info("Task '%s' completed", task.name)

    async def run_commands(
        self,
        remote: Any,
        command: Any,
        prefix_lines: bool = False,
    ) -> None:
        """Run a command tree on every remote of a remote tree.

        Args:
            remote: Remote root, as node or registered name
            command: Exec command root as node or registered name, or a list
                of roots
            prefix_lines: Prefix output lines with the remote address

        Raises:
            ConfigurationError: Before connecting, on bad references or cycles
            ConnectionError: If a remote cannot be reached
            AuthenticationError: If a remote rejects the credentials
            CommandExecutionError: On the first non-zero exit status
        """
        remotes = flatten(self.inventory.remotes, remote)
        commands: tuple[ExecCommand, ...] = _flatten_roots(self.inventory.commands, command)

        async def execute(conn: "asyncssh.SSHClientConnection", target: RemoteAddress) -> None:
            for leaf in commands:
                await run_exec_command(conn, target, leaf, self.sink, prefix_lines)

        await self._visit(remotes, execute, compression=False)

    async def transfer_files(
        self,
        remote: Any,
        files: Any,
        protocol: TransferProtocol = TransferProtocol.SFTP,
    ) -> None:
        """Run a file command tree on every remote of a remote tree.

        Args:
            remote: Remote root, as node or registered name
            files: File command root as node or registered name, or a list of
                roots
            protocol: SFTP or SCP; SCP connections offer compression

        Raises:
            ConfigurationError: Before connecting, on bad references or cycles
            TransferError: Before connecting for bad sources/paths, or on
                the first failed transfer
            ConnectionError: If a remote cannot be reached
            AuthenticationError: If a remote rejects the credentials
        """
        remotes = flatten(self.inventory.remotes, remote)
        operations: tuple[FileContent, ...] = _flatten_roots(self.inventory.files, files)
        for file in operations:
            check_transfer(file)

        async def execute(conn: "asyncssh.SSHClientConnection", target: RemoteAddress) -> None:
            async with open_file_transfer(conn, protocol) as transfer:
                for file in operations:
                    await transfer_file(transfer, target, file)

        await self._visit(
            remotes, execute, compression=protocol is TransferProtocol.SCP
        )

    async def _visit(
        self,
        remotes: tuple[RemoteAddress, ...],
        action: RemoteAction,
        compression: bool,
    ) -> None:
        """Connect to each remote in turn and run ``action`` on it."""
        if not remotes:
            logger.warning("No remotes to run on")
            return

        for index, remote in enumerate(remotes):
            if index > 0:
                self.sink(self.separator)
            async with open_connection(remote, self.host_keys, compression) as conn:
                await action(conn, remote)
            logger.info("Finished %s (%d/%d)", remote.address, index + 1, len(remotes))
