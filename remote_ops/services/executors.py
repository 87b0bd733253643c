"""Remote command execution over an authenticated connection."""

import asyncio
import logging
from typing import TYPE_CHECKING

import asyncssh

from remote_ops.errors import CommandExecutionError, ConnectionError
from remote_ops.models import CommandResult, ExecCommand, RemoteAddress

if TYPE_CHECKING:
    from remote_ops.protocols import OutputSink

logger = logging.getLogger(__name__)

LINE_PREFIX_SEPARATOR = "|> "


def stdout_sink(line: str) -> None:
    """Default output sink: print to stdout."""
    print(line, flush=True)


def format_line(remote: RemoteAddress, line: str, prefix_lines: bool) -> str:
    """Prefix a line with ``user@host:port|> `` when requested."""
    if prefix_lines:
        return f"{remote.address}{LINE_PREFIX_SEPARATOR}{line}"
    return line


def _exit_message(process: "asyncssh.SSHClientProcess") -> str:
    """Describe how the remote process ended, if it sent a signal."""
    exit_signal = process.exit_signal
    if not exit_signal:
        return ""
    signal, core_dumped, message, _lang = exit_signal
    text = message or f"killed by signal {signal}"
    return f"{text} (core dumped)" if core_dumped else text


async def run_command(
    conn: "asyncssh.SSHClientConnection",
    remote: RemoteAddress,
    command: str,
    sink: "OutputSink",
    prefix_lines: bool = False,
) -> CommandResult:
    """Run one command in its own exec session, streaming stdout.

    Stdout lines go to ``sink`` as they arrive; stderr is collected.

    Returns:
        CommandResult with stderr, exit status and exit message

    Raises:
        ConnectionError: If the session cannot be opened or breaks
    """

    async def pump_stdout(stream: "asyncssh.SSHReader[str]") -> int:
        count = 0
        while True:
            line = await stream.readline()
            if not line:
                return count
            sink(format_line(remote, line.rstrip("\r\n"), prefix_lines))
            count += 1

    logger.debug("Running on %s: %s", remote.address, command)
    try:
        async with conn.create_process(
            command, encoding="utf-8", errors="replace"
        ) as process:
            line_count, stderr = await asyncio.gather(
                pump_stdout(process.stdout),
                process.stderr.read(),
            )
            await process.wait()
            return CommandResult(
                error=stderr or "",
                returncode=process.exit_status,
                exit_message=_exit_message(process),
                line_count=line_count,
            )
    except asyncssh.Error as e:
        raise ConnectionError(remote.address, e) from e


async def run_exec_command(
    conn: "asyncssh.SSHClientConnection",
    remote: RemoteAddress,
    command: ExecCommand,
    sink: "OutputSink",
    prefix_lines: bool = False,
) -> None:
    """Run every command string of a leaf in order, stopping at the first failure.

    Raises:
        CommandExecutionError: If a command exits with a non-zero status
        ConnectionError: If a session cannot be opened or breaks
    """
    for index, command_string in enumerate(command.commands, start=1):
        logger.info(
            "Executing '%s' [%d/%d] on %s",
            command.name,
            index,
            len(command.commands),
            remote.address,
        )
        result = await run_command(conn, remote, command_string, sink, prefix_lines)
        if result.returncode != 0:
            logger.error(
                "Command '%s' failed on %s with exit status %s",
                command_string,
                remote.address,
                result.returncode,
            )
            raise CommandExecutionError(
                exit_status=result.returncode,
                exit_message=result.exit_message,
                stderr=result.error,
                command=command_string,
                address=remote.address,
            )
        logger.info(
            "Command '%s' on %s exited 0 (%d output line(s))",
            command_string,
            remote.address,
            result.line_count,
        )
