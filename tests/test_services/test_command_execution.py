"""Tests for remote command execution."""

import logging

import pytest

from remote_ops.errors import CommandExecutionError
from remote_ops.models import ExecCommand, RemoteAddress
from remote_ops.services.executors import format_line, run_command, run_exec_command


@pytest.fixture
def remote() -> RemoteAddress:
    return RemoteAddress(name="web", host="h1", user="deploy")


def test_format_line_prefix(remote: RemoteAddress) -> None:
    """Prefixed lines carry the remote address."""
    assert format_line(remote, "ok", prefix_lines=True) == "deploy@h1:22|> ok"
    assert format_line(remote, "ok", prefix_lines=False) == "ok"


class TestRunCommand:
    """Tests for a single exec session."""

    @pytest.mark.asyncio
    async def test_streams_stdout_lines(self, fake_ssh, remote: RemoteAddress) -> None:
        """Each stdout line reaches the sink without its newline."""
        fake_ssh.results[("h1", "ls")] = ("a\nb\r\nc", "", 0)
        conn = await fake_ssh.connect("h1")
        lines: list[str] = []

        result = await run_command(conn, remote, "ls", lines.append)

        assert lines == ["a", "b", "c"]
        assert result.returncode == 0
        assert result.line_count == 3
        assert result.error == ""

    @pytest.mark.asyncio
    async def test_prefixed_output(self, fake_ssh, remote: RemoteAddress) -> None:
        """Prefix mode tags every line."""
        fake_ssh.results[("h1", "hostname")] = ("web01\n", "", 0)
        conn = await fake_ssh.connect("h1")
        lines: list[str] = []

        await run_command(conn, remote, "hostname", lines.append, prefix_lines=True)

        assert lines == ["deploy@h1:22|> web01"]

    @pytest.mark.asyncio
    async def test_collects_stderr_and_status(self, fake_ssh, remote: RemoteAddress) -> None:
        """Stderr is captured, not streamed."""
        fake_ssh.results[("h1", "false")] = ("", "nope\n", 3)
        conn = await fake_ssh.connect("h1")
        lines: list[str] = []

        result = await run_command(conn, remote, "false", lines.append)

        assert lines == []
        assert result.returncode == 3
        assert result.error == "nope\n"

    @pytest.mark.asyncio
    async def test_exit_signal_message(self, fake_ssh, remote: RemoteAddress) -> None:
        """A signal-terminated process reports the signal message."""
        conn = await fake_ssh.connect("h1")
        fake_ssh.results[("h1", "sleep 100")] = ("", "", None, ("KILL", True, "", ""))

        result = await run_command(conn, remote, "sleep 100", lambda line: None)

        assert result.returncode is None
        assert result.exit_message == "killed by signal KILL (core dumped)"


class TestRunExecCommand:
    """Tests for ordered multi-command leaves."""

    @pytest.mark.asyncio
    async def test_runs_in_declared_order(self, fake_ssh, remote: RemoteAddress) -> None:
        """Commands run one by one in the order given."""
        conn = await fake_ssh.connect("h1")
        command = ExecCommand("deploy", ["stop", "copy", "start"])

        await run_exec_command(conn, remote, command, lambda line: None)

        assert fake_ssh.executed == [("h1", "stop"), ("h1", "copy"), ("h1", "start")]

    @pytest.mark.asyncio
    async def test_logs_output_line_count(
        self, fake_ssh, remote: RemoteAddress, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Each successful command logs how many lines it printed."""
        fake_ssh.results[("h1", "ls")] = ("a\nb\n", "", 0)
        conn = await fake_ssh.connect("h1")
        caplog.set_level(logging.INFO, logger="remote_ops.services.executors")

        await run_exec_command(conn, remote, ExecCommand("list", "ls"), lambda line: None)

        assert "Command 'ls' on deploy@h1:22 exited 0 (2 output line(s))" in caplog.text

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, fake_ssh, remote: RemoteAddress) -> None:
        """A non-zero status raises and skips the rest."""
        fake_ssh.results[("h1", "copy")] = ("", "disk full\n", 2)
        conn = await fake_ssh.connect("h1")
        command = ExecCommand("deploy", ["stop", "copy", "start"])

        with pytest.raises(CommandExecutionError) as exc:
            await run_exec_command(conn, remote, command, lambda line: None)

        assert ("h1", "start") not in fake_ssh.executed
        assert exc.value.exit_status == 2
        assert exc.value.stderr == "disk full\n"
        assert exc.value.command == "copy"
        assert exc.value.address == "deploy@h1:22"
        assert str(exc.value) == (
            "Command failed with exit status 2\nExitMessage: None\nError: disk full"
        )
