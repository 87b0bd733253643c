"""Shared fixtures: an in-memory stand-in for asyncssh connections."""

from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from remote_ops.config.host_keys import HostKeyVerifier
from remote_ops.models import (
    ExecCommand,
    ExecCommandCollection,
    RemoteAddress,
    RemoteCollection,
)
from remote_ops.registry import Inventory


class FakeReader:
    """Mimics asyncssh.SSHReader for text streams."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._lines = text.splitlines(keepends=True)

    async def readline(self) -> str:
        return self._lines.pop(0) if self._lines else ""

    async def read(self) -> str:
        return self._text


class FakeProcess:
    """Mimics asyncssh.SSHClientProcess."""

    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        exit_status: int = 0,
        exit_signal: tuple[str, bool, str, str] | None = None,
    ) -> None:
        self.stdout = FakeReader(stdout)
        self.stderr = FakeReader(stderr)
        self.exit_status = exit_status
        self.exit_signal = exit_signal
        self.closed = False

    async def __aenter__(self) -> "FakeProcess":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed = True

    async def wait(self) -> "FakeProcess":
        return self


class FakeSftp:
    """Mimics the parts of asyncssh.SFTPClient used for transfers."""

    def __init__(self, ssh: "FakeSSH", host: str) -> None:
        self.ssh = ssh
        self.host = host
        self.closed = False

    async def put(self, local: str, remote: str) -> None:
        path = Path(local)
        self.ssh.uploads.append((self.host, remote, path.name, path.read_bytes()))

    async def get(self, remote: str, local: str) -> None:
        self.ssh.downloads.append((self.host, remote))
        Path(local).write_bytes(self.ssh.remote_files[remote])

    def exit(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass


class FakeConnection:
    """Mimics asyncssh.SSHClientConnection."""

    def __init__(self, ssh: "FakeSSH", host: str) -> None:
        self.ssh = ssh
        self.host = host
        self.closed = False
        self.sftp: FakeSftp | None = None

    def create_process(self, command: str, **kwargs: Any) -> FakeProcess:
        self.ssh.executed.append((self.host, command))
        return FakeProcess(*self.ssh.results.get((self.host, command), ()))

    async def start_sftp_client(self) -> FakeSftp:
        self.sftp = FakeSftp(self.ssh, self.host)
        return self.sftp

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass


class FakeSSH:
    """Records everything done through patched asyncssh.connect."""

    def __init__(self) -> None:
        # (host, command) -> (stdout, stderr, exit_status[, exit_signal])
        self.results: dict[tuple[str, str], tuple[Any, ...]] = {}
        self.executed: list[tuple[str, str]] = []
        self.connections: list[FakeConnection] = []
        self.connect_calls: list[tuple[str, dict[str, Any]]] = []
        self.uploads: list[tuple[str, str, str, bytes]] = []
        self.downloads: list[tuple[str, str]] = []
        self.remote_files: dict[str, bytes] = {}

    async def connect(self, host: str, **options: Any) -> FakeConnection:
        self.connect_calls.append((host, options))
        conn = FakeConnection(self, host)
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_ssh() -> Generator[FakeSSH, None, None]:
    """Patch asyncssh.connect with an in-memory fake."""
    fake = FakeSSH()
    with patch("asyncssh.connect", new=fake.connect):
        yield fake


@pytest.fixture
def host_keys() -> HostKeyVerifier:
    """Host key verification disabled."""
    return HostKeyVerifier(known_hosts_path="none")


@pytest.fixture
def inventory() -> Inventory:
    """Two remotes (declared b before a) and a few commands."""
    inv = Inventory()
    inv.remotes.add(RemoteAddress(name="r2", host="h2", user="u"))
    inv.remotes.add(RemoteAddress(name="r1", host="h1", user="u"))
    inv.remotes.add(RemoteCollection("all", ["r2", "r1"]))
    inv.commands.add(ExecCommand("deploy", ["first", "second"]))
    inv.commands.add(ExecCommand("check", "uptime"))
    inv.commands.add(ExecCommandCollection("both", ["deploy", "check"]))
    return inv
