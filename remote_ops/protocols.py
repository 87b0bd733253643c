"""Protocol interfaces for dependency inversion.

The orchestrator depends on these shapes rather than on concrete classes,
so tests can hand in plain callables and fake transfer clients.

Usage Example:

    lines: list[str] = []
    orchestrator = Orchestrator(inventory, host_keys, sink=lines.append)
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Receives command output, one line per call (no trailing newline)."""

    def __call__(self, line: str) -> None:
        """Write one line."""
        ...


@runtime_checkable
class FileTransfer(Protocol):
    """File transfer over an authenticated connection (SFTP or SCP).

    Upload sources are local files whose base name is the name the file
    gets when ``remote_path`` is a remote directory.
    """

    async def upload(self, source: Path, remote_path: str) -> None:
        """Copy a local file to the remote.

        Args:
            source: Local file to send
            remote_path: Absolute remote file or directory path
        """
        ...

    async def download(self, remote_path: str, destination: Path) -> None:
        """Copy a remote file to a local path, overwriting it.

        Args:
            remote_path: Absolute remote file path
            destination: Local destination file
        """
        ...
