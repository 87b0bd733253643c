"""SFTP and SCP file transfer over an authenticated connection."""

import logging
import tempfile
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import asyncssh

from remote_ops.errors import TransferError
from remote_ops.models import (
    DownloadFile,
    FileContent,
    RemoteAddress,
    TransferProtocol,
    Upload,
    UploadFile,
    UploadText,
)
from remote_ops.utils.validation import is_valid_remote_path

if TYPE_CHECKING:
    from remote_ops.protocols import FileTransfer

logger = logging.getLogger(__name__)


class SftpTransfer:
    """FileTransfer backed by an open SFTP client."""

    def __init__(self, sftp: "asyncssh.SFTPClient") -> None:
        self._sftp = sftp

    async def upload(self, source: Path, remote_path: str) -> None:
        await self._sftp.put(str(source), remote_path)

    async def download(self, remote_path: str, destination: Path) -> None:
        await self._sftp.get(remote_path, str(destination))


class ScpTransfer:
    """FileTransfer backed by asyncssh.scp on an existing connection."""

    def __init__(self, conn: "asyncssh.SSHClientConnection") -> None:
        self._conn = conn

    async def upload(self, source: Path, remote_path: str) -> None:
        await asyncssh.scp(str(source), (self._conn, remote_path))

    async def download(self, remote_path: str, destination: Path) -> None:
        await asyncssh.scp((self._conn, remote_path), str(destination))


@asynccontextmanager
async def open_file_transfer(
    conn: "asyncssh.SSHClientConnection",
    protocol: TransferProtocol,
) -> AsyncIterator["FileTransfer"]:
    """Open a transfer channel of the given protocol on ``conn``.

    The SFTP subsystem channel is closed when the block exits.

    Raises:
        TransferError: If the SFTP subsystem cannot be started
    """
    if protocol is TransferProtocol.SFTP:
        try:
            sftp = await conn.start_sftp_client()
        except asyncssh.Error as e:
            raise TransferError(f"Cannot start SFTP session: {e}") from e
        try:
            yield SftpTransfer(sftp)
        finally:
            sftp.exit()
            await sftp.wait_closed()
    elif protocol is TransferProtocol.SCP:
        yield ScpTransfer(conn)
    else:
        raise TypeError(f"Unsupported transfer protocol: {protocol!r}")


@contextmanager
def upload_source(upload: Upload) -> Iterator[Path]:
    """Provide a local file whose name is the upload's remote file name.

    Text uploads are staged in a temporary directory that is removed
    afterwards.

    Raises:
        TransferError: If a local source file is missing
    """
    if isinstance(upload, UploadFile):
        if not upload.local_file.is_file():
            raise TransferError(
                f"'{upload.name}': local file not found: {upload.local_file}"
            )
        yield upload.local_file
    elif isinstance(upload, UploadText):
        with tempfile.TemporaryDirectory(prefix="remote_ops_") as staging:
            source = Path(staging) / upload.file_name
            source.write_bytes(upload.content)
            yield source
    else:
        raise TypeError(f"Unsupported upload: {upload!r}")


def check_transfer(file: FileContent) -> None:
    """Pre-flight check done before any connection is opened.

    Raises:
        TransferError: On a missing local source or a relative remote path
    """
    if not is_valid_remote_path(file.remote_path):
        raise TransferError(
            f"'{file.name}': remote path must be absolute: {file.remote_path!r}"
        )
    if isinstance(file, UploadFile) and not file.local_file.is_file():
        raise TransferError(f"'{file.name}': local file not found: {file.local_file}")


async def transfer_file(
    transfer: "FileTransfer",
    remote: RemoteAddress,
    file: FileContent,
) -> None:
    """Run one upload or download.

    Raises:
        TransferError: On any transport or local I/O failure
    """
    try:
        if isinstance(file, (UploadFile, UploadText)):
            with upload_source(file) as source:
                logger.info(
                    "Uploading '%s' (%s) to %s:%s",
                    file.name,
                    source.name,
                    remote.address,
                    file.remote_path,
                )
                await transfer.upload(source, file.remote_path)
        elif isinstance(file, DownloadFile):
            logger.info(
                "Downloading '%s' from %s:%s to %s",
                file.name,
                remote.address,
                file.remote_path,
                file.local_file,
            )
            file.local_file.parent.mkdir(parents=True, exist_ok=True)
            await transfer.download(file.remote_path, file.local_file)
        else:
            raise TypeError(f"Unsupported file command: {file!r}")
    except (asyncssh.Error, OSError) as e:
        raise TransferError(f"'{file.name}' failed on {remote.address}: {e}") from e
