"""Data models for remote_ops."""

from remote_ops.models.command import (
    Command,
    CommandResult,
    ExecCommand,
    ExecCommandCollection,
)
from remote_ops.models.remote import (
    DEFAULT_CONNECTION_TIMEOUT_MS,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT_MS,
    AuthMethod,
    PasswordAuth,
    PublicKeyAuth,
    Remote,
    RemoteAddress,
    RemoteCollection,
)
from remote_ops.models.task import ExecTask, Task, TransferTask
from remote_ops.models.transfer import (
    DownloadFile,
    FileCommand,
    FileCommandCollection,
    FileContent,
    TransferProtocol,
    Upload,
    UploadFile,
    UploadText,
    downloads,
    uploads,
)

__all__ = [
    "AuthMethod",
    "Command",
    "CommandResult",
    "DEFAULT_CONNECTION_TIMEOUT_MS",
    "DEFAULT_PORT",
    "DEFAULT_READ_TIMEOUT_MS",
    "DownloadFile",
    "ExecCommand",
    "ExecCommandCollection",
    "ExecTask",
    "FileCommand",
    "FileCommandCollection",
    "FileContent",
    "PasswordAuth",
    "PublicKeyAuth",
    "Remote",
    "RemoteAddress",
    "RemoteCollection",
    "Task",
    "TransferProtocol",
    "TransferTask",
    "Upload",
    "UploadFile",
    "UploadText",
    "downloads",
    "uploads",
]
