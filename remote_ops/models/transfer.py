"""File transfer data models."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from remote_ops.models.collection import split_members
from remote_ops.utils.validation import require_text, validate_file_name


class TransferProtocol(Enum):
    """File transfer protocol used over the authenticated connection."""

    SFTP = "sftp"
    SCP = "scp"


@dataclass(frozen=True)
class UploadFile:
    """Upload a local file under its own base name."""

    name: str
    local_file: Path
    remote_path: str

    def __post_init__(self) -> None:
        require_text(self.name, "name", "upload")
        require_text(self.remote_path, "remote_path", self.name)
        if isinstance(self.local_file, str):
            require_text(self.local_file, "local_file", self.name)
        object.__setattr__(self, "local_file", Path(self.local_file))

    @property
    def file_name(self) -> str:
        """Name the file gets on the remote side."""
        return self.local_file.name


@dataclass(frozen=True)
class UploadText:
    """Upload a string as a file named ``file_name``."""

    name: str
    text_content: str
    file_name: str
    remote_path: str

    def __post_init__(self) -> None:
        require_text(self.name, "name", "upload")
        require_text(self.remote_path, "remote_path", self.name)
        validate_file_name(self.file_name, self.name)
        if not isinstance(self.text_content, str):
            raise TypeError(f"'{self.name}': text_content must be a string")

    @property
    def content(self) -> bytes:
        """Bytes sent to the remote."""
        return self.text_content.encode("utf-8")


@dataclass(frozen=True)
class DownloadFile:
    """Download a remote file to a local path, overwriting it."""

    name: str
    remote_path: str
    local_file: Path

    def __post_init__(self) -> None:
        require_text(self.name, "name", "download")
        require_text(self.remote_path, "remote_path", self.name)
        if isinstance(self.local_file, str):
            require_text(self.local_file, "local_file", self.name)
        object.__setattr__(self, "local_file", Path(self.local_file))


@dataclass(frozen=True)
class FileCommandCollection:
    """Named group of uploads and downloads.

    Uploads and downloads can be mixed; they run in member-name order
    regardless of kind.
    """

    name: str
    members: tuple[str, ...] = ()
    inline: tuple["FileCommand", ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        require_text(self.name, "name", "file collection")
        names, inline = split_members(
            self.name,
            self.members,
            (UploadFile, UploadText, DownloadFile, FileCommandCollection),
        )
        object.__setattr__(self, "members", names)
        object.__setattr__(self, "inline", self.inline + inline)


Upload = Union[UploadFile, UploadText]
FileContent = Union[UploadFile, UploadText, DownloadFile]
FileCommand = Union[UploadFile, UploadText, DownloadFile, FileCommandCollection]


def uploads(files: Iterable[FileContent]) -> tuple[Upload, ...]:
    """Keep only uploads, preserving order."""
    return tuple(f for f in files if isinstance(f, (UploadFile, UploadText)))


def downloads(files: Iterable[FileContent]) -> tuple[DownloadFile, ...]:
    """Keep only downloads, preserving order."""
    return tuple(f for f in files if isinstance(f, DownloadFile))
