"""YAML inventory loader.

Reads an inventory file and builds an Inventory. Layout::

    remotes:
      web:  {host: 10.0.0.5, user: deploy, port: 2222}
      db:   {host: db.internal, user: root, password_env: DB_PASSWORD}
      all:  {members: [web, db]}
    commands:
      uptime: {commands: [uptime, "df -h"]}
    files:
      motd:   {upload_text: "hello", file_name: motd, remote_path: /etc}
      build:  {upload_file: dist/app.tar.gz, remote_path: /opt/app}
      logs:   {download: /var/log/app.log, local_file: out/app.log}
    tasks:
      check:  {remote: all, command: uptime, prefix_lines: true}
      ship:   {remote: all, files: build, protocol: scp}

Relative local paths are resolved against the inventory file's directory.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from remote_ops.errors import ConfigurationError
from remote_ops.models import (
    DownloadFile,
    ExecCommand,
    ExecCommandCollection,
    ExecTask,
    FileCommandCollection,
    PasswordAuth,
    PublicKeyAuth,
    RemoteAddress,
    RemoteCollection,
    TransferProtocol,
    TransferTask,
    UploadFile,
    UploadText,
)
from remote_ops.registry import Inventory

logger = logging.getLogger(__name__)

SECTIONS = ("remotes", "commands", "files", "tasks")

REMOTE_KEYS = {
    "host",
    "user",
    "port",
    "password",
    "password_env",
    "connection_timeout_ms",
    "read_timeout_ms",
}


class InventoryLoader:
    """Parser for YAML inventory files."""

    def __init__(self, path: Path | str):
        """Initialize inventory loader.

        Args:
            path: Path to the YAML inventory
        """
        self.path = Path(path).expanduser()
        self.base_dir = self.path.resolve().parent

    def load(self) -> Inventory:
        """Read, build and validate the inventory.

        Returns:
            Validated Inventory

        Raises:
            FileNotFoundError: If the inventory file does not exist
            ConfigurationError: On any invalid declaration
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Inventory file not found: {self.path}")

        logger.debug("Reading inventory from %s", self.path)
        try:
            raw = yaml.safe_load(self.path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.path}: {e}") from e

        inventory = self.build(raw)
        inventory.validate()
        logger.info("Loaded inventory %s", self.path)
        return inventory

    def build(self, raw: Any) -> Inventory:
        """Build an inventory from already parsed data (not validated)."""
        if not isinstance(raw, dict):
            raise ConfigurationError("Inventory must be a mapping")
        unknown = set(raw) - set(SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown inventory sections: {sorted(unknown)}")

        inventory = Inventory()
        for name, entry in self._section(raw, "remotes"):
            inventory.remotes.add(self._guard(name, self._parse_remote, entry))
        for name, entry in self._section(raw, "commands"):
            inventory.commands.add(self._guard(name, self._parse_command, entry))
        for name, entry in self._section(raw, "files"):
            inventory.files.add(self._guard(name, self._parse_file, entry))
        for name, entry in self._section(raw, "tasks"):
            inventory.add_task(self._guard(name, self._parse_task, entry))
        return inventory

    @staticmethod
    def _section(raw: dict[str, Any], key: str) -> list[tuple[str, dict[str, Any]]]:
        """Return (name, entry) pairs of a section, checking their shape."""
        section = raw.get(key) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Section '{key}' must be a mapping")

        entries = []
        for name, entry in section.items():
            if not isinstance(entry, dict):
                raise ConfigurationError(f"'{name}' in '{key}' must be a mapping")
            entries.append((str(name), entry))
        return entries

    @staticmethod
    def _guard(name: str, parse: Any, entry: dict[str, Any]) -> Any:
        """Run a parser, reporting type errors as configuration errors."""
        try:
            return parse(name, entry)
        except TypeError as e:
            raise ConfigurationError(f"'{name}': {e}") from e

    @staticmethod
    def _check_keys(name: str, entry: dict[str, Any], allowed: set[str]) -> None:
        unknown = set(entry) - allowed
        if unknown:
            raise ConfigurationError(f"'{name}': unknown keys {sorted(unknown)}")

    def _parse_remote(
        self, name: str, entry: dict[str, Any]
    ) -> RemoteAddress | RemoteCollection:
        if "members" in entry:
            self._check_keys(name, entry, {"members"})
            return RemoteCollection(name, entry["members"] or ())

        self._check_keys(name, entry, REMOTE_KEYS)
        options = {
            key: entry[key]
            for key in ("port", "connection_timeout_ms", "read_timeout_ms")
            if key in entry
        }
        return RemoteAddress(
            name=name,
            host=entry.get("host", ""),
            user=entry.get("user", ""),
            auth=self._parse_auth(name, entry),
            **options,
        )

    @staticmethod
    def _parse_auth(name: str, entry: dict[str, Any]) -> PasswordAuth | PublicKeyAuth:
        """Password from the entry or from an environment variable."""
        if "password" in entry and "password_env" in entry:
            raise ConfigurationError(f"'{name}': use either password or password_env")

        if "password_env" in entry:
            variable = entry["password_env"]
            secret = os.getenv(variable)
            if not secret:
                raise ConfigurationError(
                    f"'{name}': environment variable {variable} is not set"
                )
            return PasswordAuth(secret)

        if "password" in entry:
            return PasswordAuth(str(entry["password"]))

        return PublicKeyAuth()

    def _parse_command(
        self, name: str, entry: dict[str, Any]
    ) -> ExecCommand | ExecCommandCollection:
        if "members" in entry:
            self._check_keys(name, entry, {"members"})
            return ExecCommandCollection(name, entry["members"] or ())

        self._check_keys(name, entry, {"commands", "command"})
        if "commands" in entry and "command" in entry:
            raise ConfigurationError(f"'{name}': use either command or commands")
        commands = entry.get("commands", entry.get("command")) or ()
        return ExecCommand(name, commands)

    def _parse_file(self, name: str, entry: dict[str, Any]) -> Any:
        if "members" in entry:
            self._check_keys(name, entry, {"members"})
            return FileCommandCollection(name, entry["members"] or ())

        if "upload_file" in entry:
            self._check_keys(name, entry, {"upload_file", "remote_path"})
            return UploadFile(
                name,
                local_file=self._local_path(name, entry["upload_file"]),
                remote_path=entry.get("remote_path", ""),
            )

        if "upload_text" in entry:
            self._check_keys(name, entry, {"upload_text", "file_name", "remote_path"})
            return UploadText(
                name,
                text_content=entry["upload_text"],
                file_name=entry.get("file_name", ""),
                remote_path=entry.get("remote_path", ""),
            )

        if "download" in entry:
            self._check_keys(name, entry, {"download", "local_file"})
            return DownloadFile(
                name,
                remote_path=entry["download"],
                local_file=self._local_path(name, entry.get("local_file", "")),
            )

        raise ConfigurationError(
            f"'{name}': expected one of members, upload_file, upload_text, download"
        )

    def _parse_task(self, name: str, entry: dict[str, Any]) -> ExecTask | TransferTask:
        if "command" in entry and "files" in entry:
            raise ConfigurationError(f"'{name}': a task runs either command or files")

        if "command" in entry:
            self._check_keys(name, entry, {"remote", "command", "prefix_lines"})
            prefix_lines = entry.get("prefix_lines", False)
            if not isinstance(prefix_lines, bool):
                raise ConfigurationError(f"'{name}': prefix_lines must be true or false")
            return ExecTask(
                name,
                remote=entry.get("remote", ""),
                command=entry["command"],
                prefix_lines=prefix_lines,
            )

        if "files" in entry:
            self._check_keys(name, entry, {"remote", "files", "protocol"})
            protocol = str(entry.get("protocol", "sftp")).lower()
            try:
                transfer_protocol = TransferProtocol(protocol)
            except ValueError:
                raise ConfigurationError(
                    f"'{name}': protocol must be sftp or scp, got {protocol!r}"
                ) from None
            return TransferTask(
                name,
                remote=entry.get("remote", ""),
                files=entry["files"],
                protocol=transfer_protocol,
            )

        raise ConfigurationError(f"'{name}': task needs a command or files entry")

    def _local_path(self, name: str, value: Any) -> Path:
        """Resolve a local path relative to the inventory directory."""
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"'{name}': local path must be a non-empty string")
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.base_dir / path
