"""Eager validation of declared values."""

import posixpath
import re
from typing import Final

from remote_ops.errors import ConfigurationError

# Characters that have no business in a host name and could enable injection
SUSPICIOUS_HOST_CHARS: Final[list[str]] = [
    "/", "\\", ";", "&", "|", "$", "`", " ", "\n", "\r", "\x00",
]

# Path traversal patterns to reject
TRAVERSAL_PATTERNS: Final[list[str]] = [
    r"\.\./",  # ../
    r"/\.\.$",  # trailing /..
]


def require_text(value: object, field: str, owner: str) -> str:
    """Check that a required string field is set.

    Args:
        value: The value to check
        field: Field name, for the error message
        owner: Name of the declaring node, for the error message

    Returns:
        The value unchanged

    Raises:
        ConfigurationError: If value is not a non-empty string
    """
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"'{owner}': '{field}' must be a non-empty string")
    return value


def validate_host(host: str, owner: str = "") -> str:
    """Validate a host name.

    Args:
        host: The host name to validate
        owner: Name of the declaring remote, for the error message

    Returns:
        Validated host name

    Raises:
        ConfigurationError: If host name is invalid
    """
    require_text(host, "host", owner)

    if len(host) > 253:
        raise ConfigurationError(f"'{owner}': host name too long: {len(host)} chars")

    for char in SUSPICIOUS_HOST_CHARS:
        if char in host:
            raise ConfigurationError(
                f"'{owner}': host contains invalid characters: {host!r}"
            )

    return host


def validate_port(port: object, owner: str = "") -> int:
    """Validate a TCP port number."""
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError(f"'{owner}': port must be in 1..65535, got {port!r}")
    return port


def validate_timeout(value: object, field: str, owner: str = "") -> int:
    """Validate a timeout in milliseconds."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(
            f"'{owner}': {field} must be a positive number of milliseconds, "
            f"got {value!r}"
        )
    return value


def validate_file_name(file_name: str, owner: str = "") -> str:
    """Validate a bare file name (no directory part)."""
    require_text(file_name, "file_name", owner)
    if "/" in file_name or "\\" in file_name or file_name in (".", ".."):
        raise ConfigurationError(
            f"'{owner}': file_name must be a bare name, got {file_name!r}"
        )
    return file_name


def is_valid_remote_path(path: str) -> bool:
    """Check a remote path is absolute and free of traversal sequences.

    Args:
        path: The remote path to check

    Returns:
        True if the path can be handed to the transport as-is
    """
    if not path or "\x00" in path:
        return False
    if not posixpath.isabs(path):
        return False
    return not any(re.search(pattern, path) for pattern in TRAVERSAL_PATTERNS)
