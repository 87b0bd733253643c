"""Utilities for remote_ops."""

from remote_ops.utils.console import ColorfulFormatter
from remote_ops.utils.validation import (
    is_valid_remote_path,
    require_text,
    validate_file_name,
    validate_host,
    validate_port,
    validate_timeout,
)

__all__ = [
    "ColorfulFormatter",
    "is_valid_remote_path",
    "require_text",
    "validate_file_name",
    "validate_host",
    "validate_port",
    "validate_timeout",
]
