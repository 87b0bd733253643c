"""remote_ops: declarative remotes, commands and file transfers over SSH."""

from remote_ops.errors import (
    AuthenticationError,
    CommandExecutionError,
    ConfigurationError,
    ConnectionError,
    RemoteOpsError,
    TransferError,
)
from remote_ops.flatten import flatten, flatten_all
from remote_ops.registry import Inventory, Registry

__all__ = [
    "AuthenticationError",
    "CommandExecutionError",
    "ConfigurationError",
    "ConnectionError",
    "Inventory",
    "RemoteOpsError",
    "Registry",
    "TransferError",
    "flatten",
    "flatten_all",
]
