"""Services for remote_ops."""

from remote_ops.services.connection import connect_options, open_connection
from remote_ops.services.executors import (
    format_line,
    run_command,
    run_exec_command,
    stdout_sink,
)
from remote_ops.services.orchestrator import Orchestrator, Plan
from remote_ops.services.transfer import (
    ScpTransfer,
    SftpTransfer,
    check_transfer,
    open_file_transfer,
    transfer_file,
    upload_source,
)

__all__ = [
    "Orchestrator",
    "Plan",
    "ScpTransfer",
    "SftpTransfer",
    "check_transfer",
    "connect_options",
    "format_line",
    "open_connection",
    "open_file_transfer",
    "run_command",
    "run_exec_command",
    "stdout_sink",
    "transfer_file",
    "upload_source",
]
