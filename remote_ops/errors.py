"""Exception hierarchy for remote operations.

Every error is fatal for the invocation that raised it: nothing here is
retried, and the orchestrator stops at the first one.
"""


class RemoteOpsError(Exception):
    """Base class for all remote_ops errors."""


class ConfigurationError(RemoteOpsError, ValueError):
    """Invalid declaration: missing field, duplicate name, cycle, bad reference."""


class ConnectionError(RemoteOpsError):
    """Failed to establish or keep an SSH connection."""

    message_template = "Cannot connect to {host}: {error}"

    def __init__(self, host_name: str, original_error: Exception | str):
        """Initialize connection error.

        Args:
            host_name: Address or name of the remote
            original_error: Underlying exception or description
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(
            self.message_template.format(host=host_name, error=original_error)
        )


class AuthenticationError(ConnectionError):
    """Credentials were rejected by the remote."""

    message_template = "Authentication failed for {host}: {error}"


class CommandExecutionError(RemoteOpsError):
    """Remote command finished with a non-zero exit status."""

    def __init__(
        self,
        exit_status: int | None,
        exit_message: str = "",
        stderr: str = "",
        command: str = "",
        address: str = "",
    ):
        """Initialize command execution error.

        Args:
            exit_status: Exit status reported by the remote (None if unknown)
            exit_message: Exit signal message, if the remote sent one
            stderr: Captured standard error text
            command: The command string that failed
            address: user@host:port of the remote
        """
        self.exit_status = exit_status
        self.exit_message = exit_message
        self.stderr = stderr
        self.command = command
        self.address = address
        super().__init__(
            f"Command failed with exit status {exit_status}\n"
            f"ExitMessage: {exit_message or None}\n"
            f"Error: {stderr.strip()}"
        )


class TransferError(RemoteOpsError):
    """File upload or download failed."""
