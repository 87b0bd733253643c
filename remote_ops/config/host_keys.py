"""SSH host key verification.

Manages the known_hosts file used to verify remote identities.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class HostKeyVerifier:
    """SSH host key verification manager.

    Handles known_hosts configuration for MITM prevention.
    """

    def __init__(
        self,
        known_hosts_path: str | None = None,
        strict_checking: bool = True,
    ):
        """Initialize host key verifier.

        Args:
            known_hosts_path: Path to known_hosts file or 'none' to disable
            strict_checking: Reject unknown host keys

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        self.strict_checking = strict_checking
        self._known_hosts = self._resolve_known_hosts(known_hosts_path)

    def _resolve_known_hosts(self, configured: str | None) -> str | None:
        """Resolve known_hosts path with security defaults.

        Returns:
            Path to known_hosts file or None to disable verification

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        if configured and configured.lower() == "none":
            logger.warning(
                "SSH host key verification DISABLED - vulnerable to MITM attacks. "
                "Only use in trusted networks."
            )
            return None

        if configured:
            path = Path(os.path.expanduser(configured))
            hint = "set REMOTE_OPS_KNOWN_HOSTS to an existing file"
        else:
            path = Path.home() / ".ssh" / "known_hosts"
            hint = "connect once with ssh or run ssh-keyscan <host> >> " + str(path)

        if not path.exists():
            if self.strict_checking:
                raise FileNotFoundError(
                    f"SSH host key verification required but known_hosts "
                    f"file not found: {path}\n"
                    f"To fix this: {hint}, or disable verification "
                    f"(NOT RECOMMENDED) with REMOTE_OPS_KNOWN_HOSTS=none"
                )
            logger.warning(
                "known_hosts not found at %s, verification disabled. "
                "This is insecure!",
                path,
            )
            return None

        return str(path)

    def get_known_hosts_path(self) -> str | None:
        """Get path to known_hosts file.

        Returns:
            Path string or None if verification disabled
        """
        return self._known_hosts

    def is_enabled(self) -> bool:
        """Check if host key verification is enabled."""
        return self._known_hosts is not None
