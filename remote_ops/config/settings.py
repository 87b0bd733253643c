"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "-" * 20


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Inventory
    inventory_path: str | None = field(default=None)

    # Host keys
    known_hosts: str | None = field(default=None)
    strict_host_key_checking: bool = field(default=True)

    # Output
    separator: str = field(default=DEFAULT_SEPARATOR)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from REMOTE_OPS_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            inventory_path=os.getenv("REMOTE_OPS_INVENTORY") or None,
            known_hosts=os.getenv("REMOTE_OPS_KNOWN_HOSTS") or None,
            strict_host_key_checking=cls._get_bool(
                "REMOTE_OPS_STRICT_HOST_KEY_CHECKING", True
            ),
            separator=os.getenv("REMOTE_OPS_SEPARATOR", DEFAULT_SEPARATOR),
            log_level=cls._get_log_level(),
            log_colors=cls._get_bool("REMOTE_OPS_LOG_COLORS", True),
        )

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        value = value.strip().lower()
        if value in ("1", "true", "yes", "on"):
            return True
        if value in ("0", "false", "no", "off"):
            return False
        logger.warning("Invalid bool for %s: %s, using default %s", key, value, default)
        return default

    @staticmethod
    def _get_log_level() -> str:
        """Get log level from environment with validation.

        Returns:
            Upper-case level name, INFO when unset or unknown
        """
        level = os.getenv("REMOTE_OPS_LOG_LEVEL", "INFO").upper()
        if level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return level
        logger.warning("Invalid log level %s, using INFO", level)
        return "INFO"
