"""Configuration module for remote_ops.

Provides focused classes for different configuration concerns:
- Config: Main configuration class (aggregates all components)
- InventoryLoader: Parses YAML inventory files
- HostKeyVerifier: Manages SSH host key verification
- Settings: Environment variable configuration
"""

from remote_ops.config.host_keys import HostKeyVerifier
from remote_ops.config.loader import InventoryLoader
from remote_ops.config.main import Config
from remote_ops.config.settings import Settings

__all__ = ["Config", "InventoryLoader", "HostKeyVerifier", "Settings"]
