"""Application configuration.

Delegates to specialized components:
- Settings: Environment variables
- HostKeyVerifier: Manages known_hosts
- InventoryLoader: Reads the YAML inventory
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from remote_ops.config.host_keys import HostKeyVerifier
from remote_ops.config.loader import InventoryLoader
from remote_ops.config.settings import Settings
from remote_ops.errors import ConfigurationError
from remote_ops.registry import Inventory

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration.

    Aggregates environment settings, host key policy and the inventory.
    """

    settings: Settings
    host_keys: HostKeyVerifier
    _inventory: Inventory | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_env(cls, inventory_path: str | None = None) -> "Config":
        """Create config from environment.

        Args:
            inventory_path: Overrides REMOTE_OPS_INVENTORY when given

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        if inventory_path:
            settings.inventory_path = inventory_path

        host_keys = HostKeyVerifier(
            known_hosts_path=settings.known_hosts,
            strict_checking=settings.strict_host_key_checking,
        )
        return cls(settings=settings, host_keys=host_keys)

    def get_inventory(self) -> Inventory:
        """Load the inventory on first call and cache it.

        Raises:
            ConfigurationError: If no inventory path is configured
        """
        if self._inventory is None:
            if not self.settings.inventory_path:
                raise ConfigurationError(
                    "No inventory given: pass --inventory or set REMOTE_OPS_INVENTORY"
                )
            self._inventory = InventoryLoader(Path(self.settings.inventory_path)).load()
        return self._inventory

    @property
    def separator(self) -> str:
        """Line printed between remotes."""
        return self.settings.separator
