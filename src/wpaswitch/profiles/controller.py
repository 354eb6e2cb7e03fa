"""
Bulk and single-profile enable/disable.
Commands are fire-and-forget: nothing waits for the resulting association.
"""

import logging
from enum import Enum
from typing import Optional

from wpaswitch.errors import ControlChannelError
from wpaswitch.profiles.catalog import ProfileCatalog
from wpaswitch.supplicant.client import ALL_NETWORKS, NetworkTarget

logger = logging.getLogger(__name__)


class Scope(Enum):
    SINGLE = "single"
    ALL = "all"


class EnableDisableController:
    """Applies enable/disable actions through the profile catalog."""

    def __init__(self, catalog: ProfileCatalog):
        self.catalog = catalog

    def set_enabled(
            self,
            enabled: bool,
            scope: Scope = Scope.SINGLE,
            profile: Optional[str] = None) -> bool:
        """
        Enable or disable one profile or every network on every interface.

        Args:
            enabled: True to enable, False to disable
            scope: Scope.SINGLE (requires profile) or Scope.ALL
            profile: Profile name for Scope.SINGLE

        Returns:
            True if every interface accepted the command. With Scope.ALL a
            failing interface does not stop the remaining ones.

        Raises:
            ProfileNotFound: If profile does not resolve
            ControlChannelError: If the single-profile command fails
            ValueError: If Scope.SINGLE is used without a profile
        """
        if scope is Scope.SINGLE:
            if not profile:
                raise ValueError("a profile name is required for a single enable/disable")
            interface, network_id = self.catalog.resolve(profile)
            self._apply(interface, network_id, enabled)
            return True

        ok = True
        for interface in self.catalog.interfaces:
            try:
                self._apply(interface, ALL_NETWORKS, enabled)
            except ControlChannelError as e:
                logger.error(f"Could not update {interface}: {e}")
                ok = False
        return ok

    def _apply(self, interface: str, target: NetworkTarget, enabled: bool) -> None:
        client = self.catalog.client(interface)
        if enabled:
            client.enable_network(target)
            # re-evaluate now instead of waiting for the next background scan
            client.reassociate()
            logger.info(f"Enabled network {target} on {interface}")
        else:
            client.disable_network(target)
            logger.info(f"Disabled network {target} on {interface}")
