"""
Profile switch coordinator.

Switching runs a snapshot / select / wait / restore protocol on one interface:

1. resolve the profile to (interface, network id)
2. record which networks on that interface are enabled
3. select_network the target, which disables every sibling
4. poll wpa_state until COMPLETED or the profile's TimeoutWPA elapses
5. re-enable every recorded network; if association failed and the target
   was disabled beforehand, disable it again

Step 5 runs on every exit path (success, timeout, channel error, signal), so
the enabled/disabled state of every other profile is unchanged by a switch.
"""

import logging
import time
from contextlib import nullcontext
from enum import Enum
from typing import FrozenSet, Optional

from wpaswitch.errors import (
    AssociationTimeout,
    ControlChannelError,
    InvalidProfile,
    Interrupted,
)
from wpaswitch.profiles.catalog import ProfileCatalog
from wpaswitch.profiles.definition import (
    DEFAULT_TIMEOUT_WPA,
    ProfileDefinition,
    load_profile,
)
from wpaswitch.supplicant.client import SupplicantClient
from wpaswitch.switching.cancellation import (
    CancellationToken,
    signal_cancellation,
)

logger = logging.getLogger(__name__)


class SwitchState(Enum):
    """Switch state machine states."""
    IDLE = "idle"
    RESOLVED = "resolved"
    SNAPSHOTTED = "snapshotted"
    SWITCHING = "switching"
    WAITING = "waiting"
    RESTORING = "restoring"
    DONE = "done"


class SwitchSession:
    """
    One switch attempt on one interface.

    Owns the enabled-set snapshot for the lifetime of the attempt. restore()
    may be called any number of times and always converges on the same state.
    """

    def __init__(self, client: SupplicantClient, profile: str, network_id: int):
        self.client = client
        self.profile = profile
        self.network_id = network_id
        self.snapshot: FrozenSet[int] = frozenset()
        self.state = SwitchState.RESOLVED

    @property
    def interface(self) -> str:
        return self.client.interface

    def _transition(self, state: SwitchState) -> None:
        logger.debug(
            f"{self.interface}/{self.profile}: {self.state.value} -> {state.value}")
        self.state = state

    def take_snapshot(self) -> FrozenSet[int]:
        """Record the ids of every network currently enabled on the interface."""
        self.snapshot = frozenset(
            network.network_id
            for network in self.client.list_networks()
            if network.status.is_enabled
        )
        self._transition(SwitchState.SNAPSHOTTED)
        logger.debug(f"{self.interface}: enabled before switch {sorted(self.snapshot)}")
        return self.snapshot

    def select(self) -> None:
        self._transition(SwitchState.SWITCHING)
        self.client.select_network(self.network_id)

    def wait_for_association(
            self,
            timeout_seconds: float,
            poll_interval: float,
            token: CancellationToken) -> bool:
        """
        Poll wpa_state until COMPLETED.

        Returns:
            True if associated before the timeout, False otherwise

        Raises:
            Interrupted: If the token is cancelled while waiting
        """
        self._transition(SwitchState.WAITING)
        deadline = time.monotonic() + timeout_seconds
        while True:
            if token.cancelled:
                raise Interrupted(
                    self.profile, self.interface, self.network_id, token.signum)
            if self.client.is_associated():
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(poll_interval)

    def restore(self) -> None:
        """Re-enable the snapshot and roll back a failed, previously disabled target."""
        self._transition(SwitchState.RESTORING)

        for network_id in sorted(self.snapshot):
            try:
                self.client.enable_network(network_id)
            except ControlChannelError as e:
                logger.error(f"Restore could not re-enable network {network_id}: {e}")

        try:
            associated = self.client.is_associated()
        except ControlChannelError as e:
            logger.error(f"Restore could not read state: {e}")
            associated = False

        if not associated and self.network_id not in self.snapshot:
            try:
                self.client.disable_network(self.network_id)
                logger.info(
                    f"Disabled {self.profile} (network {self.network_id}) again "
                    f"on {self.interface}")
            except ControlChannelError as e:
                logger.error(f"Restore could not disable network {self.network_id}: {e}")

        self._transition(SwitchState.DONE)


class SwitchCoordinator:
    """Switches the active profile on an interface with guaranteed restore."""

    def __init__(
            self,
            catalog: ProfileCatalog,
            profile_dir: Optional[str] = None,
            default_timeout: int = DEFAULT_TIMEOUT_WPA,
            poll_interval: float = 0.5,
            handle_signals: bool = True):
        """
        Args:
            catalog: Profile catalog for the managed interfaces
            profile_dir: Directory holding profile definitions (None skips
                the lookup and always uses default_timeout)
            default_timeout: Association timeout when a profile sets none
            poll_interval: Seconds between wpa_state polls
            handle_signals: Route termination signals to the cancellation token
        """
        self.catalog = catalog
        self.profile_dir = profile_dir
        self.default_timeout = default_timeout
        self.poll_interval = poll_interval
        self.handle_signals = handle_signals

    def load_definition(self, profile: str) -> Optional[ProfileDefinition]:
        """The profile's definition, or None if it is missing or unusable."""
        if not self.profile_dir:
            return None
        try:
            return load_profile(profile, self.profile_dir)
        except FileNotFoundError:
            logger.debug(f"No definition for {profile}; using {self.default_timeout}s")
        except InvalidProfile as e:
            logger.warning(f"{e}; using timeout {self.default_timeout}s")
        return None

    def load_timeout(self, profile: str) -> int:
        """TimeoutWPA for a profile, falling back to the default."""
        definition = self.load_definition(profile)
        if definition is None:
            return self.default_timeout
        return definition.timeout_wpa

    def switch_to(
            self,
            profile: str,
            token: Optional[CancellationToken] = None) -> None:
        """
        Make `profile` the active network on its interface.

        Args:
            profile: Profile name (the network's id_str)
            token: Cancellation token; a fresh one is used if omitted

        Raises:
            ProfileNotFound: If the profile does not resolve (nothing is changed)
            AssociationTimeout: If association did not complete in time
            Interrupted: If cancelled while switching
            ControlChannelError: If a supplicant command failed
        """
        token = token or CancellationToken()

        interface, network_id = self.catalog.resolve(profile)
        definition = self.load_definition(profile)
        timeout = definition.timeout_wpa if definition else self.default_timeout
        if definition and definition.interface and definition.interface != interface:
            logger.warning(
                f"{profile} is defined for {definition.interface} but configured "
                f"on {interface}; switching {interface}")
        if definition and definition.exclude_auto:
            logger.warning(f"{profile} has ExcludeAuto set but is loaded in the supplicant")
        session = SwitchSession(self.catalog.client(interface), profile, network_id)
        session.take_snapshot()

        logger.info(
            f"Switching {interface} to {profile} (network {network_id}, "
            f"timeout {timeout}s)")

        with self._cancellation_scope(token):
            try:
                if token.cancelled:
                    raise Interrupted(profile, interface, network_id, token.signum)
                session.select()
                associated = session.wait_for_association(
                    timeout, self.poll_interval, token)
            finally:
                session.restore()

        # a signal that lands during restore still ends the run as interrupted
        if token.cancelled:
            raise Interrupted(profile, interface, network_id, token.signum)
        if not associated:
            logger.warning(f"{profile} did not associate on {interface} within {timeout}s")
            raise AssociationTimeout(profile, interface, network_id, timeout)
        logger.info(f"Switched {interface} to {profile}")

    def _cancellation_scope(self, token: CancellationToken):
        if self.handle_signals:
            return signal_cancellation(token)
        return nullcontext(token)
