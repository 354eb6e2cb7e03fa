"""
Shared test doubles.
FakeSupplicant keeps an in-memory network table with wpa_supplicant's
select/enable/disable semantics so the switch protocol can run without hardware.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from wpaswitch.errors import ControlChannelError
from wpaswitch.profiles.catalog import ProfileCatalog
from wpaswitch.supplicant.client import (
    ALL_NETWORKS,
    STATE_COMPLETED,
    NetworkEntry,
    SupplicantClient,
)

MUTATIONS = {"select_network", "enable_network", "disable_network", "reassociate"}


class FakeSupplicant(SupplicantClient):
    """In-memory supplicant for one interface."""

    def __init__(
            self,
            interface="wlan0",
            networks=None,
            current=None,
            reachable=None,
            polls_to_associate=0,
            failing=()):
        """
        Args:
            networks: {id: (name or None, enabled)}
            current: Id of the network associated at start
            reachable: Ids that can associate after select_network (default all)
            polls_to_associate: state() calls before a reachable target completes
            failing: Command names that raise ControlChannelError
        """
        self.interface = interface
        self.networks = {
            network_id: {"name": name, "enabled": enabled}
            for network_id, (name, enabled) in (networks or {}).items()
        }
        self.current = current
        self.reachable = set(self.networks) if reachable is None else set(reachable)
        self.polls_to_associate = polls_to_associate
        self.failing = set(failing)
        self.pending = None
        self.polls = 0
        self.commands = []
        self.on_poll = None

    def _record(self, command, *args):
        self.commands.append((command,) + args)
        if command in self.failing:
            raise ControlChannelError(self.interface, command, "FAIL")

    def mutations(self):
        return [c for c in self.commands if c[0] in MUTATIONS]

    def enabled_ids(self):
        return {i for i, n in self.networks.items() if n["enabled"]}

    def list_networks(self):
        self._record("list_networks")
        entries = []
        for network_id, network in sorted(self.networks.items()):
            flags = []
            if network_id == self.current:
                flags.append("[CURRENT]")
            if not network["enabled"]:
                flags.append("[DISABLED]")
            entries.append(NetworkEntry(
                network_id, network["name"] or "", "any", flags))
        return entries

    def get_network(self, network_id, variable):
        self._record("get_network", network_id, variable)
        name = self.networks[network_id]["name"]
        if variable != "id_str" or name is None:
            raise ControlChannelError(self.interface, "get_network", "FAIL")
        return f'"{name}"'

    def select_network(self, network_id):
        self._record("select_network", network_id)
        for other_id, network in self.networks.items():
            network["enabled"] = other_id == network_id
        self.current = None
        self.pending = network_id
        self.polls = 0

    def enable_network(self, target):
        self._record("enable_network", target)
        ids = list(self.networks) if target == ALL_NETWORKS else [target]
        for network_id in ids:
            self.networks[network_id]["enabled"] = True

    def disable_network(self, target):
        self._record("disable_network", target)
        ids = list(self.networks) if target == ALL_NETWORKS else [target]
        for network_id in ids:
            self.networks[network_id]["enabled"] = False
            if self.current == network_id:
                self.current = None
            if self.pending == network_id:
                self.pending = None

    def reassociate(self):
        self._record("reassociate")

    def state(self):
        self._record("state")
        if self.on_poll:
            self.on_poll(self)
        if self.pending is not None and self.pending in self.reachable:
            self.polls += 1
            if self.polls > self.polls_to_associate:
                self.current = self.pending
                self.pending = None
        return STATE_COMPLETED if self.current is not None else "SCANNING"


@pytest.fixture
def supplicant():
    """Factory for FakeSupplicant instances."""
    return FakeSupplicant


@pytest.fixture
def make_catalog():
    """Build a ProfileCatalog over fakes, in the given interface order."""
    def build(*supplicants):
        by_interface = {s.interface: s for s in supplicants}
        return ProfileCatalog(list(by_interface), by_interface.__getitem__)
    return build


@pytest.fixture
def home_work():
    """wlan0 with 'home' (id 0) enabled and 'work' (id 1) disabled."""
    return FakeSupplicant("wlan0", {0: ("home", True), 1: ("work", False)})


@pytest.fixture
def frozen_clock():
    """Freeze time; time.sleep advances the frozen clock instead of blocking."""
    with freeze_time("2026-10-19 12:00:00") as frozen:
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            frozen.tick(timedelta(seconds=seconds))

        with patch("wpaswitch.switching.coordinator.time.sleep", side_effect=fake_sleep):
            frozen.sleeps = sleeps
            yield frozen
