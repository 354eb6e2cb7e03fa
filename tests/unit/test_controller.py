"""
Unit tests for enable/disable actions.
"""

import pytest

from wpaswitch.errors import ControlChannelError, ProfileNotFound
from wpaswitch.profiles.controller import EnableDisableController, Scope


class TestSingleScope:

    def test_enable_then_reassociate(self, home_work, make_catalog):
        controller = EnableDisableController(make_catalog(home_work))

        assert controller.set_enabled(True, Scope.SINGLE, "work") is True

        assert home_work.mutations() == [("enable_network", 1), ("reassociate",)]
        assert home_work.enabled_ids() == {0, 1}

    def test_disable_does_not_reassociate(self, home_work, make_catalog):
        controller = EnableDisableController(make_catalog(home_work))

        controller.set_enabled(False, Scope.SINGLE, "home")

        assert home_work.mutations() == [("disable_network", 0)]
        assert home_work.enabled_ids() == set()

    def test_targets_owning_interface(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", True)})
        wlan1 = supplicant("wlan1", {0: ("cafe", False)})
        controller = EnableDisableController(make_catalog(wlan0, wlan1))

        controller.set_enabled(True, Scope.SINGLE, "cafe")

        assert wlan0.mutations() == []
        assert wlan1.mutations() == [("enable_network", 0), ("reassociate",)]

    def test_unknown_profile(self, home_work, make_catalog):
        controller = EnableDisableController(make_catalog(home_work))

        with pytest.raises(ProfileNotFound):
            controller.set_enabled(True, Scope.SINGLE, "nowhere")

        assert home_work.mutations() == []

    def test_requires_profile(self, home_work, make_catalog):
        controller = EnableDisableController(make_catalog(home_work))

        with pytest.raises(ValueError):
            controller.set_enabled(True, Scope.SINGLE)

    def test_channel_failure_propagates(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", False)}, failing={"enable_network"})
        controller = EnableDisableController(make_catalog(wlan0))

        with pytest.raises(ControlChannelError):
            controller.set_enabled(True, Scope.SINGLE, "home")


class TestAllScope:

    def test_enable_all(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", False)})
        wlan1 = supplicant("wlan1", {0: ("cafe", False)})
        controller = EnableDisableController(make_catalog(wlan0, wlan1))

        assert controller.set_enabled(True, Scope.ALL) is True

        for fake in (wlan0, wlan1):
            assert fake.mutations() == [("enable_network", "all"), ("reassociate",)]

    def test_disable_all(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", True), 1: ("work", True)})
        controller = EnableDisableController(make_catalog(wlan0))

        controller.set_enabled(False, Scope.ALL)

        assert wlan0.mutations() == [("disable_network", "all")]
        assert wlan0.enabled_ids() == set()

    def test_failure_on_one_interface_does_not_stop_others(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", False)}, failing={"enable_network"})
        wlan1 = supplicant("wlan1", {0: ("cafe", False)})
        controller = EnableDisableController(make_catalog(wlan0, wlan1))

        assert controller.set_enabled(True, Scope.ALL) is False

        assert wlan0.mutations() == [("enable_network", "all")]
        assert wlan1.mutations() == [("enable_network", "all"), ("reassociate",)]
        assert wlan1.enabled_ids() == {0}

    def test_all_does_not_list_networks(self, supplicant, make_catalog):
        wlan0 = supplicant("wlan0", {0: ("home", True)})
        controller = EnableDisableController(make_catalog(wlan0))

        controller.set_enabled(False, Scope.ALL)

        assert ("list_networks",) not in wlan0.commands
