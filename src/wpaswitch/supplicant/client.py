"""
Supplicant control-channel interface.
One client talks to one wpa_supplicant instance (one interface). Test doubles
implement the same interface so the core logic runs without hardware.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Union

# wpa_state value reported once association and key negotiation are done
STATE_COMPLETED = "COMPLETED"

# Literal accepted by enable_network/disable_network to target every network
ALL_NETWORKS = "all"

NetworkTarget = Union[int, str]


class ProfileStatus(Enum):
    """Enablement status of one configured network."""
    ACTIVE = "active"
    ENABLED = "enabled"
    DISABLED = "disabled"

    @property
    def is_enabled(self) -> bool:
        return self is not ProfileStatus.DISABLED


def parse_flags(flags: Iterable[str]) -> ProfileStatus:
    """Map list_networks tag flags (e.g. '[CURRENT]') to a ProfileStatus."""
    tags = {flag.strip("[]").upper() for flag in flags}
    if "CURRENT" in tags:
        return ProfileStatus.ACTIVE
    if "DISABLED" in tags:
        return ProfileStatus.DISABLED
    return ProfileStatus.ENABLED


class NetworkEntry:
    """One row of the supplicant's configured network list."""

    def __init__(
            self,
            network_id: int,
            ssid: str = "",
            bssid: str = "any",
            flags: Iterable[str] = ()):
        self.network_id = network_id
        self.ssid = ssid
        self.bssid = bssid
        self.status = parse_flags(flags)

    def __repr__(self) -> str:
        return (f"NetworkEntry(id={self.network_id}, ssid={self.ssid!r}, "
                f"status={self.status.value})")


class SupplicantClient(ABC):
    """Abstract control channel to a single supplicant instance."""

    interface: str

    @abstractmethod
    def list_networks(self) -> List[NetworkEntry]:
        """
        List every configured network.

        Raises:
            ControlChannelError: If the command fails
        """

    @abstractmethod
    def get_network(self, network_id: int, variable: str) -> str:
        """
        Read a network variable, returned exactly as the supplicant reports
        it (string values stay quoted).

        Raises:
            ControlChannelError: If the command fails or the variable is unset
        """

    @abstractmethod
    def select_network(self, network_id: int) -> None:
        """Enable only network_id and disable all of its siblings."""

    @abstractmethod
    def enable_network(self, target: NetworkTarget) -> None:
        """Mark a network id (or ALL_NETWORKS) eligible for association."""

    @abstractmethod
    def disable_network(self, target: NetworkTarget) -> None:
        """Mark a network id (or ALL_NETWORKS) ineligible for association."""

    @abstractmethod
    def reassociate(self) -> None:
        """Force the supplicant to re-evaluate association now."""

    @abstractmethod
    def state(self) -> str:
        """
        Current wpa_state string; STATE_COMPLETED when associated.

        Raises:
            ControlChannelError: If the command fails
        """

    def is_associated(self) -> bool:
        return self.state() == STATE_COMPLETED
