"""
Profile catalog.
Builds the list of profiles known to the supplicants on the managed interfaces.
Nothing is cached: every call re-reads the live network lists.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence, Tuple

from wpaswitch.errors import ControlChannelError, ProfileNotFound
from wpaswitch.supplicant.client import ProfileStatus, SupplicantClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], SupplicantClient]


@dataclass(frozen=True)
class ProfileRecord:
    interface: str
    network_id: int
    status: ProfileStatus
    name: str


def unquote(value: str) -> str:
    """Strip the double quotes the supplicant puts around string variables."""
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class ProfileCatalog:
    """Read-only view over the networks configured on a set of interfaces."""

    def __init__(self, interfaces: Sequence[str], client_factory: ClientFactory):
        """
        Args:
            interfaces: Interfaces with a running automatic selection session
            client_factory: Returns the SupplicantClient for an interface
        """
        self.interfaces = list(interfaces)
        self.client_factory = client_factory

    def client(self, interface: str) -> SupplicantClient:
        return self.client_factory(interface)

    def list_profiles(self) -> Iterator[ProfileRecord]:
        """
        Yield one record per configured network, interface by interface.

        Raises:
            ControlChannelError: If an interface's network list cannot be read
        """
        for interface in self.interfaces:
            client = self.client(interface)
            for network in client.list_networks():
                yield ProfileRecord(
                    interface=interface,
                    network_id=network.network_id,
                    status=network.status,
                    name=self._profile_name(client, network.network_id),
                )

    def _profile_name(self, client: SupplicantClient, network_id: int) -> str:
        try:
            return unquote(client.get_network(network_id, 'id_str'))
        except ControlChannelError as e:
            # networks without id_str are not profiles; list them unnamed
            logger.debug(f"No id_str for network {network_id}: {e}")
            return ""

    def find(self, name: str) -> ProfileRecord:
        """
        Return the first record named `name`.

        Raises:
            ProfileNotFound: If no interface has a network with that name
        """
        match = None
        if name:
            try:
                for record in self.list_profiles():
                    if record.name != name:
                        continue
                    if match is None:
                        match = record
                    else:
                        logger.warning(
                            f"Profile '{name}' is defined on both {match.interface} "
                            f"and {record.interface}; using {match.interface}")
            except ControlChannelError as e:
                if match is None:
                    raise
                # the first match stands; only the duplicate check is cut short
                logger.warning(f"Could not check remaining interfaces for '{name}': {e}")
        if match is None:
            raise ProfileNotFound(name)
        return match

    def resolve(self, name: str) -> Tuple[str, int]:
        """Resolve a profile name to (interface, network id)."""
        record = self.find(name)
        return record.interface, record.network_id
