"""
wpa_cli-based supplicant client.
Shells out to wpa_cli against the per-interface control socket.
"""

import logging
import subprocess
from typing import List, Optional

from wpaswitch.errors import ControlChannelError
from wpaswitch.supplicant.client import (
    NetworkEntry,
    NetworkTarget,
    SupplicantClient,
)

logger = logging.getLogger(__name__)


class WpaCliClient(SupplicantClient):
    """SupplicantClient implementation using wpa_cli."""

    def __init__(
            self,
            interface: str,
            ctrl_dir: Optional[str] = "/run/wpa_supplicant",
            wpa_cli: str = "wpa_cli",
            command_timeout: int = 5):
        """
        Args:
            interface: Wi-Fi interface name
            ctrl_dir: Control socket directory (None uses wpa_cli's default)
            wpa_cli: wpa_cli executable
            command_timeout: Seconds to wait for each command
        """
        self.interface = interface
        self.ctrl_dir = ctrl_dir
        self.wpa_cli = wpa_cli
        self.command_timeout = command_timeout

    def _call(self, *args: str) -> str:
        """Run one wpa_cli command and return its reply."""
        cmd = [self.wpa_cli]
        if self.ctrl_dir:
            cmd += ['-p', self.ctrl_dir]
        cmd += ['-i', self.interface, *args]
        command = ' '.join(args)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                # keep terminal signals away from the child; the switch
                # loop handles them through its cancellation token
                start_new_session=True
            )
        except FileNotFoundError as e:
            raise ControlChannelError(
                self.interface, command, f"{self.wpa_cli} not found") from e
        except subprocess.TimeoutExpired as e:
            raise ControlChannelError(
                self.interface, command,
                f"no reply within {self.command_timeout}s") from e

        reply = result.stdout.strip()
        if result.returncode != 0 or reply.startswith('FAIL'):
            detail = reply or result.stderr.strip() or f"exit {result.returncode}"
            logger.debug(f"wpa_cli {command} on {self.interface}: {detail}")
            raise ControlChannelError(self.interface, command, detail)
        return reply

    def list_networks(self) -> List[NetworkEntry]:
        reply = self._call('list_networks')

        networks = []
        for line in reply.split('\n'):
            # Format: network id / ssid / bssid / flags
            parts = line.split('\t')
            if not parts[0].isdigit():
                continue  # header
            while len(parts) < 4:
                parts.append('')
            flags = parts[3].replace('][', '] [').split()
            networks.append(
                NetworkEntry(int(parts[0]), parts[1], parts[2], flags))
        return networks

    def get_network(self, network_id: int, variable: str) -> str:
        return self._call('get_network', str(network_id), variable)

    def select_network(self, network_id: int) -> None:
        self._call('select_network', str(network_id))

    def enable_network(self, target: NetworkTarget) -> None:
        self._call('enable_network', str(target))

    def disable_network(self, target: NetworkTarget) -> None:
        self._call('disable_network', str(target))

    def reassociate(self) -> None:
        self._call('reassociate')

    def state(self) -> str:
        for line in self._call('status').split('\n'):
            if line.startswith('wpa_state='):
                return line.split('=', 1)[1]
        return 'UNKNOWN'
