"""
Exception hierarchy for wpaswitch.
Control-channel failures, unknown profiles and switch outcomes are all reported
through these types so the command line can map them to exit codes.
"""

from typing import Optional


class WpaSwitchError(Exception):
    """Base class for all wpaswitch errors."""


class ProfileNotFound(WpaSwitchError):
    """Raised when a profile name does not resolve on any managed interface."""

    def __init__(self, name: str):
        super().__init__(f"unknown profile: {name}")
        self.name = name


class ControlChannelError(WpaSwitchError):
    """Raised when a supplicant control command fails."""

    def __init__(
            self,
            interface: str,
            command: str,
            detail: Optional[str] = None):
        message = f"{interface}: '{command}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.interface = interface
        self.command = command
        self.detail = detail


class SwitchError(WpaSwitchError):
    """Base class for a switch attempt that ended without association."""

    def __init__(self, message: str, interface: str, network_id: int):
        super().__init__(message)
        self.interface = interface
        self.network_id = network_id


class AssociationTimeout(SwitchError):
    """The target network did not reach COMPLETED before the timeout."""

    def __init__(self, profile: str, interface: str,
                 network_id: int, timeout_seconds: float):
        super().__init__(
            f"profile '{profile}' did not associate on {interface} "
            f"within {timeout_seconds:g}s",
            interface,
            network_id)
        self.profile = profile
        self.timeout_seconds = timeout_seconds


class Interrupted(SwitchError):
    """The switch was cancelled by a signal; prior state has been restored."""

    def __init__(self, profile: str, interface: str,
                 network_id: int, signum: Optional[int] = None):
        super().__init__(
            f"switch to '{profile}' on {interface} interrupted",
            interface,
            network_id)
        self.profile = profile
        self.signum = signum


class InvalidProfile(WpaSwitchError):
    """Raised when a profile definition cannot be parsed."""
