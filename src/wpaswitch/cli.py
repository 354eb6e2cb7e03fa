"""
wpaswitch command line.

    wpaswitch list
    wpaswitch current
    wpaswitch switch-to NAME
    wpaswitch is-active NAME | is-enabled NAME
    wpaswitch enable NAME | disable NAME
    wpaswitch enable-all | disable-all

Exit status is 0 on success or a true answer, 1 on failure, a false answer or
an unknown profile, and 130 when a switch is interrupted.
"""

import argparse
import logging
import sys
from typing import List, Optional

from wpaswitch.config import Settings, load_settings
from wpaswitch.errors import (
    Interrupted,
    ProfileNotFound,
    WpaSwitchError,
)
from wpaswitch.logging import configure_logging
from wpaswitch.profiles.catalog import ProfileCatalog
from wpaswitch.profiles.controller import EnableDisableController, Scope
from wpaswitch.session import managed_interfaces
from wpaswitch.status import StatusQuery
from wpaswitch.supplicant.wpa_cli import WpaCliClient
from wpaswitch.switching.coordinator import SwitchCoordinator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpaswitch",
        description="Switch between wpa_supplicant profiles on managed interfaces")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress to stderr")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List profiles (* active, ! disabled)")
    commands.add_parser("current", help="Print the active profiles")
    for name, help_text in (
            ("switch-to", "Switch to a profile"),
            ("is-active", "Exit 0 if the profile is active"),
            ("is-enabled", "Exit 0 if the profile is enabled"),
            ("enable", "Enable a profile for automatic selection"),
            ("disable", "Disable a profile for automatic selection")):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("profile")
    commands.add_parser("enable-all", help="Enable every profile")
    commands.add_parser("disable-all", help="Disable every profile")
    return parser


def build_catalog(settings: Settings) -> ProfileCatalog:
    interfaces = managed_interfaces(settings.interfaces, settings.service_prefix)
    if not interfaces:
        logger.warning("No interfaces with a running automatic selection session")

    def client_factory(interface: str) -> WpaCliClient:
        return WpaCliClient(
            interface,
            ctrl_dir=settings.ctrl_dir,
            wpa_cli=settings.wpa_cli,
            command_timeout=settings.command_timeout)

    return ProfileCatalog(interfaces, client_factory)


def run(args: argparse.Namespace, settings: Settings,
        catalog: ProfileCatalog) -> int:
    """Dispatch one parsed command; errors propagate to main()."""
    status = StatusQuery(catalog)
    controller = EnableDisableController(catalog)

    if args.command == "list":
        listing = status.format_listing()
        if listing:
            print(listing)
        return EXIT_OK

    if args.command == "current":
        active = status.active_profiles()
        for name in active:
            print(name)
        return EXIT_OK if active else EXIT_FAILURE

    if args.command == "switch-to":
        coordinator = SwitchCoordinator(
            catalog,
            profile_dir=settings.profile_dir,
            default_timeout=settings.default_timeout,
            poll_interval=settings.poll_interval)
        coordinator.switch_to(args.profile)
        return EXIT_OK

    if args.command == "is-active":
        active = status.is_active(args.profile)
        print("active" if active else "inactive")
        return EXIT_OK if active else EXIT_FAILURE

    if args.command == "is-enabled":
        enabled = status.is_enabled(args.profile)
        print("enabled" if enabled else "disabled")
        return EXIT_OK if enabled else EXIT_FAILURE

    if args.command in ("enable", "disable"):
        controller.set_enabled(
            args.command == "enable", Scope.SINGLE, args.profile)
        return EXIT_OK

    if args.command in ("enable-all", "disable-all"):
        ok = controller.set_enabled(args.command == "enable-all", Scope.ALL)
        return EXIT_OK if ok else EXIT_FAILURE

    raise ValueError(f"unhandled command {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """wpaswitch entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(
        log_level="INFO" if args.verbose else settings.log_level,
        log_file=settings.log_file)

    try:
        return run(args, settings, build_catalog(settings))
    except ProfileNotFound as e:
        print(str(e))
        return EXIT_FAILURE
    except Interrupted as e:
        logger.warning(f"{e}; previous state restored")
        return EXIT_INTERRUPTED
    except WpaSwitchError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
