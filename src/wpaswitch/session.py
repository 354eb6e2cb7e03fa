"""
Discovery of the interfaces with a running automatic selection session.
Each session is a systemd template instance, e.g. wpaswitch-auto@wlan0.service.
"""

import logging
import subprocess
from typing import List

logger = logging.getLogger(__name__)


def _unescape(instance: str) -> str:
    """Undo systemd unit-name escaping (e.g. 'wlp3s0\\x2d1')."""
    if '\\' not in instance:
        return instance
    try:
        result = subprocess.run(
            ['systemd-escape', '--unescape', instance],
            capture_output=True,
            text=True,
            timeout=5
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Could not unescape unit instance {instance!r}: {e}")
        return instance
    if result.returncode != 0:
        logger.warning(f"Could not unescape unit instance {instance!r}")
        return instance
    return result.stdout.strip()


def running_interfaces(service_prefix: str = "wpaswitch-auto@") -> List[str]:
    """
    List interfaces whose automatic selection service is running.

    Args:
        service_prefix: Template unit name up to and including '@'

    Returns:
        Interface names in systemctl order; empty if systemctl fails
    """
    try:
        result = subprocess.run(
            ['systemctl', '--full', '--no-legend', '--no-pager',
             '--type=service', '--state=running', 'list-units'],
            capture_output=True,
            text=True,
            timeout=10
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.error(f"Could not list running services: {e}")
        return []

    if result.returncode != 0:
        logger.error(f"systemctl list-units failed: {result.stderr.strip()}")
        return []

    interfaces = []
    for line in result.stdout.split('\n'):
        for unit in line.split():
            if unit.startswith(service_prefix) and unit.endswith('.service'):
                instance = unit[len(service_prefix):-len('.service')]
                if instance:
                    interfaces.append(_unescape(instance))
                break
    return interfaces


def managed_interfaces(configured: List[str], service_prefix: str) -> List[str]:
    """Explicitly configured interfaces win over service discovery."""
    if configured:
        return list(configured)
    return running_interfaces(service_prefix)
