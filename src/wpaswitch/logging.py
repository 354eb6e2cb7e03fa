"""
Logging configuration for wpaswitch.
Switch transitions, restore actions and control-channel failures are logged
under the "wpaswitch" logger hierarchy; modules use logging.getLogger(__name__).
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    console_output: bool = True
) -> logging.Logger:
    """
    Configure the "wpaswitch" logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown
            names fall back to WARNING
        log_file: Optional path of a rotating log file
        console_output: Also log to stderr (stdout carries command output)

    Returns:
        The configured logger
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    handlers: List[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        ))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logger = logging.getLogger("wpaswitch")
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
