"""
Cancellation of a running switch.
Signal handlers only flip a token; the switch loop notices the token and the
normal restore path runs, so a signal never interrupts a half-applied change.
"""

import logging
import signal
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (
    signal.SIGINT,
    signal.SIGTERM,
    signal.SIGHUP,
    signal.SIGQUIT,
)


class CancellationToken:
    """Set once by whoever wants the current switch abandoned."""

    def __init__(self):
        self._cancelled = False
        self.signum: Optional[int] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, signum: Optional[int] = None) -> None:
        if not self._cancelled:
            self.signum = signum
        self._cancelled = True


@contextmanager
def signal_cancellation(
        token: CancellationToken,
        signals: Sequence[int] = HANDLED_SIGNALS) -> Iterator[CancellationToken]:
    """
    Route the given signals to token.cancel() for the duration of the block.
    Previous handlers are put back on exit.
    """
    def handler(signum, frame):
        logger.warning(f"Received {signal.Signals(signum).name}; cancelling switch")
        token.cancel(signum)

    previous = {}
    try:
        for signum in signals:
            previous[signum] = signal.signal(signum, handler)
    except ValueError:
        # signal handlers can only be installed from the main thread
        logger.debug("Not in main thread; switch relies on the token alone")

    try:
        yield token
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old if old is not None else signal.SIG_DFL)
