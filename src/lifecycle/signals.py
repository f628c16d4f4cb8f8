"""
Signal constants, classification and the asyncio signal listener.

Signals are handled in the manner of Nginx and Unicorn: INT, QUIT and TERM
stop the service; HUP is the reload signal; USR1 and USR2 are recognized but
have no handler.
"""

from __future__ import annotations

import asyncio
import signal
from typing import Iterable, List, Optional, Tuple

from models.enums import SignalAction
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SIGNAL)

# Interrupt from the terminal (Ctrl+C).
SIGINT = signal.SIGINT
# Controlling terminal closed; conventionally "reload config, reopen logs".
SIGHUP = signal.SIGHUP
# Quit request; the default action would also dump core.
SIGQUIT = signal.SIGQUIT
# Termination request (kill, service managers). Can be caught, unlike SIGKILL.
SIGTERM = signal.SIGTERM
# User-defined.
SIGUSR1 = signal.SIGUSR1
SIGUSR2 = signal.SIGUSR2

WATCHED_SIGNALS: Tuple[signal.Signals, ...] = (SIGHUP, SIGINT, SIGQUIT, SIGTERM, SIGUSR1, SIGUSR2)
TERMINATING_SIGNALS = frozenset({SIGINT, SIGQUIT, SIGTERM})
NON_TERMINATING_SIGNALS = frozenset({SIGHUP, SIGUSR1, SIGUSR2})


def classify(sig: signal.Signals, reload_on_hup: bool = False) -> SignalAction:
    """
    Decide what the wait loop does with a signal.

    Args:
        sig: Received signal
        reload_on_hup: Route SIGHUP to RELOAD instead of IGNORE

    Raises:
        ValueError: Signal is not one of the watched signals
    """
    if sig in TERMINATING_SIGNALS:
        return SignalAction.SHUTDOWN
    if sig == SIGHUP and reload_on_hup:
        return SignalAction.RELOAD
    if sig in NON_TERMINATING_SIGNALS:
        return SignalAction.IGNORE
    raise ValueError(f"Unsupported signal: {sig!r}")


class SignalListener:
    """
    Queue of OS signals fed by loop.add_signal_handler().

    The queue is unbounded, so a burst of signals (INT immediately followed
    by TERM) is never dropped before the consumer drains it.

    Example:
        listener = SignalListener()
        listener.install()
        try:
            sig = await listener.receive()
        finally:
            listener.close()
    """

    def __init__(self, signals: Iterable[signal.Signals] = WATCHED_SIGNALS):
        self._signals: Tuple[signal.Signals, ...] = tuple(signals)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._installed: List[signal.Signals] = []
        self.received = 0

    @property
    def signals(self) -> Tuple[signal.Signals, ...]:
        return self._signals

    @property
    def is_installed(self) -> bool:
        return bool(self._installed)

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Subscribe to all watched signals on the running loop.

        Raises:
            RuntimeError: Already installed, or not called from the main thread
            NotImplementedError: Platform has no loop signal support
        """
        if self._installed:
            raise RuntimeError("SignalListener already installed")

        self._loop = loop or asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        try:
            for sig in self._signals:
                self._loop.add_signal_handler(sig, self._on_signal, sig)
                self._installed.append(sig)
        except Exception:
            self.close()
            raise

        log.debug("Signal handlers installed", signals=", ".join(s.name for s in self._signals))

    def _on_signal(self, sig: signal.Signals) -> None:
        self.received += 1
        self._queue.put_nowait(sig)

    async def receive(self) -> signal.Signals:
        """Block until the next signal arrives."""
        if self._queue is None:
            raise RuntimeError("SignalListener.install() must be called first")
        return await self._queue.get()

    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def close(self, absorb: bool = False) -> int:
        """
        Remove handlers.

        Args:
            absorb: Leave the signals ignored (SIG_IGN) instead of restoring
                the default dispositions, so later deliveries are discarded

        Returns:
            Number of queued signals that were never received
        """
        for sig in self._installed:
            self._loop.remove_signal_handler(sig)
            if absorb:
                signal.signal(sig, signal.SIG_IGN)
        self._installed.clear()

        discarded = 0
        if self._queue is not None:
            while not self._queue.empty():
                self._queue.get_nowait()
                discarded += 1
        return discarded
