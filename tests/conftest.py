import asyncio
import os
import signal
import socket
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utils.logger import configure_logger
from models.enums import LogLevel


class RecordingLifecycle:
    """
    Lifecycle that records call order.

    start() behaves like a server: it blocks until stop() releases it,
    unless start_returns is set.
    """

    def __init__(
        self,
        init_error: Optional[Exception] = None,
        start_error: Optional[Exception] = None,
        stop_error: Optional[Exception] = None,
        start_returns: bool = False,
    ):
        self.calls: List[str] = []
        self.init_error = init_error
        self.start_error = start_error
        self.stop_error = stop_error
        self.start_returns = start_returns
        self.started = asyncio.Event()
        self._release = asyncio.Event()

    async def init(self) -> None:
        self.calls.append("Init")
        if self.init_error is not None:
            raise self.init_error

    async def start(self) -> None:
        self.calls.append("Start")
        self.started.set()
        if self.start_error is not None:
            raise self.start_error
        if self.start_returns:
            return
        await self._release.wait()

    async def stop(self) -> None:
        self.calls.append("Stop")
        self._release.set()
        if self.stop_error is not None:
            raise self.stop_error


class ReloadingLifecycle(RecordingLifecycle):
    def __init__(self, reload_error: Optional[Exception] = None, **kwargs):
        super().__init__(**kwargs)
        self.reload_error = reload_error

    async def reload(self) -> None:
        self.calls.append("Reload")
        if self.reload_error is not None:
            raise self.reload_error


def send(sig: signal.Signals) -> None:
    """Deliver a real signal to this process."""
    os.kill(os.getpid(), sig)


async def start_serving(supervisor) -> asyncio.Task:
    """Run supervisor.serve() as a task and wait until signal handlers are live."""
    task = asyncio.create_task(supervisor.serve())
    await asyncio.wait_for(supervisor.listening.wait(), timeout=2.0)
    return task


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(autouse=True)
def plain_logger():
    configure_logger(LogLevel.DEBUG, use_colors=False)
    yield
    configure_logger(LogLevel.INFO, use_colors=False)


@pytest.fixture(autouse=True)
def default_signal_dispositions():
    """A finished Supervisor leaves its signals ignored; restore defaults between tests."""
    yield
    for sig in (signal.SIGHUP, signal.SIGQUIT, signal.SIGTERM, signal.SIGUSR1, signal.SIGUSR2):
        signal.signal(sig, signal.SIG_DFL)
    signal.signal(signal.SIGINT, signal.default_int_handler)
