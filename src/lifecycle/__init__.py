"""
Lifecycle subsystem
-------------------

Exports the public API for:
- the lifecycle contract (init / start / stop, optional reload)
- the signal-driven Supervisor
- signal constants and classification

External code should import from:
    from lifecycle import Supervisor, ILifecycle, serve
    from lifecycle.signals import SIGTERM
"""

from .errors import ShutdownError, SupervisorError
from .protocol import ILifecycle, IReloader, supports_reload
from .signals import (
    SIGHUP,
    SIGINT,
    SIGQUIT,
    SIGTERM,
    SIGUSR1,
    SIGUSR2,
    TERMINATING_SIGNALS,
    WATCHED_SIGNALS,
    SignalListener,
    classify,
)
from .supervisor import Supervisor, run, serve

__all__ = [
    "Supervisor",
    "serve",
    "run",
    "ILifecycle",
    "IReloader",
    "supports_reload",
    "SignalListener",
    "classify",
    "SupervisorError",
    "ShutdownError",
    "SIGHUP",
    "SIGINT",
    "SIGQUIT",
    "SIGTERM",
    "SIGUSR1",
    "SIGUSR2",
    "TERMINATING_SIGNALS",
    "WATCHED_SIGNALS",
]
