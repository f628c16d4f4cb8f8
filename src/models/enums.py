"""
Enums for the supervisor state machine, signal dispatch and logging
"""

from enum import Enum, auto


class LifecycleState(Enum):
    """
    Supervisor lifecycle states

    CREATED → INITIALIZED → RUNNING → STOPPING → STOPPED

    FAILED is terminal and only reachable from CREATED (init raised).
    """
    CREATED = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    STOPPING = auto()
    STOPPED = auto()
    FAILED = auto()


class SignalAction(Enum):
    """What the wait loop does with a received signal"""
    SHUTDOWN = auto()    # INT, QUIT, TERM
    RELOAD = auto()      # HUP, only when reload_on_hup is enabled
    IGNORE = auto()      # recognized, no handler wired


class LogFormat(Enum):
    """Log output encodings"""
    CONSOLE = auto()     # Colored compact tree output
    JSON = auto()        # One JSON object per line


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SYSTEM = auto()      # Process startup, exit codes
    LIFECYCLE = auto()   # init/start/stop transitions
    SIGNAL = auto()      # OS signal delivery and dispatch
    SHUTDOWN = auto()    # Stop sequence
    TASK = auto()        # Start task tracking
    API = auto()         # Demo HTTP service
