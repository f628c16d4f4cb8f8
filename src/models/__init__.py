"""
Models package - Enums and config records for the supervisor
"""

from .enums import LifecycleState, SignalAction, LogFormat, LogLevel, LogCategory
from .config import SupervisorConfig, APIConfig

__all__ = [
    'LifecycleState',
    'SignalAction',
    'LogFormat',
    'LogLevel',
    'LogCategory',
    'SupervisorConfig',
    'APIConfig',
]
