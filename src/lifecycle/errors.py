"""Supervisor exceptions. Init failures are re-raised unchanged, not wrapped."""


class SupervisorError(Exception):
    """Supervisor misuse or an illegal lifecycle state transition."""


class ShutdownError(SupervisorError):
    """
    Waiting for or performing shutdown failed.

    Only raised from serve() when strict_shutdown is enabled; the original
    exception is chained as __cause__.
    """
