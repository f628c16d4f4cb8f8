"""
Lifecycle protocols for supervised applications.

An application implements ILifecycle to be driven by the Supervisor, and may
additionally implement IReloader to take part in SIGHUP reloads.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ILifecycle(Protocol):
    """
    Three-phase contract of a supervised application.

    Each method may be a coroutine function or a plain function. Failure is
    signalled by raising.

    Example:
        class Worker:
            async def init(self) -> None:
                self.client = make_client()

            async def start(self) -> None:
                await self.client.consume_forever()

            async def stop(self) -> None:
                await self.client.close()
    """

    def init(self) -> Any:
        """
        Setup (config validation, client construction).

        Completes before start() is invoked. Raising aborts the run.
        """
        ...

    def start(self) -> Any:
        """
        Main work. Runs concurrently with the signal wait loop and is
        never awaited by the supervisor.
        """
        ...

    def stop(self) -> Any:
        """
        Teardown. Called once after a terminating signal, possibly while
        start() is still running.
        """
        ...


@runtime_checkable
class IReloader(Protocol):
    """Optional capability: reload configuration on SIGHUP."""

    def reload(self) -> Any:
        ...


def supports_reload(lifecycle: object) -> bool:
    """Capability query: does this lifecycle expose a callable reload()?"""
    return isinstance(lifecycle, IReloader) and callable(getattr(lifecycle, "reload", None))
