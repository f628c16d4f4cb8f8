"""
Supervisor that drives an application lifecycle from Unix signals.

serve() runs init, launches start concurrently, then blocks in the signal
wait loop until INT, QUIT or TERM arrives, calls stop once and returns.
"""

from __future__ import annotations

import asyncio
import inspect
import signal
import threading
from typing import Any, Callable, Optional

from lifecycle.errors import ShutdownError, SupervisorError
from lifecycle.protocol import ILifecycle, supports_reload
from lifecycle.signals import SignalListener, classify
from models.config import SupervisorConfig
from models.enums import LifecycleState, SignalAction
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)
signal_log = log.with_category(LogCategory.SIGNAL)
shutdown_log = log.with_category(LogCategory.SHUTDOWN)
task_log = log.with_category(LogCategory.TASK)

_TRANSITIONS = {
    LifecycleState.CREATED: {LifecycleState.INITIALIZED, LifecycleState.FAILED},
    LifecycleState.INITIALIZED: {LifecycleState.RUNNING},
    LifecycleState.RUNNING: {LifecycleState.STOPPING},
    LifecycleState.STOPPING: {LifecycleState.STOPPED},
    LifecycleState.STOPPED: set(),
    LifecycleState.FAILED: set(),
}


async def _invoke(fn: Callable[[], Any]) -> Any:
    """Call a lifecycle method inline, awaiting it if it returned an awaitable."""
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result


def _run_in_daemon_thread(fn: Callable[[], Any], name: str) -> asyncio.Future:
    """
    Run a blocking callable on a daemon thread and expose it as a future.

    A daemon thread (not the loop's default executor) keeps a start() that
    never returns from blocking interpreter shutdown after serve() returns.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _settle(setter: Callable[[Any], None], value: Any) -> None:
        if not future.done():
            setter(value)

    def _runner() -> None:
        try:
            result = fn()
        except Exception as e:
            outcome = (future.set_exception, e)
        except BaseException as e:
            # SystemExit raised inside a task step would escape the event loop
            error = RuntimeError(f"{name} exited with {type(e).__name__}: {e}")
            error.__cause__ = e
            outcome = (future.set_exception, error)
        else:
            outcome = (future.set_result, result)
        try:
            loop.call_soon_threadsafe(_settle, *outcome)
        except RuntimeError:
            pass  # loop already closed, nobody is listening

    threading.Thread(target=_runner, name=name, daemon=True).start()
    return future


class Supervisor:
    """
    Single-shot supervisor for one lifecycle.

    State machine:
        CREATED → INITIALIZED → RUNNING → STOPPING → STOPPED
        CREATED → FAILED (init raised)

    Example:
        supervisor = Supervisor(MyService(), config)
        await supervisor.serve()
        print(supervisor.last_signal)
    """

    def __init__(
        self,
        lifecycle: ILifecycle,
        config: Optional[SupervisorConfig] = None,
        listener: Optional[SignalListener] = None,
    ):
        """
        Args:
            lifecycle: Application lifecycle, owned for the duration of serve()
            config: Supervisor settings (defaults keep the plain contract)
            listener: Signal source; a fresh SignalListener when omitted
        """
        self._lifecycle = lifecycle
        self._config = config or SupervisorConfig()
        self._listener = listener or SignalListener()
        self._state = LifecycleState.CREATED
        self._start_task: Optional[asyncio.Task] = None
        self._start_settled = False
        self._last_signal: Optional[signal.Signals] = None
        self._stop_error: Optional[BaseException] = None
        self._listening = asyncio.Event()
        self._served = False

    # ----------------------------------------------------------------------
    # PROPERTIES
    # ----------------------------------------------------------------------
    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def lifecycle(self) -> ILifecycle:
        return self._lifecycle

    @property
    def start_task(self) -> Optional[asyncio.Task]:
        """Handle of the concurrently running start() (never joined)."""
        return self._start_task

    @property
    def last_signal(self) -> Optional[signal.Signals]:
        """Terminating signal that ended the wait loop, if any."""
        return self._last_signal

    @property
    def listening(self) -> asyncio.Event:
        """Set while signal handlers are installed."""
        return self._listening

    @property
    def _name(self) -> str:
        return type(self._lifecycle).__name__

    def _transition(self, new_state: LifecycleState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise SupervisorError(f"Illegal lifecycle transition {self._state.name} → {new_state.name}")
        log.debug(f"{self._state.name} → {new_state.name}")
        self._state = new_state

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    async def serve(self) -> None:
        """
        Run the whole lifecycle: init, start (concurrently), wait, stop.

        Raises:
            Exception: Whatever init() raised, unchanged; nothing else runs
            SupervisorError: serve() was already called on this instance
            ShutdownError: Waiting or stop failed and strict_shutdown is set
        """
        if self._served:
            raise SupervisorError("Supervisor.serve() may only be called once; create a new Supervisor per run")
        self._served = True

        log.info("Initializing lifecycle", lifecycle=self._name)
        try:
            await _invoke(self._lifecycle.init)
        except Exception as e:
            self._transition(LifecycleState.FAILED)
            log.error("Lifecycle init failed", error=str(e), error_type=type(e).__name__)
            raise
        self._transition(LifecycleState.INITIALIZED)

        self._start_task = self._launch_start()
        self._transition(LifecycleState.RUNNING)

        try:
            await self.wait()
        except Exception as e:
            log.error(
                "Unable to finish waiting for shutdown",
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._config.strict_shutdown:
                raise ShutdownError("Waiting for shutdown failed") from e
            return

        if self._config.strict_shutdown and self._stop_error is not None:
            raise ShutdownError("Lifecycle stop failed") from self._stop_error

    async def wait(self) -> Optional[signal.Signals]:
        """
        Block until a terminating signal arrives, then stop the lifecycle.

        Once stop has returned, the watched signals are left ignored, so a
        late INT or TERM cannot interrupt the caller's own cleanup.

        Returns:
            The terminating signal, or None when shutdown was triggered by a
            failed start() (shutdown_on_start_failure)
        """
        if self._state is not LifecycleState.RUNNING:
            raise SupervisorError(f"wait() requires a RUNNING lifecycle, state is {self._state.name}")

        self._listener.install()
        self._listening.set()
        try:
            while True:
                sig = await self._next_event()
                if sig is None:
                    await self._stop(reason="start task failed")
                    return None

                signal_log.info("signal caught", signal=sig.name)
                action = classify(sig, reload_on_hup=self._config.reload_on_hup)

                if action is SignalAction.SHUTDOWN:
                    self._last_signal = sig
                    await self._stop(reason=sig.name)
                    return sig
                elif action is SignalAction.RELOAD:
                    await self._reload(sig)
                else:
                    signal_log.debug("Signal recognized but not handled", signal=sig.name)
        finally:
            self._listening.clear()
            # After stop, the watched signals stay ignored for the rest of the process
            discarded = self._listener.close(absorb=self._state is LifecycleState.STOPPED)
            if discarded:
                signal_log.debug("Discarded signals received during shutdown", count=discarded)

    # ----------------------------------------------------------------------
    # INTERNAL
    # ----------------------------------------------------------------------
    def _launch_start(self) -> asyncio.Task:
        task = asyncio.create_task(self._run_start(), name=f"LifecycleStart[{self._name}]")
        task.add_done_callback(self._on_start_done)
        return task

    async def _run_start(self) -> None:
        log.info("Starting lifecycle", lifecycle=self._name)
        start = self._lifecycle.start
        if inspect.iscoroutinefunction(start):
            await start()
        else:
            result = await _run_in_daemon_thread(start, name=f"LifecycleStart[{self._name}]")
            if inspect.isawaitable(result):
                await result

    def _on_start_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            task_log.debug("Start task cancelled")
            return
        exc = task.exception()
        if exc is not None:
            task_log.error("Lifecycle start failed", error=str(exc), error_type=type(exc).__name__)
        else:
            task_log.debug("Start task returned")

    async def _next_event(self) -> Optional[signal.Signals]:
        """
        Next signal, or None if the start task failed and failures are
        configured to trigger shutdown.
        """
        start = self._start_task
        if not self._config.shutdown_on_start_failure or start is None or self._start_settled:
            return await self._listener.receive()

        if start.done():
            self._start_settled = True
            if not start.cancelled() and start.exception() is not None:
                return None
            return await self._listener.receive()

        receiver = asyncio.ensure_future(self._listener.receive())
        try:
            done, _ = await asyncio.wait({receiver, start}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not receiver.done():
                receiver.cancel()

        if receiver in done:
            return receiver.result()
        return await self._next_event()

    async def _stop(self, reason: str) -> None:
        self._transition(LifecycleState.STOPPING)
        shutdown_log.info("Stopping lifecycle", lifecycle=self._name, reason=reason)
        try:
            await _invoke(self._lifecycle.stop)
        except Exception as e:
            self._stop_error = e
            shutdown_log.error("Lifecycle stop failed", error=str(e), error_type=type(e).__name__)
        self._transition(LifecycleState.STOPPED)
        shutdown_log.info("Lifecycle stopped")

    async def _reload(self, sig: signal.Signals) -> None:
        if not supports_reload(self._lifecycle):
            signal_log.warn("Lifecycle does not support reload; ignoring", signal=sig.name)
            return

        log.info("Reloading lifecycle", lifecycle=self._name)
        try:
            await _invoke(self._lifecycle.reload)
        except Exception as e:
            log.error("Lifecycle reload failed", error=str(e), error_type=type(e).__name__)
        else:
            log.info("Lifecycle reloaded")


async def serve(lifecycle: ILifecycle, config: Optional[SupervisorConfig] = None) -> None:
    """Serve a lifecycle with a fresh Supervisor (see Supervisor.serve)."""
    await Supervisor(lifecycle, config).serve()


def run(lifecycle: ILifecycle, config: Optional[SupervisorConfig] = None) -> None:
    """Blocking entry point: serve() on a new event loop."""
    asyncio.run(serve(lifecycle, config))
