from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import uvicorn
from fastapi import FastAPI

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs uvicorn inside the supervisor's event loop.

    Uvicorn normally installs its own SIGINT/SIGTERM handlers, which would
    replace the supervisor's and bypass stop(). The wrapper disables them so
    signals reach the wait loop and shutdown goes through the lifecycle.

    Behaviour:
      - serve() runs the server until stop() is called or the server exits.
      - stop() asks uvicorn to exit, waits up to shutdown_timeout, then
        cancels the serve task. Safe to call when not running.
    """

    def __init__(self, app: FastAPI, host: str = "127.0.0.1", port: int = 8000):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None

    def _create_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )
        server = uvicorn.Server(config)
        # Older uvicorn installs handlers directly, newer ones through capture_signals()
        server.install_signal_handlers = lambda: None  # type: ignore[method-assign]
        server.capture_signals = contextlib.nullcontext  # type: ignore[method-assign]
        return server

    async def serve(self) -> None:
        """
        Serve until stopped.

        Raises:
            RuntimeError: Already serving, or uvicorn failed to start (port
                in use, bad host)
        """
        if self.is_running:
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        log.info(f"Launching API server on http://{self.host}:{self.port}")
        self._serve_task = asyncio.create_task(self._run_server(self._server), name="UvicornServe")
        try:
            await self._serve_task
        except asyncio.CancelledError:
            # Only swallow the cancellation stop() issued; propagate external ones
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        log.debug("API server serve() returned")

    async def _run_server(self, server: uvicorn.Server) -> None:
        # uvicorn reports startup failures with sys.exit()
        try:
            await server.serve()
        except SystemExit as e:
            raise RuntimeError(f"API server failed to start on {self.host}:{self.port}") from e

    async def stop(self, shutdown_timeout: float = 2.0) -> None:
        """Stop the server and release the port."""
        if not self.is_running:
            log.debug("API server stop() called but server was not running")
            self._server = None
            self._serve_task = None
            return

        log.info("Stopping API server...")
        self._server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
        except asyncio.TimeoutError:
            log.warn("API server did not exit in time; forcing", timeout=shutdown_timeout)
            self._server.force_exit = True
            self._serve_task.cancel()
            try:
                await self._serve_task
            except asyncio.CancelledError:
                log.debug("Uvicorn serve task cancelled")

        self._server = None
        self._serve_task = None
        log.info("API server stopped")

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def started(self) -> bool:
        """True once uvicorn has bound its sockets."""
        return bool(self._server is not None and getattr(self._server, "started", False))

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
