"""
Demo HTTP service implementing the lifecycle contract.

Implements ILifecycle (init / start / stop) and IReloader (reload), so it can
be handed straight to the Supervisor.
"""

from __future__ import annotations

import time
from typing import Optional

from fastapi import FastAPI

from api.main import create_app
from api.schemas.health import HealthResponse
from lifecycle.api_server_wrapper import APIServerWrapper
from managers.config_manager import ConfigManager
from models.config import SupervisorConfig
from utils.logger import configure_logger, get_logger, LogCategory
from version import full_version

log = get_logger().for_category(LogCategory.API)


class APIService:
    """
    FastAPI + uvicorn service driven by the supervisor.

    init() builds the app from config, start() serves until stop() is
    called, reload() re-reads config and re-applies logging settings. A new
    bind address only takes effect after a restart.
    """

    def __init__(self, config_manager: ConfigManager):
        self.config_manager = config_manager
        self.app: Optional[FastAPI] = None
        self.wrapper: Optional[APIServerWrapper] = None
        self.reloads = 0
        self._status = "created"
        self._initialized_at: Optional[float] = None

    @property
    def config(self) -> SupervisorConfig:
        if self.config_manager.config is None:
            return self.config_manager.load()
        return self.config_manager.config

    def status(self) -> HealthResponse:
        uptime = 0.0
        if self._initialized_at is not None:
            uptime = time.monotonic() - self._initialized_at
        return HealthResponse(
            status=self._status,
            version=full_version(),
            uptime_seconds=round(uptime, 3),
            reloads=self.reloads,
        )

    async def init(self) -> None:
        api = self.config.api
        self.app = create_app(status_provider=self.status)
        self.wrapper = APIServerWrapper(self.app, host=api.host, port=api.port)
        self._initialized_at = time.monotonic()
        self._status = "starting"
        log.info("API service initialized", host=api.host, port=api.port)

    async def start(self) -> None:
        self._status = "running"
        await self.wrapper.serve()

    async def stop(self) -> None:
        self._status = "stopping"
        if self.wrapper is not None:
            await self.wrapper.stop()
        self._status = "stopped"

    async def reload(self) -> None:
        previous_api = self.config.api
        config = self.config_manager.reload()
        apply_logging(config)
        if config.api != previous_api:
            log.warn(
                "Bind address changed; restart required to apply",
                current=f"{previous_api.host}:{previous_api.port}",
                configured=f"{config.api.host}:{config.api.port}",
            )
        self.reloads += 1


def apply_logging(config: SupervisorConfig) -> None:
    """Push logging settings from config onto the logger singleton."""
    configure_logger(
        min_level=config.log_level,
        use_colors=config.use_colors,
        log_format=config.log_format,
        fields={"version": full_version()},
    )
