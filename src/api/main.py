"""
FastAPI application factory for the demo service.

Health data comes from a provider callable owned by the lifecycle.
"""

from typing import Callable

from fastapi import FastAPI

from api.routes import health
from api.schemas.health import HealthResponse
from utils.logger import get_logger
from models.enums import LogCategory
from version import full_version

log = get_logger().for_category(LogCategory.API)


def create_app(
    status_provider: Callable[[], HealthResponse],
    title: str = "sigvisor demo service",
    docs_enabled: bool = False,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        status_provider: Returns the current HealthResponse for /health
        title: API title (shown in docs)
        docs_enabled: Enable /docs and /openapi.json

    Returns:
        Configured FastAPI application
    """
    version = full_version()
    app = FastAPI(
        title=title,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.status_provider = status_provider
    app.include_router(health.router)

    log.info(f"Created FastAPI app: {title} v{version}")
    return app
