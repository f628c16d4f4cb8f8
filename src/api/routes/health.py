"""
Health endpoint - liveness and version of the supervised service
"""

from fastapi import APIRouter, Request

from api.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def get_health(request: Request) -> HealthResponse:
    """Current service status as reported by the owning lifecycle."""
    return request.app.state.status_provider()
