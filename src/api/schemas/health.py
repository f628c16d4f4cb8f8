"""
Health schemas - Pydantic models for the service health endpoint
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Snapshot of the supervised service"""
    status: str = Field(description="Service state: created, starting, running, stopping or stopped")
    version: str = Field(description="Full version string, e.g. 1.0.0-alpha")
    uptime_seconds: float = Field(ge=0, description="Seconds since init() completed")
    reloads: int = Field(ge=0, description="Successful SIGHUP reloads")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "running",
                "version": "1.0.0-alpha",
                "uptime_seconds": 12.5,
                "reloads": 0,
            }
        }
