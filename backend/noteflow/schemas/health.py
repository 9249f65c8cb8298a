"""
NoteFlow Backend — Health Check Schema
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    completion_provider: str = Field(
        description="Completion provider status: available, unavailable, unconfigured"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
