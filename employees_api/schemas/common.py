"""
Employees API — Shared Response Schemas
========================================

What:  Error envelope and health check payloads shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "name": "NotFoundError",
            "message": "Employee with id 123 not found",
            "status": 404,
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    name: str = Field(description="Error kind")
    message: str = Field(description="Human-readable error description")
    status: int = Field(description="HTTP status code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    backend: str = Field(description="Key of the active employees backend, or \"unresolved\"")
    uptime_seconds: float = Field(description="Seconds since service started")
