"""
Employees API — Health Check Route
===================================

What:  Liveness/readiness probe for load balancers and container runtimes.
How:   The service is healthy while a backend is resolved and not yet closed.

    healthy    — backend ready (HTTP 200)
    unhealthy  — backend unresolved or already released (HTTP 503)
"""

import time

from fastapi import APIRouter, Request, Response, status

from employees_api import __version__
from employees_api.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    service = getattr(request.app.state, "employees_service", None)
    ready = service is not None and not service.closed
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if ready else "unhealthy",
        version=__version__,
        backend=service.backend_name if service is not None else "unresolved",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
