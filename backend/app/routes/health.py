"""
RectSizer Backend: Health Check Route
=====================================

What:  Liveness endpoint for the external process manager.
How:   Reports version, how state is backed (file or memory), and uptime.
"""

import time

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.rectangle import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    store = request.app.state.rectangle_store
    return HealthResponse(
        status="healthy",
        version=__version__,
        persistence="file" if store.is_durable else "memory",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
