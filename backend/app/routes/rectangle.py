"""
RectSizer Backend: Rectangle Route Handlers
===========================================

What:  GET/POST /api/rectangle and the optional POST /api/rectangle/validate.
How:   FastAPI deserializes the body into RectangleDimensions, the handler
       delegates to RectangleService, and global exception handlers turn
       errors into responses.
Who:   Called by the browser client's resize editor.

Request Flow (POST):
    1. Body parsed and validated by FastAPI (malformed → 400 immediately)
    2. RectangleService waits for the validation delay
    3. width <= height checked (violation → 400 {"error": ...})
    4. RectangleStore commits the value (write failure → 500)
    5. 200 with the committed dimensions
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request

from app.schemas.rectangle import ErrorResponse, RectangleDimensions, ValidationErrorResponse
from app.services.rectangle_service import RectangleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Rectangle"])

# Mounted only when settings.expose_validate_endpoint is enabled
validate_router = APIRouter(prefix="/api", tags=["Rectangle"])


def get_rectangle_service(request: Request) -> RectangleService:
    """Returns the RectangleService the application factory attached to app.state."""
    return request.app.state.rectangle_service


def _timings(request: Request) -> Optional[Dict[str, float]]:
    """Per-request timing dict created by RequestContextMiddleware, if mounted."""
    return getattr(request.state, "timings", None)


@router.get(
    "/rectangle",
    response_model=RectangleDimensions,
    summary="Get the current rectangle",
    description="Returns the most recently committed rectangle dimensions.",
)
async def get_rectangle(
    service: RectangleService = Depends(get_rectangle_service),
) -> RectangleDimensions:
    dimensions = service.current()
    logger.info("Returning rectangle %s", dimensions)
    return dimensions


@router.post(
    "/rectangle",
    response_model=RectangleDimensions,
    responses={
        200: {"description": "Rectangle validated and saved", "model": RectangleDimensions},
        400: {
            "description": "Width exceeds height, or the body is malformed",
            "model": ValidationErrorResponse,
        },
        500: {"description": "Rectangle could not be saved", "model": ErrorResponse},
    },
    summary="Validate and save new rectangle dimensions",
    description=(
        "Waits for the configured validation delay (10 seconds by default), "
        "checks that width does not exceed height, then saves and echoes the "
        "dimensions."
    ),
)
async def update_rectangle(
    dimensions: RectangleDimensions,
    request: Request,
    service: RectangleService = Depends(get_rectangle_service),
) -> RectangleDimensions:
    """
    Validate and commit a new rectangle.

    Error responses (handled by global exception handlers):
        HTTP 400: width > height (DimensionValidationError)
        HTTP 400: malformed body (RequestValidationError)
        HTTP 500: durable record write failed (PersistenceError)
    """
    logger.info(
        "POST /api/rectangle called with width=%s, height=%s",
        dimensions.width,
        dimensions.height,
    )
    return await service.update(dimensions, timings=_timings(request))


@validate_router.post(
    "/rectangle/validate",
    response_model=RectangleDimensions,
    responses={
        200: {"description": "Rectangle is valid", "model": RectangleDimensions},
        400: {"description": "Width exceeds height", "model": ValidationErrorResponse},
    },
    summary="Validate rectangle dimensions without saving",
    description=(
        "Same delay and width <= height check as POST /api/rectangle, "
        "but the stored rectangle is never changed."
    ),
)
async def validate_rectangle(
    dimensions: RectangleDimensions,
    request: Request,
    service: RectangleService = Depends(get_rectangle_service),
) -> RectangleDimensions:
    logger.info(
        "POST /api/rectangle/validate called with width=%s, height=%s",
        dimensions.width,
        dimensions.height,
    )
    return await service.check(dimensions, timings=_timings(request))
