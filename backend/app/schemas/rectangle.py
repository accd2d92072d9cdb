"""
RectSizer Backend: Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between browser and backend.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation at /docs.
Who:   Route handlers, RectangleService, and RectangleStore (which reuses the
       same model for the on-disk record).

Wire format:
    {"width": 50.0, "height": 100.0}

    Input keys are matched case-insensitively ("Width", "HEIGHT", ...), as
    the browser client and records written by earlier file-backed
    deployments use different casings. Output is always lowercase.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ══════════════════════════════════════════════════════════════════════════
# Domain Model
# ══════════════════════════════════════════════════════════════════════════


class RectangleDimensions(BaseModel):
    """
    What:  The single rectangle managed by the service.
    Who:   Body of GET/POST /api/rectangle and content of the durable record.

    Fields are strict: JSON numbers only ("50" or true are rejected).
    Integers are widened to float. Values must be finite: NaN, Infinity,
    and numbers outside the float range (10**400, 1e400) are malformed
    input rather than an infinitely large side.
    Frozen so a stored instance can be handed to readers without copying;
    both fields always change together by replacing the whole object.
    """

    model_config = ConfigDict(frozen=True)

    width: float = Field(
        strict=True,
        allow_inf_nan=False,
        description="Rectangle width in client units",
    )
    height: float = Field(
        strict=True,
        allow_inf_nan=False,
        description="Rectangle height in client units",
    )

    @model_validator(mode="before")
    @classmethod
    def lowercase_keys(cls, data: Any) -> Any:
        """
        Fold key casing so {"WIDTH": 1, "Height": 2} binds like {"width": 1, "height": 2}.

        An exact lowercase key wins over any other casing of the same name.
        """
        if not isinstance(data, dict):
            return data
        folded = {}
        for key, value in data.items():
            if not isinstance(key, str):
                folded[key] = value
                continue
            lowered = key.lower()
            if lowered in folded and key != lowered:
                continue
            folded[lowered] = value
        return folded


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ValidationErrorResponse(BaseModel):
    """
    What:  Body returned when candidate dimensions break width <= height.

    Example:
        {"error": "Width cannot be greater than height"}
    """
    error: str = Field(description="Human-readable reason the rectangle was rejected")


class ErrorResponse(BaseModel):
    """
    What:  Standardized body for malformed requests and server errors.

    Fields:
        error: Machine-readable error code ("malformed_request", "persistence_error", ...)
        message: Human-readable description
        details: Field-level problems for malformed bodies
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[List[Any]] = Field(default=None, description="Field-level error details")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response for process managers and load balancers."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    persistence: str = Field(description="State backing: file or memory")
    uptime_seconds: float = Field(description="Seconds since service started")
