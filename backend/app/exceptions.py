"""
RectSizer Backend: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right HTTP status.
Who:   Raised by the store, validator and service; caught by global handlers.

Exception Hierarchy:
    RectSizerError (base)
    ├── MalformedRequestError     → 400 Bad Request (body is not two numbers)
    ├── DimensionValidationError  → 400 Bad Request (width exceeds height)
    └── PersistenceError          → 500 Internal Server Error (record write failed)

Services raise; routes never catch. The process keeps serving the last
committed value after any of these.
"""

from typing import Any, Dict, Optional


class RectSizerError(Exception):
    """
    Base exception for all RectSizer application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MalformedRequestError(RectSizerError):
    """
    Raised when a request body cannot be read as rectangle dimensions.

    When:    Body missing, not JSON, a field missing, or a field not a number.
    HTTP:    400 Bad Request, with a body shape distinct from
             DimensionValidationError so clients can tell them apart.

    Example response:
        {
            "error": "malformed_request",
            "message": "Request body must contain numeric 'width' and 'height'",
            "details": [{"loc": ["body", "width"], "msg": "..."}],
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Request body must contain numeric 'width' and 'height'",
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors or []


class DimensionValidationError(RectSizerError):
    """
    Raised when candidate dimensions break the width <= height rule.

    HTTP:    400 Bad Request
    Body:    {"error": "<reason>"}

    Attributes:
        reason: Human-readable description of the broken rule.
    """

    def __init__(
        self,
        reason: str = "Width cannot be greater than height",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=reason, context=context)
        self.reason = reason


class PersistenceError(RectSizerError):
    """
    Raised when the durable record cannot be written.

    When:    Disk full, permission denied, directory removed, I/O error.
    HTTP:    500 Internal Server Error

    The in-memory value is left unchanged, so GET keeps returning the
    last committed dimensions. File paths and OS errors go to the log only.
    """

    def __init__(
        self,
        message: str = "Failed to save rectangle dimensions. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
