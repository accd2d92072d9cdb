"""
RectSizer Backend: Dimension Validator
======================================

What:  The single business rule of the service: width must not exceed height.
How:   Plain function, no I/O. Raises DimensionValidationError on failure.
Who:   Called by RectangleService after the validation delay.

Boundary:
    width == height is valid. Zero and negative values are not rejected here.
"""

from app.exceptions import DimensionValidationError
from app.schemas.rectangle import RectangleDimensions

WIDTH_EXCEEDS_HEIGHT = "Width cannot be greater than height"


def validate_dimensions(candidate: RectangleDimensions) -> None:
    """
    Check candidate dimensions against the width <= height rule.

    Raises:
        DimensionValidationError: if candidate.width > candidate.height
    """
    if candidate.width > candidate.height:
        raise DimensionValidationError(
            reason=WIDTH_EXCEEDS_HEIGHT,
            context={"width": candidate.width, "height": candidate.height},
        )
