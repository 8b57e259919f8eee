"""
Core types, errors and validation for the Kuwahara toolkit.
"""

from .types import (
    DEFAULT_RADIUS,
    RADIUS_MAX,
    RADIUS_MIN,
    CancellationToken,
    FilterParameters,
    Region,
    RenderReport,
    RenderStatus,
    TileResult,
    ValidationIssue,
    ValidationSeverity,
    WindowGeometry,
    WindowSelection,
)
from .errors import (
    DimensionMismatchError,
    InvalidImageError,
    InvalidParameterError,
    KuwaharaError,
    RenderCancelledError,
)
from .validation import ValidationEngine, raise_for_issues

__all__ = [
    "DEFAULT_RADIUS",
    "RADIUS_MAX",
    "RADIUS_MIN",
    "CancellationToken",
    "FilterParameters",
    "Region",
    "RenderReport",
    "RenderStatus",
    "TileResult",
    "ValidationIssue",
    "ValidationSeverity",
    "WindowGeometry",
    "WindowSelection",
    # Errors
    "KuwaharaError",
    "InvalidParameterError",
    "DimensionMismatchError",
    "InvalidImageError",
    "RenderCancelledError",
    # Validation
    "ValidationEngine",
    "raise_for_issues",
]
