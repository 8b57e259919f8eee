"""
Validation engine for Kuwahara renders.

Structured validation rules that must pass before rendering.
Returns ValidationIssue list; ERROR severity blocks the render.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import (
    DimensionMismatchError,
    InvalidImageError,
    InvalidParameterError,
)
from .types import (
    RADIUS_MAX,
    RADIUS_MIN,
    FilterParameters,
    Region,
    ValidationIssue,
    ValidationSeverity,
    WindowSelection,
)


class ValidationEngine:
    """Validates render requests."""

    @staticmethod
    def validate_render(
        parameters: FilterParameters,
        source: np.ndarray,
        destination: Optional[np.ndarray] = None,
        regions: Optional[Sequence[Region]] = None,
    ) -> List[ValidationIssue]:
        """
        Validate parameters, buffers and regions for one render.

        Returns list of ValidationIssue; rendering is blocked if any ERROR present.
        """
        issues = []

        # 1. Filter parameters
        issues.extend(ValidationEngine.validate_parameters(parameters))

        # 2. Source buffer layout
        image_issues = ValidationEngine._validate_image(source, "source")
        issues.extend(image_issues)
        if image_issues:
            return issues

        # 3. Destination must match the source exactly
        if destination is not None:
            issues.extend(ValidationEngine._validate_destination(source, destination))

        # 4. Regions
        if regions is not None:
            height, width = source.shape[:2]
            issues.extend(ValidationEngine._validate_regions(regions, width, height))

        return issues

    @staticmethod
    def validate_parameters(parameters: FilterParameters) -> List[ValidationIssue]:
        """Validate radius, channel mode and window selection."""
        issues = []

        radius = parameters.radius
        if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_RADIUS_TYPE",
                    message=f"Radius must be an integer, got {type(radius).__name__}.",
                    context={"radius": radius},
                )
            )
        elif not RADIUS_MIN <= radius <= RADIUS_MAX:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="RADIUS_OUT_OF_RANGE",
                    message=f"Radius {radius} is outside [{RADIUS_MIN}, {RADIUS_MAX}].",
                    context={"radius": radius},
                )
            )

        if not isinstance(parameters.use_rgb_channels, (bool, np.bool_)):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_CHANNEL_MODE",
                    message="use_rgb_channels must be a boolean.",
                    context={"use_rgb_channels": parameters.use_rgb_channels},
                )
            )

        if not isinstance(parameters.window_selection, WindowSelection):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_WINDOW_SELECTION",
                    message=f"Unknown window selection: {parameters.window_selection!r}",
                    context={"window_selection": parameters.window_selection},
                )
            )

        return issues

    @staticmethod
    def _validate_image(image: np.ndarray, label: str) -> List[ValidationIssue]:
        """Engine buffers are (H, W, C) uint8 with at least RGB."""
        if (
            not isinstance(image, np.ndarray)
            or image.ndim != 3
            or image.dtype != np.uint8
            or image.shape[2] < 3
        ):
            shape = getattr(image, "shape", None)
            dtype = getattr(image, "dtype", None)
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="UNSUPPORTED_IMAGE",
                    message=f"The {label} must be a uint8 array shaped (H, W, C>=3), got shape={shape} dtype={dtype}.",
                    context={"label": label, "shape": shape, "dtype": str(dtype)},
                )
            ]
        return []

    @staticmethod
    def _validate_destination(source: np.ndarray, destination: np.ndarray) -> List[ValidationIssue]:
        """Destination must have the same shape and dtype as the source."""
        if not isinstance(destination, np.ndarray) or destination.shape != source.shape:
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DIMENSION_MISMATCH",
                    message=f"Destination shape {getattr(destination, 'shape', None)} does not match source shape {source.shape}.",
                    context={"source": source.shape, "destination": getattr(destination, "shape", None)},
                )
            ]
        if destination.dtype != source.dtype:
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DIMENSION_MISMATCH",
                    message=f"Destination dtype {destination.dtype} does not match source dtype {source.dtype}.",
                    context={"source": str(source.dtype), "destination": str(destination.dtype)},
                )
            ]
        if np.may_share_memory(destination, source):
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="IN_PLACE_RENDER",
                    message="Destination must not share memory with the source.",
                    context={},
                )
            ]
        return []

    @staticmethod
    def _validate_regions(
        regions: Sequence[Region], width: int, height: int
    ) -> List[ValidationIssue]:
        """Regions must be in bounds and pairwise disjoint."""
        issues = []

        if not regions:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="NO_REGIONS",
                    message="No regions requested; nothing will be rendered.",
                    context={},
                )
            )
            return issues

        bounds = Region.full(width, height)
        for region in regions:
            if region.is_empty():
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="EMPTY_REGION",
                        message=f"Region {region} is empty and will be skipped.",
                        context={"region": region},
                    )
                )
            elif not bounds.contains(region):
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="REGION_OUT_OF_BOUNDS",
                        message=f"Region {region} exceeds image bounds {width}x{height}.",
                        context={"region": region, "width": width, "height": height},
                    )
                )

        overlaps = _find_overlaps(regions)
        if overlaps:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="OVERLAPPING_REGIONS",
                    message=f"{len(overlaps)} pair(s) of regions overlap: {[(str(a), str(b)) for a, b in overlaps]}",
                    context={"overlaps": overlaps},
                )
            )

        return issues


def raise_for_issues(issues: List[ValidationIssue]) -> None:
    """Raise the exception matching the first ERROR issue, if any."""
    errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
    if not errors:
        return

    message = "; ".join(str(e) for e in errors)
    codes = {e.code for e in errors}
    if codes & {"INVALID_RADIUS_TYPE", "RADIUS_OUT_OF_RANGE", "INVALID_CHANNEL_MODE", "INVALID_WINDOW_SELECTION"}:
        raise InvalidParameterError(message, errors)
    if "DIMENSION_MISMATCH" in codes:
        raise DimensionMismatchError(message, errors)
    raise InvalidImageError(message, errors)


def _find_overlaps(regions: Sequence[Region]) -> List[Tuple[Region, Region]]:
    """Pairs of regions that share pixels."""
    overlaps = []
    for i, a in enumerate(regions):
        for b in regions[i + 1:]:
            if a.intersects(b):
                overlaps.append((a, b))
    return overlaps
