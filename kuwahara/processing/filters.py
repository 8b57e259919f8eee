"""
Filter definitions for the Kuwahara toolkit.

A filter carries its user-facing parameters with defaults, ranges and
descriptions, and converts them to the immutable FilterParameters the
renderer consumes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, List, Dict

from ..core import (
    DEFAULT_RADIUS,
    RADIUS_MAX,
    RADIUS_MIN,
    FilterParameters,
    InvalidParameterError,
    WindowSelection,
)


class ParameterType(Enum):
    """Type of filter parameter."""
    INT = auto()
    CHOICE = auto()
    BOOL = auto()


@dataclass
class FilterParameter:
    """A single parameter for a filter."""
    name: str
    param_type: ParameterType
    value: Any
    min_val: Optional[float] = None
    max_val: Optional[float] = None
    options: Optional[List[str]] = None
    description: str = ""

    def validate(self) -> tuple[bool, str]:
        """Validate parameter value. Returns (is_valid, error_message)."""

        if self.param_type == ParameterType.INT:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                return False, f"{self.name} must be an integer"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {int(self.min_val)}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {int(self.max_val)}"

        elif self.param_type == ParameterType.CHOICE:
            if self.options and self.value not in self.options:
                return False, f"{self.name} must be one of: {', '.join(self.options)}"

        elif self.param_type == ParameterType.BOOL:
            if not isinstance(self.value, bool):
                return False, f"{self.name} must be a boolean"

        return True, ""


@dataclass
class ProcessingFilter:
    """Base class for processing filters."""
    filter_id: str
    name: str
    category: str
    enabled: bool = True
    parameters: Dict[str, FilterParameter] = field(default_factory=dict)

    def validate_parameters(self) -> tuple[bool, List[str]]:
        """Validate all parameters. Returns (is_valid, list_of_errors)."""
        errors = []
        for param in self.parameters.values():
            is_valid, error_msg = param.validate()
            if not is_valid:
                errors.append(error_msg)
        return len(errors) == 0, errors

    def get_parameter(self, name: str) -> Optional[FilterParameter]:
        """Get a parameter by name."""
        return self.parameters.get(name)

    def set_parameter(self, name: str, value: Any) -> bool:
        """Set a parameter value. Returns success."""
        if name not in self.parameters:
            return False
        self.parameters[name].value = value
        is_valid, _ = self.parameters[name].validate()
        return is_valid


# Choice strings for the window_selection parameter
WINDOW_SELECTION_OPTIONS = {
    "coupled": WindowSelection.COUPLED,
    "independent": WindowSelection.INDEPENDENT,
}


class KuwaharaFilter(ProcessingFilter):
    """Kuwahara edge-preserving noise reduction."""

    def __init__(self):
        super().__init__(
            filter_id="kuwahara",
            name="Kuwahara",
            category="Noise",
            parameters={
                "radius": FilterParameter(
                    name="Radius",
                    param_type=ParameterType.INT,
                    value=DEFAULT_RADIUS,
                    min_val=RADIUS_MIN,
                    max_val=RADIUS_MAX,
                    description="Sampling window size; even values use the next smaller odd window"
                ),
                "use_rgb_channels": FilterParameter(
                    name="Use RGB Channels",
                    param_type=ParameterType.BOOL,
                    value=True,
                    description="Filter R, G and B separately instead of HSV intensity"
                ),
                "window_selection": FilterParameter(
                    name="Window Selection",
                    param_type=ParameterType.CHOICE,
                    value="coupled",
                    options=list(WINDOW_SELECTION_OPTIONS),
                    description="RGB mode: one window shared by all channels, or one per channel"
                ),
            }
        )

    def to_parameters(self) -> FilterParameters:
        """
        Build immutable render parameters from the current values.

        Raises:
            InvalidParameterError: any parameter fails validation
        """
        is_valid, errors = self.validate_parameters()
        if not is_valid:
            raise InvalidParameterError(f"Invalid filter parameters: {errors}")

        return FilterParameters(
            radius=self.parameters["radius"].value,
            use_rgb_channels=self.parameters["use_rgb_channels"].value,
            window_selection=WINDOW_SELECTION_OPTIONS[self.parameters["window_selection"].value],
        )
