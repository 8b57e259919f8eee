"""
Core data types for the Kuwahara toolkit.

All types use @dataclass and Enum for structured, immutable representations.
No loose dicts at the internal API boundary.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional
import threading

import numpy as np


RADIUS_MIN = 3
RADIUS_MAX = 199
DEFAULT_RADIUS = 7


class WindowSelection(Enum):
    """How the RGB selector picks a window across channels."""
    COUPLED = auto()  # one shared best position, last improving channel wins
    INDEPENDENT = auto()  # each channel keeps its own best position


class RenderStatus(Enum):
    """Outcome of rendering a tile or a whole request."""
    COMPLETED = auto()
    ABORTED = auto()


class ValidationSeverity(Enum):
    """Validation issue severity."""
    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Region:
    """Half-open pixel rectangle [left, right) x [top, bottom)."""
    left: int
    top: int
    right: int
    bottom: int

    @classmethod
    def full(cls, width: int, height: int) -> "Region":
        """Region covering a whole image."""
        return cls(0, 0, width, height)

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersects(self, other: "Region") -> bool:
        """True if the two regions share at least one pixel."""
        if self.is_empty() or other.is_empty():
            return False
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def contains(self, other: "Region") -> bool:
        """True if other lies entirely inside this region."""
        return (
            self.left <= other.left
            and self.top <= other.top
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def __str__(self) -> str:
        return f"({self.left}, {self.top})-({self.right}, {self.bottom})"


@dataclass(frozen=True)
class WindowGeometry:
    """Block edge length and the offset separating the four candidate windows."""
    kernel_size: int
    kernel_offset: int


@dataclass(frozen=True)
class FilterParameters:
    """Immutable parameters for one render pass."""
    radius: int = DEFAULT_RADIUS
    use_rgb_channels: bool = True
    window_selection: WindowSelection = WindowSelection.COUPLED


class CancellationToken:
    """Externally settable cancel flag, polled by the engine at row boundaries."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request that all work observing this token stops."""
        self._event.set()

    @property
    def is_cancel_requested(self) -> bool:
        return self._event.is_set()


@dataclass
class TileResult:
    """Result of rendering one region. Pixels are only set when completed."""
    region: Region
    status: RenderStatus
    pixels: Optional[np.ndarray] = None

    @property
    def completed(self) -> bool:
        return self.status == RenderStatus.COMPLETED


@dataclass
class RenderReport:
    """Summary of a multi-tile render."""
    status: RenderStatus
    tiles: List[TileResult] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tiles if t.completed)

    @property
    def aborted_count(self) -> int:
        return sum(1 for t in self.tiles if not t.completed)


@dataclass
class ValidationIssue:
    """A validation problem."""
    severity: ValidationSeverity
    code: str
    message: str
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.code}: {self.message}"
