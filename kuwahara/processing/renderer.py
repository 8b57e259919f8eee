"""
Kuwahara renderer - dispatches tiles to the RGB or intensity passes.

A tile is rendered by accumulating statistics over the tile plus a halo
of kernel_offset pixels, then selecting a window for every output pixel.
Tiles share nothing but the read-only source, so they can be rendered
concurrently by an external scheduler.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..core import (
    CancellationToken,
    FilterParameters,
    Region,
    RenderCancelledError,
    RenderStatus,
    TileResult,
    ValidationEngine,
    WindowGeometry,
    WindowSelection,
    raise_for_issues,
)
from .geometry import resolve_window_geometry
from .selector import select_intensity, select_rgb
from .statistics import StatisticsTables, accumulate_intensity, accumulate_rgb

logger = logging.getLogger(__name__)


class KuwaharaRenderer:
    """Renders Kuwahara-filtered tiles for a fixed set of parameters."""

    def __init__(self, parameters: Optional[FilterParameters] = None):
        self.set_parameters(parameters or FilterParameters())

    @property
    def parameters(self) -> FilterParameters:
        return self._parameters

    @property
    def geometry(self) -> WindowGeometry:
        return self._geometry

    def set_parameters(self, parameters: FilterParameters) -> None:
        """Validate new parameters and re-derive the window geometry."""
        raise_for_issues(ValidationEngine.validate_parameters(parameters))
        self._parameters = parameters
        self._geometry = resolve_window_geometry(parameters.radius)
        logger.debug(
            "Kuwahara parameters: radius=%d rgb=%s selection=%s -> size=%d offset=%d",
            parameters.radius,
            parameters.use_rgb_channels,
            parameters.window_selection.name,
            self._geometry.kernel_size,
            self._geometry.kernel_offset,
        )

    def validate(
        self,
        source: np.ndarray,
        destination: Optional[np.ndarray] = None,
        regions: Optional[Sequence[Region]] = None,
    ) -> None:
        """Raise if the buffers or regions cannot be rendered."""
        issues = ValidationEngine.validate_render(self._parameters, source, destination, regions)
        for issue in issues:
            logger.debug("Validation: %s", issue)
        raise_for_issues(issues)

    def render_region(
        self,
        source: np.ndarray,
        region: Region,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TileResult:
        """
        Render one region without touching any shared buffer.

        The caller is responsible for validating the source and region.

        Args:
            source: uint8 image (H, W, C>=3), read only
            region: Tile to render, inside the image
            cancel_token: Polled once per row in both passes

        Returns:
            TileResult holding the tile pixels, or ABORTED without pixels
        """
        if region.is_empty():
            pixels = source[region.top:region.bottom, region.left:region.right].copy()
            return TileResult(region=region, status=RenderStatus.COMPLETED, pixels=pixels)

        if self._parameters.use_rgb_channels:
            tables = StatisticsTables.allocate(region, self._geometry, channels=3)
            pixels = None
            if accumulate_rgb(source, tables, cancel_token):
                pixels = select_rgb(source, tables, self._parameters.window_selection, cancel_token)
        else:
            tables = StatisticsTables.allocate(region, self._geometry, channels=1)
            pixels = None
            if accumulate_intensity(source, tables, cancel_token):
                pixels = select_intensity(source, tables, cancel_token)

        if pixels is None:
            return TileResult(region=region, status=RenderStatus.ABORTED)
        return TileResult(region=region, status=RenderStatus.COMPLETED, pixels=pixels)

    def render(
        self,
        source: np.ndarray,
        destination: np.ndarray,
        regions: Optional[Sequence[Region]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[TileResult]:
        """
        Render regions sequentially into a destination buffer.

        Stops at the first aborted region; the destination is then only
        partially written and must not be used.

        Raises:
            DimensionMismatchError: destination does not match source
            InvalidImageError: unsupported buffer or bad regions
        """
        if regions is None:
            regions = [Region.full(source.shape[1], source.shape[0])]
        self.validate(source, destination, regions)

        results = []
        for region in regions:
            result = self.render_region(source, region, cancel_token)
            results.append(result)
            if not result.completed:
                logger.info("Render cancelled in region %s", region)
                break
            composite(destination, result)
        return results


def composite(destination: np.ndarray, result: TileResult) -> None:
    """Copy a completed tile into the destination buffer."""
    if not result.completed:
        raise ValueError(f"Cannot composite aborted tile {result.region}")
    region = result.region
    destination[region.top:region.bottom, region.left:region.right] = result.pixels


def kuwahara_filter(
    source: np.ndarray,
    radius: int = 7,
    use_rgb_channels: bool = True,
    window_selection: WindowSelection = WindowSelection.COUPLED,
    cancel_token: Optional[CancellationToken] = None,
) -> np.ndarray:
    """
    Filter a whole image and return a new buffer.

    Raises:
        RenderCancelledError: cancel_token was set before completion
    """
    renderer = KuwaharaRenderer(FilterParameters(
        radius=radius,
        use_rgb_channels=use_rgb_channels,
        window_selection=window_selection,
    ))
    destination = np.empty_like(source)
    results = renderer.render(source, destination, cancel_token=cancel_token)
    if not all(r.completed for r in results):
        raise RenderCancelledError("Kuwahara filter was cancelled")
    return destination
