"""
Mean/variance accumulation for the Kuwahara filter.

For every anchor position of a tile and its halo, the statistics of the
kernel_size x kernel_size source block anchored there are stored in
per-tile tables. Blocks are clamped to the image, so border blocks hold
fewer samples.

Variance is kept unnormalized (sum of squares minus sum^2 / count). Only
the ordering of the four candidate windows matters to the selector.
"""

from dataclasses import dataclass
import logging
from typing import Optional, Tuple

import numpy as np

from ..core import CancellationToken, Region, WindowGeometry
from .intensity import intensity_of

logger = logging.getLogger(__name__)


@dataclass
class StatisticsTables:
    """
    Per-tile mean and variance tables.

    Arrays are shaped (channels, region.height + kernel_offset,
    region.width + kernel_offset). Cell (ty, tx) holds the block anchored
    at (region.left - kernel_offset + tx, region.top - kernel_offset + ty).
    """
    region: Region
    geometry: WindowGeometry
    mean: np.ndarray
    variance: np.ndarray

    @classmethod
    def allocate(cls, region: Region, geometry: WindowGeometry, channels: int) -> "StatisticsTables":
        """Create zeroed tables for a region plus its halo."""
        shape = (
            channels,
            region.height + geometry.kernel_offset,
            region.width + geometry.kernel_offset,
        )
        return cls(
            region=region,
            geometry=geometry,
            mean=np.zeros(shape, dtype=np.float64),
            variance=np.zeros(shape, dtype=np.float64),
        )

    @property
    def channels(self) -> int:
        return self.mean.shape[0]

    @property
    def origin(self) -> Tuple[int, int]:
        """Source (x, y) of the anchor stored in cell (0, 0)."""
        offset = self.geometry.kernel_offset
        return self.region.left - offset, self.region.top - offset


def accumulate_rgb(
    source: np.ndarray,
    tables: StatisticsTables,
    cancel_token: Optional[CancellationToken] = None,
) -> bool:
    """
    Fill three-channel tables with R, G, B block statistics.

    Returns:
        False if cancelled before every row was written
    """
    x0, y0, x1, y1 = _source_bounds(tables, source.shape[1], source.shape[0])
    crop = source[y0:y1, x0:x1, :3]
    return _accumulate(crop, (x0, y0), source.shape[1], source.shape[0], tables, cancel_token)


def accumulate_intensity(
    source: np.ndarray,
    tables: StatisticsTables,
    cancel_token: Optional[CancellationToken] = None,
) -> bool:
    """
    Fill single-channel tables with HSV intensity block statistics.

    Returns:
        False if cancelled before every row was written
    """
    x0, y0, x1, y1 = _source_bounds(tables, source.shape[1], source.shape[0])
    crop = intensity_of(source[y0:y1, x0:x1])[..., np.newaxis]
    return _accumulate(crop, (x0, y0), source.shape[1], source.shape[0], tables, cancel_token)


def _source_bounds(tables: StatisticsTables, width: int, height: int) -> Tuple[int, int, int, int]:
    """Source rectangle read by the blocks of every anchor in the tables."""
    region = tables.region
    size = tables.geometry.kernel_size
    first_x, first_y = tables.origin
    return (
        max(first_x, 0),
        max(first_y, 0),
        min(region.right - 1 + size, width),
        min(region.bottom - 1 + size, height),
    )


def _summed_area(values: np.ndarray) -> np.ndarray:
    """Integral image with a leading zero row and column."""
    table = np.zeros((values.shape[0] + 1, values.shape[1] + 1, values.shape[2]), dtype=np.int64)
    table[1:, 1:] = np.cumsum(np.cumsum(values, axis=0, dtype=np.int64), axis=1)
    return table


def _accumulate(
    crop: np.ndarray,
    crop_origin: Tuple[int, int],
    width: int,
    height: int,
    tables: StatisticsTables,
    cancel_token: Optional[CancellationToken],
) -> bool:
    """Write every table row from summed-area tables of the source crop."""
    values = crop.astype(np.int64)
    sums = _summed_area(values)
    squares = _summed_area(values * values)

    size = tables.geometry.kernel_size
    first_x, first_y = tables.origin
    crop_x, crop_y = crop_origin

    anchors_x = np.arange(first_x, tables.region.right)
    left = np.clip(anchors_x, 0, width) - crop_x
    right = np.clip(anchors_x + size, 0, width) - crop_x
    block_widths = (right - left).astype(np.float64)[:, np.newaxis]

    for row, y in enumerate(range(first_y, tables.region.bottom)):
        if cancel_token is not None and cancel_token.is_cancel_requested:
            logger.debug("Accumulation cancelled at row %d of %s", y, tables.region)
            return False

        top = max(y, 0) - crop_y
        bottom = min(y + size, height) - crop_y
        count = block_widths * (bottom - top)

        total = (sums[bottom, right] - sums[top, right] - sums[bottom, left] + sums[top, left]).astype(np.float64)
        total_sq = (squares[bottom, right] - squares[top, right] - squares[bottom, left] + squares[top, left]).astype(np.float64)

        # (anchors, channels) -> (channels, anchors)
        tables.mean[:, row, :] = (total / count).T
        tables.variance[:, row, :] = (total_sq - total * total / count).T

    return True
