"""
Window selection and compositing.

For an output pixel (x, y) the four candidate windows are read in a fixed
order: top-left, top-right, bottom-right, bottom-left. A later window only
replaces the current best on strictly lower variance.
"""

import logging
from typing import Optional

import numpy as np

from ..core import CancellationToken, WindowSelection
from .intensity import hsv_to_rgb, rgb_to_hue_saturation
from .statistics import StatisticsTables

logger = logging.getLogger(__name__)


def select_rgb(
    source: np.ndarray,
    tables: StatisticsTables,
    selection: WindowSelection = WindowSelection.COUPLED,
    cancel_token: Optional[CancellationToken] = None,
) -> Optional[np.ndarray]:
    """
    Composite a tile from three-channel RGB statistics.

    Args:
        source: Full source image, uint8 (H, W, C)
        tables: Accumulated RGB tables for the tile
        selection: COUPLED reproduces a single shared best window for all
            channels; INDEPENDENT picks per channel
        cancel_token: Polled once per output row

    Returns:
        Tile pixels (h, w, C), or None if cancelled
    """
    region = tables.region
    tile = source[region.top:region.bottom, region.left:region.right].copy()
    columns = np.arange(region.width)
    channels = np.arange(3)[:, np.newaxis]

    for row in range(region.height):
        if _cancelled(cancel_token):
            logger.debug("RGB selection cancelled at row %d of %s", region.top + row, region)
            return None

        variances = _candidates(tables.variance, row, region.width, tables.geometry.kernel_offset)
        means = _candidates(tables.mean, row, region.width, tables.geometry.kernel_offset)

        if selection == WindowSelection.COUPLED:
            best = _coupled_best(variances)
            chosen = means[best, :, columns]  # (width, 3)
        else:
            best = np.argmin(variances, axis=0)
            chosen = means[best, channels, columns].T

        tile[row, :, :3] = np.clip(chosen + 0.5, 0, 255).astype(np.uint8)

    return tile


def select_intensity(
    source: np.ndarray,
    tables: StatisticsTables,
    cancel_token: Optional[CancellationToken] = None,
) -> Optional[np.ndarray]:
    """
    Composite a tile from intensity statistics.

    Hue and saturation come from each source pixel; only the HSV value is
    replaced by the selected window mean.

    Returns:
        Tile pixels (h, w, C), or None if cancelled
    """
    region = tables.region
    tile = source[region.top:region.bottom, region.left:region.right].copy()
    columns = np.arange(region.width)

    for row in range(region.height):
        if _cancelled(cancel_token):
            logger.debug("Intensity selection cancelled at row %d of %s", region.top + row, region)
            return None

        variances = _candidates(tables.variance, row, region.width, tables.geometry.kernel_offset)
        means = _candidates(tables.mean, row, region.width, tables.geometry.kernel_offset)

        best = _coupled_best(variances)
        value = np.clip(means[best, 0, columns] + 0.5, 0, 100).astype(np.int64)

        hue, saturation = rgb_to_hue_saturation(tile[row])
        tile[row, :, :3] = hsv_to_rgb(hue, saturation, value)

    return tile


def _candidates(table: np.ndarray, row: int, width: int, offset: int) -> np.ndarray:
    """Stack the four candidate windows of one output row: (4, channels, width)."""
    return np.stack([
        table[:, row, 0:width],
        table[:, row, offset:offset + width],
        table[:, row + offset, offset:offset + width],
        table[:, row + offset, 0:width],
    ])


def _coupled_best(variances: np.ndarray) -> np.ndarray:
    """
    Index of the selected window per pixel, shared by all channels.

    Each channel tracks its own minimum, but they all write one best
    index, in channel order, whenever they improve. With a single
    channel this is the plain first-minimum.
    """
    steps, channels, width = variances.shape
    minimum = np.full((channels, width), np.inf)
    best = np.zeros(width, dtype=np.int64)

    for step in range(steps):
        for channel in range(channels):
            improved = variances[step, channel] < minimum[channel]
            minimum[channel] = np.where(improved, variances[step, channel], minimum[channel])
            best = np.where(improved, step, best)

    return best


def _cancelled(cancel_token: Optional[CancellationToken]) -> bool:
    return cancel_token is not None and cancel_token.is_cancel_requested
