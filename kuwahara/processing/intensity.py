"""
HSV intensity helpers for the single-channel render mode.

Hue is an integer in [0, 360), saturation and value are integers in
[0, 100]. Every component is truncated to an integer on conversion, so a
round trip through HSV is lossy for levels that do not fall on the 0-100
value scale.
"""

from typing import Tuple

import numpy as np


def _build_intensity_lookup_table() -> np.ndarray:
    """Map the highest RGB channel value (0-255) to its HSV value (0-100)."""
    table = np.empty(256, dtype=np.int64)
    for i in range(256):
        value = i / 255.0
        table[i] = int(min(max(value * 100.0, 0.0), 100.0))
    table.setflags(write=False)
    return table


# Shared read-only by all workers.
INTENSITY_LOOKUP_TABLE = _build_intensity_lookup_table()


def intensity_of(rgb: np.ndarray) -> np.ndarray:
    """
    HSV value of each pixel, looked up from max(R, G, B).

    Args:
        rgb: uint8 array with R, G, B in the last axis

    Returns:
        int64 array of the leading shape
    """
    return INTENSITY_LOOKUP_TABLE[rgb[..., :3].max(axis=-1)]


def rgb_to_hue_saturation(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Integer hue (0-359) and saturation (0-100) of uint8 RGB pixels."""
    rgb = rgb[..., :3].astype(np.float64) / 255.0
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    max_c = rgb.max(axis=-1)
    min_c = rgb.min(axis=-1)
    delta = max_c - min_c
    chromatic = (max_c != 0) & (delta != 0)

    safe_delta = np.where(chromatic, delta, 1.0)
    safe_max = np.where(chromatic, max_c, 1.0)

    hue = np.select(
        [r == max_c, g == max_c],
        [(g - b) / safe_delta, 2.0 + (b - r) / safe_delta],
        default=4.0 + (r - g) / safe_delta,
    )
    hue = np.where(chromatic, hue * 60.0, 0.0)
    hue = np.where(hue < 0, hue + 360.0, hue)
    saturation = np.where(chromatic, delta / safe_max, 0.0)

    return hue.astype(np.int64), (saturation * 100.0).astype(np.int64)


def hsv_to_rgb(hue: np.ndarray, saturation: np.ndarray, value: np.ndarray) -> np.ndarray:
    """
    Convert integer HSV components back to uint8 RGB.

    Returns:
        uint8 array of shape hue.shape + (3,)
    """
    h = np.asarray(hue, dtype=np.int64) % 360
    s = np.asarray(saturation, dtype=np.float64) / 100.0
    v = np.asarray(value, dtype=np.float64) / 100.0

    sector_pos = h / 60.0
    sector = np.floor(sector_pos).astype(np.int64)
    fraction = sector_pos - sector

    p = v * (1.0 - s)
    q = v * (1.0 - s * fraction)
    t = v * (1.0 - s * (1.0 - fraction))

    sectors = [sector == n for n in range(6)]
    r = np.select(sectors, [v, q, p, p, t, v], default=0.0)
    g = np.select(sectors, [t, v, v, q, p, p], default=0.0)
    b = np.select(sectors, [p, p, t, v, v, q], default=0.0)

    grey = s == 0
    r = np.where(grey, v, r)
    g = np.where(grey, v, g)
    b = np.where(grey, v, b)

    rgb = np.stack([r, g, b], axis=-1) * 255.0
    return rgb.astype(np.int64).astype(np.uint8)
