"""Shared fixtures and a direct per-pixel reference of the filter."""

import numpy as np
import pytest

from kuwahara.core import CancellationToken


def _reference_hsv(r, g, b):
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    mx = max(r, g, b)
    mn = min(r, g, b)
    delta = mx - mn
    if mx == 0 or delta == 0:
        h = s = 0.0
    else:
        s = delta / mx
        if r == mx:
            h = (g - b) / delta
        elif g == mx:
            h = 2 + (b - r) / delta
        else:
            h = 4 + (r - g) / delta
    h *= 60
    if h < 0:
        h += 360
    return int(h), int(s * 100), int(mx * 100)


def _reference_rgb(hue, sat, val):
    h = hue % 360
    s = sat / 100.0
    v = val / 100.0
    if s == 0:
        r = g = b = v
    else:
        pos = h / 60
        sector = int(np.floor(pos))
        frac = pos - sector
        p = v * (1 - s)
        q = v * (1 - s * frac)
        t = v * (1 - s * (1 - frac))
        r, g, b = [(v, t, p), (q, v, p), (p, v, t), (p, q, v), (t, p, v), (v, p, q)][sector]
    return int(r * 255), int(g * 255), int(b * 255)


def reference_kuwahara(image, radius, use_rgb_channels=True):
    """Straight nested-loop Kuwahara over the whole image."""
    height, width = image.shape[:2]
    if radius & 1:
        size, offset = (radius + 1) // 2, (radius - 1) // 2
    else:
        size, offset = radius // 2, (radius - 2) // 2

    lut = [int(min(max(i / 255.0 * 100.0, 0.0), 100.0)) for i in range(256)]
    channels = 3 if use_rgb_channels else 1
    mean = np.zeros((channels, height + offset, width + offset))
    var = np.zeros((channels, height + offset, width + offset))

    for y in range(-offset, height):
        for x in range(-offset, width):
            block = image[max(y, 0):min(y + size, height), max(x, 0):min(x + size, width), :3]
            block = block.reshape(-1, 3).astype(int)
            if use_rgb_channels:
                samples = [block[:, c].tolist() for c in range(3)]
            else:
                samples = [[lut[max(p)] for p in block.tolist()]]
            for c, values in enumerate(samples):
                count = len(values)
                total = float(sum(values))
                total_sq = float(sum(v * v for v in values))
                mean[c, y + offset, x + offset] = total / count
                var[c, y + offset, x + offset] = total_sq - total * total / count

    out = image.copy()
    for y in range(height):
        for x in range(width):
            positions = [(y, x), (y, x + offset), (y + offset, x + offset), (y + offset, x)]
            minimum = [np.inf] * channels
            best = positions[0]
            for pos in positions:
                for c in range(channels):
                    if var[c][pos] < minimum[c]:
                        minimum[c] = var[c][pos]
                        best = pos
            if use_rgb_channels:
                for c in range(3):
                    out[y, x, c] = int(min(max(mean[c][best] + 0.5, 0), 255))
            else:
                h, s, _ = _reference_hsv(*[int(v) for v in image[y, x, :3]])
                value = int(min(max(mean[0][best] + 0.5, 0), 100))
                out[y, x, :3] = _reference_rgb(h, s, value)
    return out


class CountdownToken(CancellationToken):
    """Reports cancellation after a fixed number of polls."""

    def __init__(self, polls: int):
        super().__init__()
        self.polls = polls

    @property
    def is_cancel_requested(self) -> bool:
        self.polls -= 1
        return self.polls < 0


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noisy_rgba(rng):
    """Small random RGBA image."""
    return rng.integers(0, 256, size=(11, 13, 4), dtype=np.uint8)


@pytest.fixture
def edge_image():
    """20x10 RGBA image, left half black, right half white, opaque."""
    image = np.zeros((10, 20, 4), dtype=np.uint8)
    image[:, 10:, :3] = 255
    image[..., 3] = 255
    return image
