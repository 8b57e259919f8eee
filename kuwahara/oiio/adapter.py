"""
OpenImageIO adapter for the Kuwahara engine.

Converts between OIIO ImageBuf/ROI and the engine's uint8 numpy arrays
and pixel regions. No file I/O happens here.
"""

from typing import Optional

import numpy as np
import OpenImageIO as oiio

from ..core import InvalidImageError, Region


class OiioAdapter:
    """Thin wrapper for robust OIIO bindings."""

    @staticmethod
    def to_array(imagebuf: oiio.ImageBuf) -> np.ndarray:
        """
        Read all pixels of a buffer as uint8 (H, W, C).

        Float buffers are quantized by OIIO to the 0-255 range.

        Raises:
            InvalidImageError: buffer has fewer than 3 channels or no pixels
        """
        spec = imagebuf.spec()
        if spec.nchannels < 3:
            raise InvalidImageError(
                f"Kuwahara needs at least 3 channels, image has {spec.nchannels}"
            )
        if spec.depth > 1:
            raise InvalidImageError("Volume images are not supported")

        pixels = imagebuf.get_pixels(oiio.UINT8)
        if pixels is None:
            raise InvalidImageError(f"Cannot read pixels: {imagebuf.geterror()}")

        # 2D images come back as (H, W, C); drop a leading depth axis if present
        pixels = np.asarray(pixels, dtype=np.uint8)
        if pixels.ndim == 4:
            pixels = pixels[0]
        return np.ascontiguousarray(pixels.reshape(spec.height, spec.width, spec.nchannels))

    @staticmethod
    def from_array(
        pixels: np.ndarray,
        template: Optional[oiio.ImageBuf] = None,
    ) -> oiio.ImageBuf:
        """
        Build a uint8 ImageBuf from (H, W, C) pixels.

        Channel names and the data window origin are copied from template
        when given.
        """
        height, width, nchannels = pixels.shape
        spec = oiio.ImageSpec(width, height, nchannels, oiio.UINT8)
        if template is not None:
            template_spec = template.spec()
            spec.x = template_spec.x
            spec.y = template_spec.y
            if template_spec.nchannels == nchannels:
                spec.channelnames = tuple(template_spec.channelnames)
                spec.alpha_channel = template_spec.alpha_channel

        result = oiio.ImageBuf(spec)
        if not result.set_pixels(result.roi, np.ascontiguousarray(pixels, dtype=np.uint8)):
            raise RuntimeError(f"set_pixels failed: {result.geterror()}")
        return result

    @staticmethod
    def roi_to_region(roi: oiio.ROI, spec: oiio.ImageSpec) -> Region:
        """
        Convert an OIIO ROI to a zero-based pixel region.

        Undefined ROIs mean the whole image; the result is clipped to the
        data window.
        """
        if not roi.defined:
            return Region.full(spec.width, spec.height)

        left = max(roi.xbegin - spec.x, 0)
        top = max(roi.ybegin - spec.y, 0)
        right = min(roi.xend - spec.x, spec.width)
        bottom = min(roi.yend - spec.y, spec.height)
        return Region(left, top, max(right, left), max(bottom, top))

    @staticmethod
    def get_oiio_version() -> str:
        """Return OIIO version string."""
        return str(getattr(oiio, "__version__", "unknown"))
