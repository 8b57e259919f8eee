"""
Processing executor - applies a Kuwahara filter to OpenImageIO buffers.

This module bridges filter definitions to the tile renderer, handling
the conversion to and from ImageBuf and the tiling of the ROI.
"""

import logging
from typing import Optional

import OpenImageIO as oiio

from ..core import CancellationToken, RenderStatus
from ..oiio import OiioAdapter
from ..services.settings import Settings
from ..services.tile_runner import ProgressCallback, TileRunner
from .filters import KuwaharaFilter, ProcessingFilter
from .geometry import split_into_tiles
from .renderer import KuwaharaRenderer

logger = logging.getLogger(__name__)


class ProcessingExecutor:
    """Executes a Kuwahara filter on ImageBuf objects."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def execute(
        self,
        imagebuf: oiio.ImageBuf,
        filter: ProcessingFilter,
        roi: Optional[oiio.ROI] = None,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Optional[oiio.ImageBuf]:
        """
        Apply a filter to an image and return a new buffer.

        Args:
            imagebuf: Input image buffer, left untouched
            filter: Filter to apply
            roi: Optional region of interest; pixels outside it are copied
            cancel_token: Optional cancellation signal
            progress_callback: Optional (percent, region) callback

        Returns:
            Processed uint8 image buffer, or None if the render was cancelled

        Raises:
            InvalidParameterError: filter parameters are invalid
            InvalidImageError: image cannot be processed
        """
        if not filter.enabled:
            return imagebuf

        if not isinstance(filter, KuwaharaFilter):
            raise ValueError(f"Unknown filter type: {type(filter)}")

        parameters = filter.to_parameters()
        source = OiioAdapter.to_array(imagebuf)
        destination = source.copy()

        region = OiioAdapter.roi_to_region(roi if roi is not None else oiio.ROI(), imagebuf.spec())
        tile_size = self.settings.get_tile_size()
        tiles = split_into_tiles(region, tile_size, tile_size)

        runner = TileRunner(
            KuwaharaRenderer(parameters),
            max_workers=self.settings.get_max_workers(),
            progress_callback=progress_callback,
        )
        report = runner.run(source, destination, tiles, cancel_token)

        if report.status != RenderStatus.COMPLETED:
            logger.info("Kuwahara on %s cancelled, discarding partial output", region)
            return None

        return OiioAdapter.from_array(destination, template=imagebuf)
