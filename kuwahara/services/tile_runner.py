"""
Parallel tile runner for Kuwahara renders.

Dispatches disjoint tiles to a ThreadPoolExecutor. Each worker renders its
tile into a private buffer; completed tiles are composited into the
destination on the calling thread as they arrive.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
import logging
import os
import threading
import time
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..core import (
    CancellationToken,
    Region,
    RenderReport,
    RenderStatus,
    TileResult,
)
from ..processing.renderer import KuwaharaRenderer, composite

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Region], None]


class AtomicProgress:
    """Thread-safe progress counter for parallel workers."""

    def __init__(self, total: int):
        self.lock = threading.Lock()
        self.completed = 0
        self.total = total

    def increment(self) -> int:
        """
        Increment progress counter.
        Returns current percentage (0-100).
        """
        with self.lock:
            self.completed += 1
            return self._percent()

    def get_percent(self) -> int:
        """Get current progress percentage."""
        with self.lock:
            return self._percent()

    def _percent(self) -> int:
        if self.total == 0:
            return 100
        return int((self.completed / self.total) * 100)


class TileRunner:
    """Renders a list of tiles concurrently with one renderer."""

    def __init__(
        self,
        renderer: KuwaharaRenderer,
        max_workers: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.renderer = renderer
        self.max_workers = max_workers
        self.progress_callback = progress_callback

    def run(
        self,
        source: np.ndarray,
        destination: np.ndarray,
        regions: Sequence[Region],
        cancel_token: Optional[CancellationToken] = None,
    ) -> RenderReport:
        """
        Render every region into destination.

        Regions that were cancelled are reported as ABORTED and are not
        composited. If any region is aborted the destination must not be
        published.

        Raises:
            DimensionMismatchError: destination does not match source
            InvalidImageError: unsupported buffer or bad regions
        """
        self.renderer.validate(source, destination, regions)

        token = cancel_token or CancellationToken()
        tiles = [r for r in regions if not r.is_empty()]
        num_workers = self._get_optimal_worker_count(len(tiles))
        progress = AtomicProgress(len(tiles))
        started = time.perf_counter()

        logger.info(
            "Rendering %d tile(s) with %d worker(s), radius=%d rgb=%s",
            len(tiles),
            num_workers,
            self.renderer.parameters.radius,
            self.renderer.parameters.use_rgb_channels,
        )

        results: List[TileResult] = []
        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            futures = {
                executor.submit(self._render_tile_wrapper, source, region, token): region
                for region in tiles
            }

            # Once the token is set, queued tiles return ABORTED without work
            try:
                for future in as_completed(futures):
                    result = future.result()  # Will raise if the worker failed
                    results.append(result)

                    if not result.completed:
                        continue

                    composite(destination, result)
                    percent = progress.increment()
                    if self.progress_callback is not None:
                        self.progress_callback(percent, result.region)
            except BaseException:
                # Stop the remaining workers before propagating
                token.cancel()
                executor.shutdown(wait=False, cancel_futures=True)
                raise

        status = RenderStatus.COMPLETED
        if any(not r.completed for r in results):
            status = RenderStatus.ABORTED

        report = RenderReport(status=status, tiles=results, elapsed=time.perf_counter() - started)
        if status == RenderStatus.COMPLETED:
            logger.info("Render completed: %d tile(s) in %.3fs", report.completed_count, report.elapsed)
        else:
            logger.info(
                "Render aborted: %d completed, %d aborted",
                report.completed_count,
                report.aborted_count,
            )
        return report

    def _render_tile_wrapper(
        self,
        source: np.ndarray,
        region: Region,
        token: CancellationToken,
    ) -> TileResult:
        """
        Wrapper for tile rendering that can be used with ThreadPoolExecutor.
        Skips the work entirely if cancellation was requested before start.
        """
        if token.is_cancel_requested:
            return TileResult(region=region, status=RenderStatus.ABORTED)
        return self.renderer.render_region(source, region, token)

    def _get_optimal_worker_count(self, num_tiles: int) -> int:
        """
        Determine number of worker threads.

        Strategy:
        - Explicit max_workers wins (at least 1)
        - Fewer than 4 tiles: 1 worker
        - Otherwise: min(8, available_cores, num_tiles)
        """
        if self.max_workers:
            return max(1, min(self.max_workers, max(num_tiles, 1)))

        available_cores = os.cpu_count() or 4
        if num_tiles < 4:
            return 1
        return min(8, available_cores, num_tiles)
