"""
Mandelbrot renderer with a reused output buffer and parallel column fill.

The MandelbrotRenderer class handles:
- Picking up the latest viewport snapshot published by zoom()
- Splitting the raster into column ranges, one per worker
- Filling those ranges concurrently on a thread pool (the compiled
  kernels release the GIL), or sequentially row by row
- Keeping one RGBA buffer alive across frames of the same size
"""

import os
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .compute import render_columns, render_sequential
from .logging_setup import get_logger
from .params import ViewportParameters
from .partition import partition

logger = get_logger(__name__)

# Workers per available CPU for the concurrent path
WORKER_MULTIPLIER = 3


def default_worker_count(multiplier=WORKER_MULTIPLIER):
    """Number of column ranges used for one frame."""
    return max(1, (os.cpu_count() or 1) * multiplier)


class MandelbrotRenderer:
    """
    Renders the Mandelbrot set for the latest published viewport.

    Usage:
        renderer = MandelbrotRenderer()
        image = renderer.render(800, 600)   # (600, 800, 4) uint8, read-only

        # On a scroll event:
        renderer.zoom(800, 600, pointer_x, pointer_y, delta)
        image = renderer.render(800, 600)

    The returned array is a view of the renderer's own buffer. It is
    overwritten by the next render() of the same size, so copy it if it
    has to outlive that call.

    Attributes:
        params: ViewportParameters shared with whoever calls zoom()
        workers: Number of column ranges for the concurrent path
        sequential: Render on the calling thread only
        last_render_seconds: Wall time of the previous render()
    """

    def __init__(self, params=None, workers=None, sequential=False):
        """
        Initialize the renderer.

        Args:
            params: ViewportParameters to read snapshots from (new defaults if None)
            workers: Column ranges per frame (default: CPUs x WORKER_MULTIPLIER)
            sequential: Use the single-threaded row-major path
        """
        self.params = params if params is not None else ViewportParameters()
        self.workers = workers if workers is not None else default_worker_count()
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        self.sequential = sequential

        # Fallback until the first snapshot is taken from the mailbox
        self.snapshot = self.params.current
        self.buffer = np.zeros((0, 0, 4), dtype=np.uint8)
        self.last_render_seconds = 0.0

    def zoom(self, viewport_width, viewport_height, pointer_x, pointer_y, scroll_delta):
        """Forward a scroll gesture to the viewport parameters."""
        self.params.zoom(viewport_width, viewport_height, pointer_x, pointer_y, scroll_delta)

    def render(self, width, height):
        """
        Render one frame.

        Args:
            width, height: Image dimensions in pixels (both >= 1)

        Returns:
            Read-only (height, width, 4) uint8 RGBA array
        """
        width = int(width)
        height = int(height)
        if width < 1 or height < 1:
            raise ValueError(f"image size must be positive, got {width}x{height}")

        start = time.perf_counter()
        self._ensure_buffer(width, height)
        snapshot = self._take_snapshot()

        phase, freq = snapshot.palette.as_arrays()
        viewport = (snapshot.center_x, snapshot.center_y,
                    snapshot.half_width, snapshot.half_height, snapshot.depth)

        if self.sequential:
            render_sequential(self.buffer, *viewport, phase, freq)
        else:
            self._render_concurrent(viewport, phase, freq)

        self.last_render_seconds = time.perf_counter() - start
        logger.debug("Rendered %sx%s (%s) in %.3fs", width, height,
                     "sequential" if self.sequential else f"{self.workers} workers",
                     self.last_render_seconds)

        view = self.buffer.view()
        view.flags.writeable = False
        return view

    def _ensure_buffer(self, width, height):
        if self.buffer.shape[:2] != (height, width):
            logger.debug("Allocating %sx%s raster buffer", width, height)
            self.buffer = np.zeros((height, width, 4), dtype=np.uint8)

    def _take_snapshot(self):
        """Take the pending snapshot if there is one, else keep the last."""
        snapshot = self.params.mailbox.take()
        if snapshot is not None:
            self.snapshot = snapshot
        return self.snapshot

    def _render_concurrent(self, viewport, phase, freq):
        """
        Fill the buffer from a pool of threads, one column range each.

        The pool lives for this frame only; leaving the with-block waits
        for every range, and result() re-raises any worker failure.
        """
        ranges = partition(self.workers, self.buffer.shape[1])
        with ThreadPoolExecutor(max_workers=len(ranges),
                                thread_name_prefix="render") as pool:
            futures = [
                pool.submit(render_columns, self.buffer, r.start, r.end, *viewport, phase, freq)
                for r in ranges
            ]
            for future in futures:
                future.result()
