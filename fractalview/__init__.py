"""
Fractal Viewer Package

An escape-time Mandelbrot set renderer with pointer-anchored zoom,
using Numba for JIT-compiled computation and a thread pool to fill the
image in parallel column ranges. A small Pygame window is included as
an example caller.

Quick Start:
    from fractalview import MandelbrotRenderer
    renderer = MandelbrotRenderer()
    image = renderer.render(800, 600)          # (600, 800, 4) RGBA
    renderer.zoom(800, 600, 400, 300, -1.0)    # zoom in at the center
    image = renderer.render(800, 600)

Or from command line:
    python -m fractalview
    python -m fractalview --save mandelbrot.png

Package Structure:
    - params.py: Viewport snapshots, zoom transform, snapshot mailbox
    - partition.py: Column ranges for parallel rendering
    - compute.py: JIT-compiled per-pixel kernel and buffer fill loops
    - renderer.py: Frame rendering with a reused RGBA buffer
    - colormaps.py: Sinusoid palette definitions
    - fractal.py: render()/zoom() interface shared by fractal kinds
    - config.py: Startup settings (settings.json)
    - app.py: Pygame window and event loop
    - cli.py: Command line entry point

Controls:
    - Scroll: Zoom in/out at mouse position
    - R: Reset to default view
    - F: Toggle fullscreen
    - C: Switch between concurrent and sequential rendering
    - S: Save a screenshot
    - ESC / Ctrl+W: Quit
"""

from .colormaps import PALETTES, Palette, get_palette, list_palette_names
from .fractal import Fractal
from .params import SnapshotMailbox, ViewportParameters, ViewportSnapshot, ZoomGesture, apply_zoom
from .partition import PartitionRange, partition
from .renderer import MandelbrotRenderer

__version__ = "1.0.0"
__all__ = [
    "Fractal",
    "MandelbrotRenderer",
    "PALETTES",
    "Palette",
    "PartitionRange",
    "SnapshotMailbox",
    "ViewportParameters",
    "ViewportSnapshot",
    "ZoomGesture",
    "apply_zoom",
    "get_palette",
    "list_palette_names",
    "partition",
]
