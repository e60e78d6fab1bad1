"""Interface shared by every fractal kind the viewer can display."""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Fractal(Protocol):
    """
    A fractal the viewer can draw and zoom.

    Implementations only need these two methods; there is no base class
    to inherit from.
    """

    def render(self, width: int, height: int) -> np.ndarray:
        """Return a (height, width, 4) uint8 RGBA image of the current view."""
        ...

    def zoom(self, viewport_width: float, viewport_height: float,
             pointer_x: float, pointer_y: float, scroll_delta: float) -> None:
        """Zoom the view around the pointer; negative deltas zoom in."""
        ...
