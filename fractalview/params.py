"""
Viewport parameters and the pointer-anchored zoom transform.

The viewport is described by immutable ViewportSnapshot values. Zooming
never mutates a snapshot: it derives a new one and publishes it to a
single-slot mailbox, from which the renderer picks up the latest value
at the start of its next frame.
"""

import threading
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .colormaps import Palette, get_default_palette
from .logging_setup import get_logger

logger = get_logger(__name__)

# Default view (shows the whole set)
DEFAULT_DEPTH = 500
DEFAULT_CENTER = (-0.75, 0.0)
DEFAULT_HALF_EXTENTS = (1.5, 1.2)

# Magnification steps per scroll notch
ZOOM_IN_STEP = 1.1
ZOOM_OUT_STEP = 0.9

# Below this float64 can no longer tell neighbouring pixels apart;
# above it the whole set is a handful of pixels.
MIN_HALF_EXTENT = 1e-13
MAX_HALF_EXTENT = 1e3

# Widest accepted half_width:half_height ratio (either way round) for a
# starting view
MAX_ASPECT_RATIO = 1e6


def _default_phase():
    return get_default_palette().phase


def _default_freq():
    return get_default_palette().freq


@dataclass(frozen=True)
class ViewportSnapshot:
    """Immutable description of the visible region and its coloring."""

    center_x: float = DEFAULT_CENTER[0]
    center_y: float = DEFAULT_CENTER[1]
    half_width: float = DEFAULT_HALF_EXTENTS[0]
    half_height: float = DEFAULT_HALF_EXTENTS[1]
    depth: int = DEFAULT_DEPTH
    color_phase: Tuple[float, float, float] = field(default_factory=_default_phase)
    color_freq: Tuple[float, float, float] = field(default_factory=_default_freq)
    magnification: float = 1.0

    def __post_init__(self):
        for half in (self.half_width, self.half_height):
            if not MIN_HALF_EXTENT <= half <= MAX_HALF_EXTENT:
                raise ValueError(
                    f"half extents must be within [{MIN_HALF_EXTENT:g}, {MAX_HALF_EXTENT:g}], "
                    f"got {self.half_width}, {self.half_height}"
                )
        if self.depth <= 0:
            raise ValueError(f"depth must be positive, got {self.depth}")

    def plane_point(self, px, py, width, height):
        """Map a pixel position to its complex-plane coordinate."""
        x = (px / width) * (2 * self.half_width) + self.center_x - self.half_width
        y = (py / height) * (2 * self.half_height) + self.center_y - self.half_height
        return x, y

    @property
    def palette(self):
        return Palette(self.color_phase, self.color_freq)

    def with_palette(self, palette):
        """Return a copy colored with the given Palette."""
        return replace(self, color_phase=tuple(palette.phase), color_freq=tuple(palette.freq))


@dataclass(frozen=True)
class ZoomGesture:
    """A single scroll event in widget-local pixel coordinates."""

    viewport_width: float
    viewport_height: float
    pointer_x: float
    pointer_y: float
    scroll_delta: float

    @property
    def zooms_in(self):
        return self.scroll_delta < 0


def _zoom_axis(center, half, mouse, mult):
    lo = (center - half) * mult + mouse * (1 - mult)
    hi = (center + half) * mult + mouse * (1 - mult)
    new_half = (hi - lo) / 2
    return hi - new_half, new_half


def apply_zoom(snapshot, gesture):
    """
    Derive the snapshot that results from a zoom gesture.

    A negative scroll delta magnifies by ZOOM_IN_STEP, anything else by
    ZOOM_OUT_STEP; the half extents shrink by the reciprocal of the step.
    Both plane bounds are blended toward the point under the pointer, so
    that point stays under the pointer after the zoom.

    A zoom-in that would take a half extent below MIN_HALF_EXTENT, a
    zoom-out that would take one above MAX_HALF_EXTENT, and any gesture
    from a viewport with no area leave the snapshot unchanged.

    Args:
        snapshot: Current ViewportSnapshot
        gesture: ZoomGesture to apply

    Returns:
        A new ViewportSnapshot, or the given one if the gesture is ignored
    """
    if gesture.viewport_width <= 0 or gesture.viewport_height <= 0:
        logger.warning("Ignoring zoom on empty viewport %sx%s",
                       gesture.viewport_width, gesture.viewport_height)
        return snapshot

    step = ZOOM_IN_STEP if gesture.zooms_in else ZOOM_OUT_STEP
    mult = 1.0 / step

    mouse_x, mouse_y = snapshot.plane_point(
        gesture.pointer_x, gesture.pointer_y,
        gesture.viewport_width, gesture.viewport_height,
    )
    center_x, half_width = _zoom_axis(snapshot.center_x, snapshot.half_width, mouse_x, mult)
    center_y, half_height = _zoom_axis(snapshot.center_y, snapshot.half_height, mouse_y, mult)

    if gesture.zooms_in:
        limit_hit = min(half_width, half_height) < MIN_HALF_EXTENT
    else:
        limit_hit = max(half_width, half_height) > MAX_HALF_EXTENT
    if limit_hit:
        logger.debug("Zoom limit reached (half extents %g, %g), gesture ignored",
                     half_width, half_height)
        return snapshot
    # A far-off center can swallow a tiny extent in the blend
    if not (half_width >= MIN_HALF_EXTENT and half_height >= MIN_HALF_EXTENT):
        logger.debug("Zoom lost precision at center (%r, %r), gesture ignored",
                     center_x, center_y)
        return snapshot

    return replace(
        snapshot,
        center_x=center_x,
        center_y=center_y,
        half_width=half_width,
        half_height=half_height,
        magnification=snapshot.magnification * step,
    )


class SnapshotMailbox:
    """
    Single-slot, non-blocking handoff of the latest snapshot.

    publish() overwrites any value that has not been taken yet; take()
    empties the slot and returns what was there, or None. Neither call
    waits for the other side.
    """

    def __init__(self):
        self._slot = None
        self._lock = threading.Lock()

    def publish(self, snapshot):
        with self._lock:
            self._slot = snapshot

    def take(self) -> Optional[ViewportSnapshot]:
        with self._lock:
            snapshot = self._slot
            self._slot = None
        return snapshot

    @property
    def pending(self):
        with self._lock:
            return self._slot is not None


class ViewportParameters:
    """
    Producer side of the viewport state.

    Holds the most recent snapshot and publishes every change to the
    mailbox read by the renderer.

    Usage:
        params = ViewportParameters()
        params.zoom(800, 600, 400, 300, -1.0)  # zoom in at the center
        snapshot = params.mailbox.take()
    """

    def __init__(self, initial=None):
        """
        Initialize with a starting snapshot (defaults if None).

        The starting snapshot is published right away so the first render
        has it available.
        """
        self._initial = initial if initial is not None else ViewportSnapshot()
        self._current = self._initial
        self._lock = threading.Lock()
        self.mailbox = SnapshotMailbox()
        self.mailbox.publish(self._current)

    @property
    def current(self):
        """Most recently published snapshot."""
        with self._lock:
            return self._current

    def zoom(self, viewport_width, viewport_height, pointer_x, pointer_y, scroll_delta):
        """
        Apply a scroll gesture and publish the resulting snapshot.

        Args:
            viewport_width, viewport_height: Widget size in pixels
            pointer_x, pointer_y: Pointer position inside the widget
            scroll_delta: Scroll amount; negative zooms in

        Returns:
            The published ViewportSnapshot
        """
        gesture = ZoomGesture(
            float(viewport_width), float(viewport_height),
            float(pointer_x), float(pointer_y), float(scroll_delta),
        )
        with self._lock:
            snapshot = self._current = apply_zoom(self._current, gesture)
            self.mailbox.publish(snapshot)
        logger.debug("Zoom %s at (%s, %s): center=(%r, %r) half=(%g, %g)",
                     "in" if gesture.zooms_in else "out", pointer_x, pointer_y,
                     snapshot.center_x, snapshot.center_y,
                     snapshot.half_width, snapshot.half_height)
        return snapshot

    def reset(self):
        """Go back to the starting snapshot and publish it."""
        with self._lock:
            self._current = self._initial
            self.mailbox.publish(self._initial)
        return self._initial

    def update(self, **changes):
        """Publish a copy of the current snapshot with some fields replaced."""
        with self._lock:
            snapshot = self._current = replace(self._current, **changes)
            self.mailbox.publish(snapshot)
        return snapshot
