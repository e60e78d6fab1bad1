"""
Startup settings for the fractal viewer.

Defaults are plain module constants. A settings.json next to this file
(or one given on the command line) can override them; it is read once at
startup and never written back.
"""

import json
import math
import os

from .colormaps import DEFAULT_PALETTE, get_palette, list_palette_names
from .logging_setup import get_logger
from .params import (
    DEFAULT_CENTER,
    DEFAULT_DEPTH,
    DEFAULT_HALF_EXTENTS,
    MAX_ASPECT_RATIO,
    MAX_HALF_EXTENT,
    MIN_HALF_EXTENT,
    ViewportSnapshot,
)
from .renderer import WORKER_MULTIPLIER

logger = get_logger(__name__)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULTS = {
    "width": 800,
    "height": 600,
    "depth": DEFAULT_DEPTH,
    "center": list(DEFAULT_CENTER),
    "half_extents": list(DEFAULT_HALF_EXTENTS),
    "palette": DEFAULT_PALETTE,
    "worker_multiplier": WORKER_MULTIPLIER,
}


def read_settings_file(path):
    """
    Read a settings JSON object.

    A missing or unreadable file is not an error: a warning is logged and
    an empty dict returned, so the defaults apply.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load settings from %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: settings must be a JSON object", path)
        return {}
    return data


def _pair(key, value):
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ValueError(f"{key} must be a [x, y] pair, got {value!r}")
    try:
        pair = [float(value[0]), float(value[1])]
    except (TypeError, ValueError):
        raise ValueError(f"{key} must hold two numbers, got {value!r}") from None
    if not all(math.isfinite(v) for v in pair):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return pair


def _positive_int(key, value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None
    if number <= 0:
        raise ValueError(f"{key} must be positive, got {number}")
    return number


def normalise_settings(raw):
    """
    Merge raw settings over DEFAULTS and validate them.

    Raises:
        ValueError: if a value has the wrong type or shape or is out of range
    """
    unknown = sorted(set(raw) - set(DEFAULTS))
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))

    out = dict(DEFAULTS)
    out.update({k: v for k, v in raw.items() if k in DEFAULTS})

    for key in ("width", "height", "depth", "worker_multiplier"):
        out[key] = _positive_int(key, out[key])

    out["center"] = _pair("center", out["center"])
    out["half_extents"] = _pair("half_extents", out["half_extents"])
    half_width, half_height = out["half_extents"]
    if not all(MIN_HALF_EXTENT <= v <= MAX_HALF_EXTENT for v in out["half_extents"]):
        raise ValueError(
            f"half_extents must be within [{MIN_HALF_EXTENT:g}, {MAX_HALF_EXTENT:g}], "
            f"got {out['half_extents']}"
        )
    if max(half_width, half_height) / min(half_width, half_height) > MAX_ASPECT_RATIO:
        raise ValueError(
            f"half_extents aspect ratio exceeds {MAX_ASPECT_RATIO:g}, got {out['half_extents']}"
        )

    if out["palette"] not in list_palette_names():
        raise ValueError(
            f"palette must be one of {list_palette_names()}, got {out['palette']!r}"
        )
    return out


def load_settings(path=None, **overrides):
    """
    Load startup settings.

    Args:
        path: settings.json to read (the packaged one if None)
        **overrides: Values that win over the file, e.g. from the CLI.
            None values are skipped.

    Returns:
        Normalised settings dict with every key of DEFAULTS
    """
    raw = read_settings_file(path or DEFAULT_SETTINGS_PATH)
    raw.update({k: v for k, v in overrides.items() if v is not None})
    return normalise_settings(raw)


def snapshot_from_settings(settings):
    """Build the starting ViewportSnapshot described by settings."""
    snapshot = ViewportSnapshot(
        center_x=settings["center"][0],
        center_y=settings["center"][1],
        half_width=settings["half_extents"][0],
        half_height=settings["half_extents"][1],
        depth=settings["depth"],
    )
    return snapshot.with_palette(get_palette(settings["palette"]))
