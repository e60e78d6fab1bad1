"""
Palette definitions for Mandelbrot coloring.

Escaped points are colored with one sinusoid per RGB channel:

    channel = sin(ci * freq + phase) * 127 + 128

where ci is the continuous iteration count. A palette is just the three
phases and three frequencies of those sinusoids.

To add a new palette:
1. Define a create_palette_xxx() function that returns a Palette
2. Add it to the PALETTES dictionary at the bottom of this file
"""

from typing import NamedTuple, Tuple

import numpy as np


class Palette(NamedTuple):
    """Per-channel sinusoid coefficients, each an (r, g, b) tuple."""

    phase: Tuple[float, float, float]
    freq: Tuple[float, float, float]

    def as_arrays(self):
        """Return (phase, freq) as float64 arrays for the compiled kernels."""
        return (np.asarray(self.phase, dtype=np.float64),
                np.asarray(self.freq, dtype=np.float64))


def create_palette_classic():
    """
    Classic palette: deep blue bands fading through orange to pale yellow.

    These are the startup coefficients of the viewer.
    """
    return Palette(phase=(4.0, 2.0, 1.0), freq=(0.15, 0.15, 0.10))


def create_palette_ember():
    """Ember palette: warm reds and oranges, slow blue channel."""
    return Palette(phase=(0.0, 1.2, 3.0), freq=(0.10, 0.08, 0.03))


def create_palette_ice():
    """Ice palette: cyan and white bands with a suppressed red channel."""
    return Palette(phase=(3.5, 0.5, 0.0), freq=(0.05, 0.12, 0.12))


def create_palette_psychedelic():
    """
    Psychedelic palette: fast, out-of-phase channels.

    High frequencies make every iteration band visible, handy for
    inspecting the raw escape structure.
    """
    return Palette(phase=(0.0, 2.094, 4.189), freq=(0.45, 0.45, 0.45))


def create_palette_grayscale():
    """Grayscale palette: identical channels."""
    return Palette(phase=(0.0, 0.0, 0.0), freq=(0.12, 0.12, 0.12))


# Registry of all available palettes.
# Keys are display names, values are factory functions.
PALETTES = {
    'Classic': create_palette_classic,
    'Ember': create_palette_ember,
    'Ice': create_palette_ice,
    'Psychedelic': create_palette_psychedelic,
    'Grayscale': create_palette_grayscale,
}

DEFAULT_PALETTE = 'Classic'


def get_palette(name):
    """
    Get a palette by name.

    Args:
        name: Key from PALETTES dictionary

    Returns:
        Palette

    Raises:
        KeyError if name not found
    """
    return PALETTES[name]()


def get_default_palette():
    """Get the default palette (Classic)."""
    return create_palette_classic()


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())
