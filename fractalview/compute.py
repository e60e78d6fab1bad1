"""
Mandelbrot computation functions using Numba JIT compilation.

This module contains all the performance-critical computation functions
that are JIT-compiled for speed. These functions handle:
- Mapping pixels to complex-plane coordinates
- The cardioid / period-2 bulb membership shortcut
- Escape-time iteration of z² + c
- Smooth (continuous) iteration count and sinusoid coloring
- Filling an RGBA buffer, either a column range at a time or sequentially

Every function is compiled with nogil=True so column ranges can be filled
from several Python threads at once.
"""

import math

import numpy as np
from numba import jit

ESCAPE_RADIUS_SQ = 4.0
LOG2 = math.log(2.0)


@jit(nopython=True, nogil=True, cache=True)
def plane_coordinate(x, y, width, height, center_x, center_y, half_width, half_height):
    """Map pixel (x, y) of a width x height raster to (c_real, c_imag)."""
    c_real = x / width * (half_width * 2) + center_x - half_width
    c_imag = y / height * (half_height * 2) + center_y - half_height
    return c_real, c_imag


@jit(nopython=True, nogil=True, cache=True)
def in_main_bulbs(c_real, c_imag):
    """
    Check whether c lies in the main cardioid or the period-2 bulb.

    Points that pass are members of the set and need no iteration.
    """
    ci2 = c_imag * c_imag
    q = (c_real * c_real - 0.5 * c_real + 0.0625) + ci2
    if q * (q + (c_real - 0.25)) < ci2 / 4:
        return True
    return c_real * c_real + 2 * c_real + 1 + ci2 < 0.0625


@jit(nopython=True, nogil=True, cache=True)
def escape_time(c_real, c_imag, depth):
    """
    Iterate z² + c from z = 0 until |z|² > 4 or depth iterations.

    Points caught by in_main_bulbs are not iterated at all and report
    0 iterations. Any other point runs the loop at least once, since
    z starts at the origin.

    Returns:
        (iterations, z_real, z_imag) at the moment the loop stopped.
        iterations == depth means the point did not escape.
    """
    if in_main_bulbs(c_real, c_imag):
        return 0, 0.0, 0.0

    z_real = 0.0
    z_imag = 0.0
    total = 0.0  # |z|²
    sub = 0.0    # Re(z²)
    iteration = 0

    while total <= ESCAPE_RADIUS_SQ and iteration < depth:
        z_imag = 2 * z_real * z_imag + c_imag
        z_real = sub + c_real
        zr2 = z_real * z_real
        zi2 = z_imag * z_imag
        total = zr2 + zi2
        sub = zr2 - zi2
        iteration += 1

    return iteration, z_real, z_imag


@jit(nopython=True, nogil=True, cache=True)
def continuous_iteration(iteration, z_real, z_imag):
    """
    Smooth iteration count for an escaped point.

    Removes the banding between integer iteration counts; only valid
    when |z| > 2.
    """
    modulus = math.sqrt(z_real * z_real + z_imag * z_imag)
    return iteration + 1 - math.log(math.log(modulus) / 2 / LOG2) / LOG2


@jit(nopython=True, nogil=True, cache=True)
def channel_value(ci, freq, phase):
    """Sinusoid color channel, truncated to 0..255."""
    value = int(math.sin(ci * freq + phase) * 127 + 128)
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


@jit(nopython=True, nogil=True, cache=True)
def pixel_rgba(x, y, width, height, center_x, center_y, half_width, half_height,
               depth, phase, freq):
    """
    Color of pixel (x, y) as an (r, g, b, a) tuple.

    Members of the set (bulb shortcut or no escape within depth) are
    opaque black.

    Args:
        x, y: Pixel position
        width, height: Raster dimensions
        center_x, center_y, half_width, half_height: Viewport in the plane
        depth: Maximum iteration count
        phase, freq: float64 arrays of 3 sinusoid coefficients (r, g, b)
    """
    c_real, c_imag = plane_coordinate(x, y, width, height,
                                      center_x, center_y, half_width, half_height)
    iteration, z_real, z_imag = escape_time(c_real, c_imag, depth)
    if iteration == 0 or iteration >= depth:
        return 0, 0, 0, 255

    ci = continuous_iteration(iteration, z_real, z_imag)
    return (channel_value(ci, freq[0], phase[0]),
            channel_value(ci, freq[1], phase[1]),
            channel_value(ci, freq[2], phase[2]),
            255)


@jit(nopython=True, nogil=True, cache=True)
def render_columns(out, start, end, center_x, center_y, half_width, half_height,
                   depth, phase, freq):
    """
    Fill columns [start, end) of an RGBA buffer in place.

    Only those columns are written, so disjoint ranges of the same buffer
    can be filled concurrently.

    Args:
        out: (height, width, 4) uint8 array, modified in place
        start, end: Half-open column range
        center_x, center_y, half_width, half_height: Viewport in the plane
        depth: Maximum iteration count
        phase, freq: float64 arrays of 3 sinusoid coefficients (r, g, b)
    """
    height, width = out.shape[0], out.shape[1]
    for y in range(height):
        for x in range(start, end):
            r, g, b, a = pixel_rgba(x, y, width, height, center_x, center_y,
                                    half_width, half_height, depth, phase, freq)
            out[y, x, 0] = r
            out[y, x, 1] = g
            out[y, x, 2] = b
            out[y, x, 3] = a


@jit(nopython=True, nogil=True, cache=True)
def render_sequential(out, center_x, center_y, half_width, half_height,
                      depth, phase, freq):
    """Fill a whole RGBA buffer in place, row by row."""
    height, width = out.shape[0], out.shape[1]
    for y in range(height):
        for x in range(width):
            r, g, b, a = pixel_rgba(x, y, width, height, center_x, center_y,
                                    half_width, half_height, depth, phase, freq)
            out[y, x, 0] = r
            out[y, x, 1] = g
            out[y, x, 2] = b
            out[y, x, 3] = a


def warmup_jit():
    """
    Warm up JIT compilation with a tiny dummy buffer.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first actual frame.
    """
    dummy = np.zeros((4, 4, 4), dtype=np.uint8)
    phase = np.array([4.0, 2.0, 1.0], dtype=np.float64)
    freq = np.array([0.15, 0.15, 0.10], dtype=np.float64)
    render_sequential(dummy, -0.75, 0.0, 1.5, 1.2, 10, phase, freq)
    render_columns(dummy, 0, 4, -0.75, 0.0, 1.5, 1.2, 10, phase, freq)
