"""
Numba JIT compilation backend for high-performance fractal computation.

This module compiles the per-band escape-time kernel used by the parallel
renderer. Each kernel is specialised for one recurrence, so variant dispatch
is paid once at compile time instead of once per pixel. Kernels release the
GIL, which lets a thread pool fill disjoint row bands concurrently.
"""

from functools import lru_cache
from typing import Callable
import logging

import numba
import numpy as np
from numba import njit

from ..core.fractal_types import FractalVariant, escape_function
from ..core.math_functions import pixel_coordinate, plane_scale

logger = logging.getLogger(__name__)
logger.debug(f"Numba available: {numba.__version__}")


def make_band_kernel(escape: Callable) -> Callable:
    """
    Build a compiled kernel that fills a band of rows with escape counts.

    Args:
        escape: Compiled escape function from ``make_escape_function``

    Returns:
        Compiled kernel ``(counts, y_start, width, height, scale, zoom,
        pan_x, pan_y, const_r, const_i, max_iterations)`` writing into
        ``counts``, a view of rows ``y_start .. y_start + len(counts)``.
    """

    @njit(nogil=True, error_model='numpy')
    def band_kernel(counts, y_start, width, height, scale, zoom,
                    pan_x, pan_y, const_r, const_i, max_iterations):
        rows = counts.shape[0]
        for row in range(rows):
            py = pixel_coordinate(float(y_start + row), float(height), scale, pan_y, zoom)
            for x in range(width):
                px = pixel_coordinate(float(x), float(width), scale, pan_x, zoom)
                counts[row, x] = escape(px, py, const_r, const_i, zoom, max_iterations)

    return band_kernel


@lru_cache(maxsize=None)
def _kernel_for(escape: Callable) -> Callable:
    return make_band_kernel(escape)


def get_band_kernel(variant: FractalVariant) -> Callable:
    """Get the band kernel for a variant, compiling it on first use."""
    return _kernel_for(escape_function(variant))


class NumbaAccelerator:
    """Numba-accelerated escape-time computation for row bands."""

    def __init__(self, variant: FractalVariant):
        """
        Resolve and compile the kernel for one variant.

        Args:
            variant: Fractal variant to render
        """
        self.variant = variant
        self.kernel = get_band_kernel(variant)

    def warm_up(self, counts: np.ndarray) -> None:
        """Trigger compilation for the array type of ``counts`` on the calling thread."""
        self.kernel(counts[:0], 0, 0, 1, 2.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1)

    def fill_band(self, counts: np.ndarray, y_start: int, width: int, height: int,
                  zoom: float, pan_x: float, pan_y: float,
                  const_r: float, const_i: float, max_iterations: int) -> None:
        """
        Fill ``counts`` (a view of consecutive image rows) with escape counts.

        Args:
            counts: Writable int64 view of shape (rows, width)
            y_start: Image row index of the first row in ``counts``
            width, height: Full image resolution
            zoom: Zoom factor
            pan_x, pan_y: Pan offset
            const_r, const_i: Julia constant
            max_iterations: Iteration cap
        """
        self.kernel(counts, int(y_start), int(width), int(height),
                    plane_scale(height), float(zoom), float(pan_x), float(pan_y),
                    float(const_r), float(const_i), int(max_iterations))

