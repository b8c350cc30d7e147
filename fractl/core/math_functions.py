"""
Core mathematical functions for fractal iteration.

This module provides the scalar recurrences, the escape test and the
pixel-to-plane mapping used by every renderer. The numeric kernels are
compiled with Numba so the same code serves both single-point queries from
Python and the per-band loops of the parallel renderer.
"""

import math
from typing import Callable, NamedTuple

from numba import njit

# Escape is declared once |z| > 2, compared squared to avoid a square root.
ESCAPE_RADIUS_SQ = 4.0


class PlanePoint(NamedTuple):
    """A point on the complex plane as (real, imaginary)."""
    x: float
    y: float


class GridSize(NamedTuple):
    """Pixel dimensions of a render."""
    width: int
    height: int


@njit(cache=True, error_model='numpy')
def abs_squared(x, y):
    """Squared modulus of x + iy."""
    return x * x + y * y


@njit(cache=True, error_model='numpy')
def julia_step(zr, zi, cr, ci, zoom):
    # z = z^2 + c
    return zr * zr - zi * zi + cr, 2.0 * zr * zi + ci


@njit(cache=True, error_model='numpy')
def julia_cubed_step(zr, zi, cr, ci, zoom):
    # z^3 = (a+bi)^3 = a^3 - 3ab^2 + i(3a^2b - b^3)
    new_zr = zr * zr * zr - 3.0 * zr * zi * zi + cr
    new_zi = 3.0 * zr * zr * zi - zi * zi * zi + ci
    return new_zr, new_zi


@njit(cache=True, error_model='numpy')
def mandelbrot_step(zr, zi, cr, ci, zoom):
    # The constant is rescaled by zoom on every step, not in the mapping.
    return zr * zr - zi * zi + cr / zoom, 2.0 * zr * zi + ci / zoom


@njit(cache=True, error_model='numpy')
def pixel_coordinate(index, extent, scale, pan, zoom):
    """Map one pixel index along an axis of ``extent`` pixels to the plane."""
    return (index - extent / 2.0) * scale + pan * zoom


def plane_scale(height: int) -> float:
    """Plane units per pixel; the vertical axis always spans [-1, 1)."""
    return 2.0 / height


def make_escape_function(step: Callable, seed_at_origin: bool) -> Callable:
    """
    Build a compiled escape-time counter around a recurrence step.

    Args:
        step: Compiled step function ``(zr, zi, cr, ci, zoom) -> (zr, zi)``
        seed_at_origin: If True the sampled point becomes the constant and
            iteration starts at 0 (Mandelbrot roles); otherwise the sampled
            point, divided by zoom, is the seed (Julia roles).

    Returns:
        Compiled function ``(px, py, const_r, const_i, zoom, max_iterations)``
        returning the escape iteration count.
    """

    @njit(nogil=True, error_model='numpy')
    def escape_time(px, py, const_r, const_i, zoom, max_iterations):
        if seed_at_origin:
            zr = 0.0
            zi = 0.0
            cr = px
            ci = py
        else:
            zr = px / zoom
            zi = py / zoom
            cr = const_r
            ci = const_i

        iteration = 0
        # NaN fails the comparison too, so divergence always terminates here.
        while abs_squared(zr, zi) < ESCAPE_RADIUS_SQ and iteration < max_iterations:
            zr, zi = step(zr, zi, cr, ci, zoom)
            iteration += 1

        return iteration

    return escape_time


def modulus_squared(z: PlanePoint) -> float:
    """Squared modulus of a plane point, used for the escape test."""
    return float(abs_squared(float(z.x), float(z.y)))


def pixel_to_plane(x: int, y: int, grid: GridSize, zoom: float = 1.0,
                   pan: PlanePoint = PlanePoint(0.0, 0.0)) -> PlanePoint:
    """
    Convert pixel coordinates to the sampled plane point.

    Both axes share the scale derived from the grid height, so the origin
    sits at the image center and wide images show a wider slice of the plane.
    """
    scale = plane_scale(grid.height)
    return PlanePoint(
        float(pixel_coordinate(float(x), float(grid.width), scale, float(pan.x), float(zoom))),
        float(pixel_coordinate(float(y), float(grid.height), scale, float(pan.y), float(zoom))),
    )


def is_finite_point(z: PlanePoint) -> bool:
    """Check that both coordinates are finite."""
    return math.isfinite(z.x) and math.isfinite(z.y)
