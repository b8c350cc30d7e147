"""
Small parallel escape-time fractal renderer.

This library renders Julia, cubic Julia and Mandelbrot images by iterating
a complex recurrence per pixel, filling the image in parallel row bands and
mapping iteration counts to color through a gradient.

Example usage:
    >>> from fractl import RenderConfig, FractalVariant, render
    >>> config = RenderConfig(width=640, height=360, variant=FractalVariant.JULIA)
    >>> pixels = render(config)
    >>> pixels.shape
    (360, 640, 3)
"""

__version__ = "0.1.0"

from fractl.exceptions import FractlError, ConfigurationError, ExportError
from fractl.core.math_functions import PlanePoint, GridSize, modulus_squared, pixel_to_plane
from fractl.core.fractal_types import (
    FractalVariant,
    FractalRegistry,
    JULIA_PRESETS,
    next_iterate,
    escape_iterations,
)
from fractl.rendering.coloring import Gradient, get_gradient
from fractl.rendering.image_output import ImageExporter

# Main API
from fractl.api import FractalRenderer, RenderConfig, render, compute_iterations

__all__ = [
    "render",
    "compute_iterations",
    "FractalRenderer",
    "RenderConfig",
    "FractalVariant",
    "FractalRegistry",
    "JULIA_PRESETS",
    "PlanePoint",
    "GridSize",
    "next_iterate",
    "escape_iterations",
    "modulus_squared",
    "pixel_to_plane",
    "Gradient",
    "get_gradient",
    "ImageExporter",
    "FractlError",
    "ConfigurationError",
    "ExportError",
]
