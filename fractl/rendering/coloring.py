"""
Gradient palettes and color mapping for fractal rendering.

This module provides the color-mapping functions handed to the renderer:
linear gradients between color stops, named presets (including palettes
sampled from matplotlib colormaps), and the routine that turns a band of
iteration counts into RGB pixels.
"""

import numpy as np
from typing import Callable, Dict, List, Sequence, Tuple
import logging

import matplotlib

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
ColorMap = Callable[[float], RGB]


class Gradient:
    """Linear gradient between evenly spaced color stops."""

    def __init__(self, colors: Sequence[Tuple[float, float, float]], name: str = "Custom"):
        """
        Initialize gradient.

        Args:
            colors: Color stops as (r, g, b) floats in 0-1
            name: Human-readable name for the gradient
        """
        self.name = name
        self.colors = np.array(colors, dtype=np.float64)

        if self.colors.ndim != 2 or self.colors.shape[1] != 3:
            raise ConfigurationError("Gradient colors must be (r, g, b) triples")
        if len(self.colors) < 2:
            raise ConfigurationError("Gradient must contain at least 2 colors")
        if np.any(self.colors < 0.0) or np.any(self.colors > 1.0):
            raise ConfigurationError("RGB components must be between 0 and 1")

    def at(self, t: float) -> Tuple[float, float, float]:
        """Interpolated color at position t, clamped to 0-1."""
        t = min(max(float(t), 0.0), 1.0)

        # Map t to color segments
        segments = len(self.colors) - 1
        position = t * segments
        index = min(int(position), segments - 1)
        local_t = position - index

        start = self.colors[index]
        end = self.colors[index + 1]
        r, g, b = start + local_t * (end - start)
        return (float(r), float(g), float(b))

    def __call__(self, t: float) -> RGB:
        """8-bit RGB color at position t."""
        r, g, b = self.at(t)
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    def __repr__(self) -> str:
        return f"Gradient({self.name!r}, stops={len(self.colors)})"

    @classmethod
    def from_matplotlib(cls, cmap_name: str, n_samples: int = 64) -> 'Gradient':
        """Create gradient by sampling a matplotlib colormap."""
        cmap = matplotlib.colormaps[cmap_name]
        samples = cmap(np.linspace(0.0, 1.0, n_samples))
        return cls(samples[:, :3], name=cmap_name)


def _grayscale() -> Gradient:
    return Gradient([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)], name='grayscale')


def _inverted_grayscale() -> Gradient:
    return Gradient([(1.0, 1.0, 1.0), (0.0, 0.0, 0.0)], name='inverted_grayscale')


GRADIENTS: Dict[str, Callable[[], Gradient]] = {
    'grayscale': _grayscale,
    'inverted_grayscale': _inverted_grayscale,
    'rainbow': lambda: Gradient.from_matplotlib('rainbow'),
    'inferno': lambda: Gradient.from_matplotlib('inferno'),
    'viridis': lambda: Gradient.from_matplotlib('viridis'),
}


def list_gradients() -> List[str]:
    """Names accepted by get_gradient."""
    return list(GRADIENTS.keys())


def get_gradient(name: str) -> Gradient:
    """
    Build a named gradient.

    Args:
        name: Gradient name (case-insensitive)

    Returns:
        Gradient instance usable as a color map
    """
    factory = GRADIENTS.get(name.strip().lower())
    if factory is None:
        choices = ', '.join(GRADIENTS.keys())
        raise ConfigurationError(f"Unknown gradient '{name}'. Please choose one of: {choices}")
    return factory()


def apply_color_map(counts: np.ndarray, max_iterations: int, color_map: ColorMap) -> np.ndarray:
    """
    Convert iteration counts to RGB pixels.

    The color map is evaluated once per distinct count, at
    ``count / max_iterations``, and the results are scattered back to pixels.

    Args:
        counts: Integer iteration counts of shape (rows, width)
        max_iterations: Iteration cap used for normalization
        color_map: Function from a normalized value in [0, 1] to (r, g, b)

    Returns:
        uint8 array of shape (rows, width, 3)
    """
    if counts.size == 0:
        return np.zeros(counts.shape + (3,), dtype=np.uint8)

    values, inverse = np.unique(counts, return_inverse=True)
    lut = np.array([color_map(float(v) / max_iterations) for v in values], dtype=np.uint8)
    lut = lut.reshape(len(values), -1)

    if lut.shape[1] != 3:
        raise ValueError("Color map must return (r, g, b) triples")

    return lut[inverse.reshape(counts.shape)]
