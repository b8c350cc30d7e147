"""
Main API classes for fractal generation.

This module provides the high-level interface: the render configuration,
the ``render`` entry point that turns a configuration into a pixel buffer,
and a FractalRenderer class that also persists the result.
"""

import math
import numpy as np
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from pathlib import Path
import logging
import time

from .exceptions import ConfigurationError
from .core.fractal_types import FractalVariant, FractalRegistry
from .core.math_functions import GridSize, PlanePoint, is_finite_point
from .rendering.coloring import ColorMap, get_gradient
from .rendering.image_output import ImageExporter, RenderMetadata
from .acceleration.parallel import ParallelRenderer

logger = logging.getLogger(__name__)


def _as_point(value) -> PlanePoint:
    """Coerce any (x, y) pair to a PlanePoint of floats."""
    x, y = value
    return PlanePoint(float(x), float(y))


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""

    # Image parameters
    width: int = 1920
    height: int = 1080

    # Fractal parameters
    variant: FractalVariant = FractalVariant.JULIA
    constant: PlanePoint = PlanePoint(-0.8, 0.156)
    zoom: float = 1.0
    pan: PlanePoint = PlanePoint(0.0, 0.0)
    max_iterations: int = 500

    # Coloring
    color_map: ColorMap = field(default_factory=lambda: get_gradient('grayscale'))

    # Performance
    num_workers: Optional[int] = None
    rows_per_band: int = 16

    @property
    def grid(self) -> GridSize:
        return GridSize(self.width, self.height)

    def validate(self) -> None:
        """Check the invariants the renderer depends on."""
        for name in ('width', 'height'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be non-negative")

        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, (int, np.integer)):
            raise ConfigurationError("max_iterations must be an integer")
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")

        if not isinstance(self.zoom, (int, float, np.number)) or isinstance(self.zoom, bool):
            raise ConfigurationError("zoom must be a number")
        if not math.isfinite(self.zoom) or self.zoom <= 0:
            raise ConfigurationError("zoom must be a finite positive number")

        for name in ('constant', 'pan'):
            try:
                point = _as_point(getattr(self, name))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{name} must be a pair of finite numbers") from e
            if not is_finite_point(point):
                raise ConfigurationError(f"{name} must be a pair of finite numbers")

        # Fails for unknown variants or ones with no recurrence registered
        FractalRegistry.get(self.variant)

        if not callable(self.color_map):
            raise ConfigurationError("color_map must be callable")

        if self.num_workers is not None and self.num_workers < 1:
            raise ConfigurationError("num_workers must be >= 1")
        if self.rows_per_band < 1:
            raise ConfigurationError("rows_per_band must be >= 1")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe summary of the configuration."""
        return {
            'width': self.width,
            'height': self.height,
            'variant': FractalVariant.from_name(self.variant).value,
            'constant': list(_as_point(self.constant)),
            'zoom': self.zoom,
            'pan': list(_as_point(self.pan)),
            'max_iterations': self.max_iterations,
            'color_map': getattr(self.color_map, 'name', repr(self.color_map)),
        }


def _renderer_for(config: RenderConfig) -> ParallelRenderer:
    return ParallelRenderer(config.num_workers, config.rows_per_band)


def render(config: RenderConfig) -> np.ndarray:
    """
    Render a fractal to an RGB pixel buffer.

    Args:
        config: Render configuration

    Returns:
        uint8 array of shape (height, width, 3), row-major
    """
    config.validate()
    variant = FractalVariant.from_name(config.variant)
    grid = config.grid
    return _renderer_for(config).render(
        grid.width, grid.height, variant,
        _as_point(config.constant), float(config.zoom), _as_point(config.pan),
        int(config.max_iterations), config.color_map,
    )


def compute_iterations(config: RenderConfig) -> np.ndarray:
    """
    Compute raw escape counts without coloring.

    Args:
        config: Render configuration (the color map is not used)

    Returns:
        int64 array of shape (height, width)
    """
    config.validate()
    variant = FractalVariant.from_name(config.variant)
    grid = config.grid
    return _renderer_for(config).compute_iterations(
        grid.width, grid.height, variant,
        _as_point(config.constant), float(config.zoom), _as_point(config.pan),
        int(config.max_iterations),
    )


class FractalRenderer:
    """Render a configuration and optionally save the result."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()
        self.image_exporter = ImageExporter()
        self.last_render_time = 0.0

        logger.info(f"FractalRenderer initialized: {self.config.width}x{self.config.height}, "
                    f"{FractalVariant.from_name(self.config.variant).value}")

    def render(self, output_path: Optional[Path] = None) -> np.ndarray:
        """
        Render the configured fractal.

        Args:
            output_path: Optional output file path

        Returns:
            uint8 RGB pixel buffer
        """
        start_time = time.time()
        pixels = render(self.config)
        self.last_render_time = time.time() - start_time

        if output_path:
            self.save(pixels, output_path)

        return pixels

    def save(self, pixels: np.ndarray, output_path: Path) -> Path:
        """Save a buffer produced from this renderer's configuration."""
        summary = self.config.to_dict()
        metadata = RenderMetadata(
            fractal_type=summary['variant'],
            resolution=tuple(self.config.grid),
            constant=tuple(summary['constant']),
            zoom=float(self.config.zoom),
            pan=tuple(summary['pan']),
            max_iterations=int(self.config.max_iterations),
            gradient=summary['color_map'],
            render_time_seconds=self.last_render_time,
            num_workers=_renderer_for(self.config).num_workers,
        )
        return self.image_exporter.save_image(pixels, Path(output_path), metadata)
