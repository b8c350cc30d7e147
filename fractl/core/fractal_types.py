"""
Fractal type definitions and recurrence dispatch.

This module defines the supported fractal variants, the recurrence and
seeding rule each one uses, and the variant-aware entry points of the
recurrence engine. Dispatch from a variant to its compiled escape function
happens once and is cached, so hot loops never branch on the variant.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, Union
import logging

from ..exceptions import ConfigurationError
from .math_functions import (
    PlanePoint,
    julia_step,
    julia_cubed_step,
    mandelbrot_step,
    make_escape_function,
)

logger = logging.getLogger(__name__)


class FractalVariant(Enum):
    """Supported escape-time fractals."""

    JULIA = 'julia'
    JULIA_CUBED = 'julia_cubed'
    MANDELBROT = 'mandelbrot'

    @classmethod
    def from_name(cls, name: Union[str, 'FractalVariant']) -> 'FractalVariant':
        """
        Resolve a variant from a user-supplied name.

        Args:
            name: Variant name (case-insensitive) or an existing variant

        Returns:
            Matching FractalVariant
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise ConfigurationError(f"Fractal type must be a name, got {name!r}")

        key = name.strip().lower().replace('-', '_')
        key = _ALIASES.get(key, key)
        for variant in cls:
            if variant.value == key:
                return variant

        available = ', '.join(v.value for v in cls)
        raise ConfigurationError(f"Unknown fractal type '{name}'. Available: {available}")


_ALIASES = {
    'juliacubed': 'julia_cubed',
    'cubed': 'julia_cubed',
}


@dataclass(frozen=True)
class FractalType:
    """Recurrence and seeding rule for one variant."""

    variant: FractalVariant
    name: str
    step: Callable
    seed_at_origin: bool
    description: str


class FractalRegistry:
    """Registry mapping variants to their recurrence definitions."""

    _fractals: Dict[FractalVariant, FractalType] = {
        FractalVariant.JULIA: FractalType(
            variant=FractalVariant.JULIA,
            name='Julia',
            step=julia_step,
            seed_at_origin=False,
            description="Julia set: z_{n+1} = z_n^2 + c, z_0 is the pixel coordinate / zoom",
        ),
        FractalVariant.JULIA_CUBED: FractalType(
            variant=FractalVariant.JULIA_CUBED,
            name='Julia cubed',
            step=julia_cubed_step,
            seed_at_origin=False,
            description="Cubic Julia set: z_{n+1} = z_n^3 + c, z_0 is the pixel coordinate / zoom",
        ),
        FractalVariant.MANDELBROT: FractalType(
            variant=FractalVariant.MANDELBROT,
            name='Mandelbrot',
            step=mandelbrot_step,
            seed_at_origin=True,
            description="Mandelbrot set: z_{n+1} = z_n^2 + c / zoom, z_0 = 0, c is the pixel coordinate",
        ),
    }

    @classmethod
    def get(cls, variant: Union[str, FractalVariant]) -> FractalType:
        """
        Get the recurrence definition for a variant.

        Args:
            variant: Variant or variant name

        Returns:
            FractalType describing the recurrence
        """
        variant = FractalVariant.from_name(variant)
        fractal = cls._fractals.get(variant)
        if fractal is None:
            raise ConfigurationError(f"Fractal type '{variant.value}' has no recurrence wired in")
        return fractal

    @classmethod
    def register(cls, fractal: FractalType) -> None:
        """Register or replace the recurrence used for a variant."""
        if not isinstance(fractal, FractalType):
            raise ConfigurationError("Registered fractals must be FractalType instances")
        cls._fractals[fractal.variant] = fractal
        escape_function.cache_clear()
        logger.info(f"Registered fractal type: {fractal.name}")

    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Get a dictionary of available fractals and their descriptions."""
        return {variant.value: fractal.description for variant, fractal in cls._fractals.items()}


@lru_cache(maxsize=None)
def escape_function(variant: FractalVariant) -> Callable:
    """Compiled escape-time counter for a variant, built once per process."""
    fractal = FractalRegistry.get(variant)
    logger.debug(f"Building escape function for {fractal.name}")
    return make_escape_function(fractal.step, fractal.seed_at_origin)


def next_iterate(current: PlanePoint, constant: PlanePoint,
                 variant: Union[str, FractalVariant], zoom: float = 1.0) -> PlanePoint:
    """
    Compute one recurrence step.

    Args:
        current: Current iterate z_n
        constant: Recurrence constant c
        variant: Fractal variant selecting the recurrence
        zoom: Zoom factor; only the Mandelbrot step uses it

    Returns:
        The next iterate z_{n+1}
    """
    step = FractalRegistry.get(variant).step
    x, y = step(float(current.x), float(current.y),
                float(constant.x), float(constant.y), float(zoom))
    return PlanePoint(float(x), float(y))


def escape_iterations(initial: PlanePoint, constant: PlanePoint, zoom: float,
                      variant: Union[str, FractalVariant], max_iterations: int) -> int:
    """
    Count iterations until the orbit of a sampled point escapes.

    Julia variants seed the orbit at ``initial / zoom`` with the fixed
    ``constant``; Mandelbrot seeds at the origin and uses ``initial`` as the
    constant.

    Args:
        initial: Sampled plane point
        constant: User-supplied constant (ignored by Mandelbrot)
        zoom: Zoom factor
        variant: Fractal variant
        max_iterations: Iteration cap

    Returns:
        Iteration index at which |z|^2 >= 4 first held, or max_iterations
    """
    escape = escape_function(FractalVariant.from_name(variant))
    return int(escape(float(initial.x), float(initial.y),
                      float(constant.x), float(constant.y),
                      float(zoom), int(max_iterations)))


# Predefined interesting Julia set constants
JULIA_PRESETS = {
    'dragon': PlanePoint(-0.75, 0.1),
    'spiral': PlanePoint(-0.4, 0.6),
    'dendrite': PlanePoint(-0.235125, 0.827215),
    'lightning': PlanePoint(-0.8, 0.156),
    'rabbit': PlanePoint(-0.123, 0.745),
    'airplane': PlanePoint(-1.25, 0.0),
    'san_marco': PlanePoint(-0.75, 0.0),
    'siegel_disk': PlanePoint(-0.391, -0.587),
}
