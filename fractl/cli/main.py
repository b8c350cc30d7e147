"""
Command-line interface for fractal generation.

This module resolves command-line flags into a RenderConfig, runs the
renderer and saves the resulting image.
"""

import click
import sys
import logging
import time

from .. import __version__
from ..api import FractalRenderer, RenderConfig
from ..core.fractal_types import FractalRegistry, FractalVariant, JULIA_PRESETS
from ..core.math_functions import PlanePoint
from ..exceptions import FractlError
from ..rendering.coloring import get_gradient, list_gradients

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, verbose, quiet):
    """
    fractl - A small fractal renderer.

    Renders Julia, cubic Julia and Mandelbrot images in parallel.
    """
    # Setup logging
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"fractl v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            ctx.exit(0)
    elif ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


@main.command()
@click.option('--fractal', '-f', default='julia', show_default=True,
              help='Fractal type (julia, julia_cubed, mandelbrot)')
@click.option('--iterations', '-i', type=int, default=500, show_default=True,
              help='Amount of iterations')
@click.option('--width', '-w', type=int, default=1920, show_default=True,
              help='Width of output image')
@click.option('--height', '-v', type=int, default=1080, show_default=True,
              help='Height of output image')
@click.option('--output-name', '-o', type=click.Path(dir_okay=False), default='output.png',
              show_default=True, help='Name of output image')
@click.option('--gradient', '-g', default='grayscale', show_default=True,
              help='Gradient to use for the output')
@click.option('--x-constant', '-x', type=float, default=-0.8, show_default=True,
              help='Real part of the complex constant')
@click.option('--y-constant', '-y', type=float, default=0.156, show_default=True,
              help='Imaginary part of the complex constant')
@click.option('--preset', type=click.Choice(sorted(JULIA_PRESETS)),
              help='Named Julia constant (overrides -x/-y)')
@click.option('--zoom', '-z', type=float, default=1.0, show_default=True,
              help='Zoom/magnification to render at')
@click.option('--pan-x', type=float, default=0.0, show_default=True, help='Horizontal pan offset')
@click.option('--pan-y', type=float, default=0.0, show_default=True, help='Vertical pan offset')
@click.option('--workers', type=int, help='Number of worker threads (default: CPU count)')
@click.pass_context
def render(ctx, fractal, iterations, width, height, output_name, gradient,
           x_constant, y_constant, preset, zoom, pan_x, pan_y, workers):
    """Render a single fractal image."""
    try:
        constant = JULIA_PRESETS[preset] if preset else PlanePoint(x_constant, y_constant)

        config = RenderConfig(
            width=width,
            height=height,
            variant=FractalVariant.from_name(fractal),
            constant=constant,
            zoom=zoom,
            pan=PlanePoint(pan_x, pan_y),
            max_iterations=iterations,
            color_map=get_gradient(gradient),
            num_workers=workers,
        )
        renderer = FractalRenderer(config)

        timer = time.perf_counter()
        pixels = renderer.render()
        duration = int((time.perf_counter() - timer) * 1000)
        click.echo(f"calculation duration: {duration} ms")

        renderer.save(pixels, output_name)
        click.echo(f"Saved: {output_name}")

    except (FractlError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)


@main.command()
@click.pass_context
def list_fractals(ctx):
    """List available fractal types, gradients and Julia presets."""
    click.echo("Available fractal types:")
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"  {name}")
        if ctx.obj.get('verbose'):
            click.echo(f"    {description}")

    click.echo("\nGradients:")
    for name in list_gradients():
        click.echo(f"  {name}")

    click.echo("\nJulia set presets:")
    for name, c in JULIA_PRESETS.items():
        click.echo(f"  {name}: c = {complex(c.x, c.y)}")


if __name__ == '__main__':
    main()
