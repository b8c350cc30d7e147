import numpy as np
import pytest

from fractl import FractalVariant, GridSize, PlanePoint, escape_iterations, pixel_to_plane
from fractl.acceleration.parallel import ParallelRenderer, create_row_bands, get_optimal_worker_count

LIGHTNING = PlanePoint(-0.8, 0.156)
ORIGIN = PlanePoint(0.0, 0.0)


def gray(t):
    level = int(round(t * 255))
    return (level, level, level)


def test_row_bands_cover_every_row_once():
    bands = create_row_bands(37, rows_per_band=8)
    rows = [y for band in bands for y in range(band.y_start, band.y_end)]
    assert rows == list(range(37))
    assert [band.rows for band in bands] == [8, 8, 8, 8, 5]
    assert [band.band_id for band in bands] == list(range(5))


def test_row_bands_for_empty_image():
    assert create_row_bands(0) == []


def test_row_bands_reject_non_positive_height():
    with pytest.raises(ValueError):
        create_row_bands(10, rows_per_band=0)


def test_worker_count_is_positive():
    assert get_optimal_worker_count() >= 1
    assert ParallelRenderer(num_workers=0).num_workers == 1


@pytest.mark.parametrize("variant", list(FractalVariant))
def test_counts_match_scalar_engine(variant):
    grid = GridSize(7, 5)
    zoom, pan, cap = 1.3, PlanePoint(-0.2, 0.1), 60
    counts = ParallelRenderer(num_workers=3, rows_per_band=2).compute_iterations(
        grid.width, grid.height, variant, LIGHTNING, zoom, pan, cap)

    assert counts.shape == (grid.height, grid.width)
    for y in range(grid.height):
        for x in range(grid.width):
            point = pixel_to_plane(x, y, grid, zoom, pan)
            assert counts[y, x] == escape_iterations(point, LIGHTNING, zoom, variant, cap)


def test_julia_center_outlasts_corners():
    counts = ParallelRenderer(num_workers=2, rows_per_band=1).compute_iterations(
        4, 4, FractalVariant.JULIA, LIGHTNING, 1.0, ORIGIN, 500)

    corners = [counts[0, 0], counts[0, 3], counts[3, 0], counts[3, 3]]
    # Pixel (2, 2) is the origin; (1, 2) and (2, 1) are its nearest neighbours.
    nearest_origin = [counts[2, 2], counts[2, 1], counts[1, 2]]
    assert min(nearest_origin) > max(corners)
    assert counts[1:3, 1:3].sum() > sum(corners)


def test_mandelbrot_origin_pixel_is_capped():
    counts = ParallelRenderer().compute_iterations(
        6, 4, FractalVariant.MANDELBROT, LIGHTNING, 2.5, ORIGIN, 80)
    assert counts[2, 3] == 80


@pytest.mark.parametrize("variant", list(FractalVariant))
def test_render_is_independent_of_scheduling(variant):
    args = (33, 21, variant, LIGHTNING, 1.0, PlanePoint(0.1, 0.0), 120, gray)
    reference = ParallelRenderer(num_workers=1, rows_per_band=21).render(*args)

    for workers, rows in [(2, 1), (4, 3), (8, 16)]:
        pixels = ParallelRenderer(num_workers=workers, rows_per_band=rows).render(*args)
        assert np.array_equal(pixels, reference)


@pytest.mark.parametrize("width, height", [(0, 0), (5, 0), (0, 5)])
def test_empty_grid_renders_empty_buffer(width, height):
    pixels = ParallelRenderer().render(width, height, FractalVariant.JULIA, LIGHTNING,
                                       1.0, ORIGIN, 10, gray)
    assert pixels.shape == (height, width, 3)
    assert pixels.size == 0


def test_color_map_errors_propagate():
    def broken(t):
        raise RuntimeError("palette failure")

    with pytest.raises(RuntimeError, match="palette failure"):
        ParallelRenderer(num_workers=2, rows_per_band=2).render(
            8, 8, FractalVariant.JULIA, LIGHTNING, 1.0, ORIGIN, 20, broken)
