"""
Thread-pool backend for parallel fractal computation.

This module splits an image into disjoint bands of rows and fills them
concurrently. The output arrays are allocated once; each band task receives
views of its own rows only, so writes never overlap and no lock is needed.
The compiled kernels release the GIL, which is what makes threads scale here.
"""

import numpy as np
from typing import List, Optional
import logging
import os
import time
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core.fractal_types import FractalVariant
from ..core.math_functions import PlanePoint
from ..rendering.coloring import ColorMap, apply_color_map
from .numba_backend import NumbaAccelerator

logger = logging.getLogger(__name__)


@dataclass
class RowBand:
    """A contiguous range of image rows handled by one task."""
    band_id: int
    y_start: int
    y_end: int

    @property
    def rows(self) -> int:
        return self.y_end - self.y_start


def create_row_bands(height: int, rows_per_band: int = 16) -> List[RowBand]:
    """
    Partition image rows into consecutive bands.

    Args:
        height: Total image height
        rows_per_band: Target band height (the last band may be shorter)

    Returns:
        List of RowBand objects covering every row exactly once
    """
    if rows_per_band < 1:
        raise ValueError("rows_per_band must be >= 1")

    bands = []
    for band_id, y in enumerate(range(0, height, rows_per_band)):
        bands.append(RowBand(band_id=band_id, y_start=y, y_end=min(y + rows_per_band, height)))

    logger.debug(f"Created {len(bands)} bands of up to {rows_per_band} rows")
    return bands


def get_optimal_worker_count() -> int:
    """One worker per available CPU."""
    try:
        return max(1, len(os.sched_getaffinity(0)))
    except AttributeError:
        return max(1, os.cpu_count() or 1)


class ParallelRenderer:
    """Row-band parallel escape-time renderer."""

    def __init__(self, num_workers: Optional[int] = None, rows_per_band: int = 16):
        """
        Initialize parallel renderer.

        Args:
            num_workers: Number of worker threads (None for CPU count)
            rows_per_band: Rows per task
        """
        if num_workers is None:
            self.num_workers = get_optimal_worker_count()
        else:
            self.num_workers = max(1, num_workers)

        self.rows_per_band = rows_per_band
        logger.debug(f"Parallel renderer: {self.num_workers} workers, {rows_per_band} rows per band")

    def compute_iterations(self, width: int, height: int, variant: FractalVariant,
                           constant: PlanePoint, zoom: float, pan: PlanePoint,
                           max_iterations: int) -> np.ndarray:
        """
        Compute escape counts for every pixel.

        Returns:
            int64 array of shape (height, width)
        """
        counts = np.empty((height, width), dtype=np.int64)
        self._run(counts, None, width, height, variant, constant, zoom, pan,
                  max_iterations, None)
        return counts

    def render(self, width: int, height: int, variant: FractalVariant,
               constant: PlanePoint, zoom: float, pan: PlanePoint,
               max_iterations: int, color_map: ColorMap) -> np.ndarray:
        """
        Compute and color every pixel.

        Returns:
            uint8 array of shape (height, width, 3)
        """
        counts = np.empty((height, width), dtype=np.int64)
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        self._run(counts, pixels, width, height, variant, constant, zoom, pan,
                  max_iterations, color_map)
        return pixels

    def _run(self, counts: np.ndarray, pixels: Optional[np.ndarray], width: int, height: int,
             variant: FractalVariant, constant: PlanePoint, zoom: float, pan: PlanePoint,
             max_iterations: int, color_map: Optional[ColorMap]) -> None:
        if width == 0 or height == 0:
            return

        start_time = time.time()

        accelerator = NumbaAccelerator(variant)
        accelerator.warm_up(counts)

        bands = create_row_bands(height, self.rows_per_band)

        def process_band(band: RowBand) -> float:
            band_start = time.time()
            band_counts = counts[band.y_start:band.y_end]
            accelerator.fill_band(band_counts, band.y_start, width, height, zoom,
                                  pan.x, pan.y, constant.x, constant.y, max_iterations)
            if pixels is not None:
                pixels[band.y_start:band.y_end] = apply_color_map(band_counts, max_iterations, color_map)
            return time.time() - band_start

        logger.info(f"Processing {len(bands)} bands with {self.num_workers} workers")

        busy_time = 0.0
        with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
            futures = [executor.submit(process_band, band) for band in bands]

            completed = 0
            step = max(1, len(bands) // 10)
            for future in as_completed(futures):
                busy_time += future.result()
                completed += 1

                if completed % step == 0:
                    progress = (completed / len(bands)) * 100
                    logger.debug(f"Completed {completed}/{len(bands)} bands ({progress:.1f}%)")

        total_time = time.time() - start_time
        logger.info(f"Parallel rendering complete: {total_time:.2f}s total, "
                    f"{busy_time:.2f}s in workers")
