from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Tuple

import numba
import numpy as np
from numba import njit, prange

from .camera import CameraState, ViewportDimensions
from .scheduling import DynamicScheduler, StaticScheduler, total_chunks

__all__ = [
    "SCHEDULES",
    "allocate_grid",
    "compute_chunk",
    "compute_iterations",
    "escape_time",
    "grid_constants",
]

SCHEDULES = ("serial", "static", "dynamic", "parallel")


@njit(nogil=True)
def escape_time(cx: float, cy: float, max_iterations: int) -> int:
    zx = 0.0
    zy = 0.0
    n = 0
    while zx * zx + zy * zy <= 4.0 and n < max_iterations:
        zx, zy = zx * zx - zy * zy + cx, 2.0 * zx * zy + cy
        n += 1
    return n


@njit(nogil=True)
def _fill_rows(
    out: np.ndarray,
    start_row: int,
    end_row: int,
    rows: int,
    columns: int,
    real: float,
    imag: float,
    scale: float,
    y_step: float,
    max_iterations: int,
) -> None:
    half_c = columns // 2
    half_r = rows // 2
    for row in range(start_row, end_row):
        cy = imag + (half_r - row) * y_step
        for col in range(columns):
            cx = real + (col - half_c) * scale
            out[row - start_row, col] = escape_time(cx, cy, max_iterations)


@njit(parallel=True)
def _compute_grid_parallel(
    rows: int,
    columns: int,
    real: float,
    imag: float,
    scale: float,
    y_step: float,
    max_iterations: int,
) -> np.ndarray:
    grid = np.zeros((rows, columns), dtype=np.uint32)
    half_c = columns // 2
    half_r = rows // 2
    for row in prange(rows):
        cy = imag + (half_r - row) * y_step
        for col in range(columns):
            cx = real + (col - half_c) * scale
            grid[row, col] = escape_time(cx, cy, max_iterations)
    return grid


def allocate_grid(dims: ViewportDimensions) -> np.ndarray:
    return np.zeros(dims.shape, dtype=np.uint32)


def grid_constants(camera: CameraState) -> Tuple[float, float, float, float]:
    real, imag = camera.center
    return real, imag, camera.scale, camera.y_step


def _chunk_bounds(dims: ViewportDimensions, chunk_size: int, chunk_id: int) -> Tuple[int, int]:
    start_row = min(chunk_id * chunk_size, dims.rows)
    return start_row, min(start_row + chunk_size, dims.rows)


def _fill_chunk(
    out: np.ndarray,
    camera: CameraState,
    dims: ViewportDimensions,
    start_row: int,
    end_row: int,
) -> None:
    """Write frame rows ``[start_row, end_row)`` into ``out``, which holds just those rows."""
    if start_row < end_row:
        real, imag, scale, y_step = grid_constants(camera)
        _fill_rows(
            out,
            start_row,
            end_row,
            dims.rows,
            dims.columns,
            real,
            imag,
            scale,
            y_step,
            camera.max_iterations,
        )


def compute_chunk(
    camera: CameraState,
    dims: ViewportDimensions,
    chunk_size: int,
    chunk_id: int,
) -> Tuple[int, int, np.ndarray]:
    """Compute rows ``[chunk_id * chunk_size, +chunk_size)`` of the frame."""
    start_row, end_row = _chunk_bounds(dims, chunk_size, chunk_id)
    chunk = np.zeros((end_row - start_row, dims.columns), dtype=np.uint32)
    _fill_chunk(chunk, camera, dims, start_row, end_row)
    return start_row, end_row, chunk


def compute_iterations(
    camera: CameraState,
    dims: ViewportDimensions,
    schedule: str = "serial",
    chunk_size: int = 8,
    workers: int = 1,
) -> np.ndarray:
    """Escape-time counts for every cell, shape ``(rows, columns)``.

    Every schedule returns only after all chunks are written, so callers
    never see a partially computed grid.
    """
    if schedule not in SCHEDULES:
        raise ValueError(f"Unknown schedule {schedule!r}, expected one of {SCHEDULES}")
    if dims.is_empty:
        return allocate_grid(dims)

    if schedule == "parallel":
        return _compute_parallel(camera, dims, workers)

    grid = allocate_grid(dims)
    n_chunks = total_chunks(dims.rows, chunk_size)

    def fill(chunk_id: int) -> None:
        start_row, end_row = _chunk_bounds(dims, chunk_size, chunk_id)
        _fill_chunk(grid[start_row:end_row], camera, dims, start_row, end_row)

    if schedule == "serial" or workers <= 1:
        for chunk_id in range(n_chunks):
            fill(chunk_id)
        return grid

    if schedule == "static":
        scheduler = StaticScheduler(n_chunks, workers)

        def work(worker: int) -> int:
            chunk_ids = scheduler.chunks_for_worker(worker)
            for chunk_id in chunk_ids:
                fill(chunk_id)
            return len(chunk_ids)

    else:
        dynamic = DynamicScheduler(n_chunks)

        def work(worker: int) -> int:
            done = 0
            chunk_id = dynamic.request_chunk()
            while chunk_id is not None:
                fill(chunk_id)
                done += 1
                chunk_id = dynamic.request_chunk()
            return done

    with ThreadPoolExecutor(max_workers=workers) as pool:
        # list() re-raises the first worker exception, if any
        list(pool.map(work, range(workers)))
    return grid


def _compute_parallel(camera: CameraState, dims: ViewportDimensions, workers: int) -> np.ndarray:
    real, imag, scale, y_step = grid_constants(camera)
    previous = numba.get_num_threads()
    numba.set_num_threads(max(1, min(workers, numba.config.NUMBA_NUM_THREADS)))
    try:
        return _compute_grid_parallel(
            dims.rows,
            dims.columns,
            real,
            imag,
            scale,
            y_step,
            camera.max_iterations,
        )
    finally:
        numba.set_num_threads(previous)
