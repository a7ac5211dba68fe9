"""Baseline escape-time grid in plain Python."""

from __future__ import annotations

import numpy as np

from .camera import CameraState, ViewportDimensions


def compute_escape_grid(camera: CameraState, dims: ViewportDimensions) -> np.ndarray:
    """Compute escape-time counts cell by cell through ``CameraState.to_complex``."""
    image = np.zeros(dims.shape, dtype=np.uint32)

    for row in range(dims.rows):
        for col in range(dims.columns):
            c = camera.to_complex(row, col, dims)
            # Component-wise so every operation rounds exactly like the kernels.
            zx = zy = 0.0
            n = 0
            while zx * zx + zy * zy <= 4.0 and n < camera.max_iterations:
                zx, zy = zx * zx - zy * zy + c.real, 2.0 * zx * zy + c.imag
                n += 1
            image[row, col] = n

    return image
