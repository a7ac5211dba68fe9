"""Frame rendering: camera + viewport in, styled frame out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .camera import CameraState, ViewportDimensions
from .computation import SCHEDULES, compute_iterations
from .frame import Frame
from .palette import HALF_BLOCK, NORMALIZATIONS, get_ramp, shade
from .timing import timer

__all__ = ["RenderSettings", "render"]


@dataclass(frozen=True)
class RenderSettings:
    ramp: str = "classic"
    normalization: str = "linear"
    schedule: str = "serial"
    chunk_size: int = 8  # rows per chunk
    workers: int = 1
    halfblock: bool = False  # two samples per cell, drawn with HALF_BLOCK

    def __post_init__(self) -> None:
        get_ramp(self.ramp)
        if self.normalization not in NORMALIZATIONS:
            raise ValueError(f"normalization must be one of {NORMALIZATIONS}, got {self.normalization!r}")
        if self.schedule not in SCHEDULES:
            raise ValueError(f"schedule must be one of {SCHEDULES}, got {self.schedule!r}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @property
    def samples_per_row(self) -> int:
        return 2 if self.halfblock else 1


DEFAULT_RENDER_SETTINGS = RenderSettings()


def render(
    camera: CameraState,
    dims: ViewportDimensions,
    settings: Optional[RenderSettings] = None,
) -> Frame:
    """Render the full viewport for the current camera state.

    A zero-sized viewport gives an empty frame of the same shape. With
    ``halfblock`` set, ``2 * rows`` sample rows are computed at half the
    row spacing and paired up into cells.
    """
    settings = settings or DEFAULT_RENDER_SETTINGS
    per_row = settings.samples_per_row
    sample_camera = camera.subsampled(per_row) if per_row > 1 else camera
    sample_dims = ViewportDimensions(rows=dims.rows * per_row, columns=dims.columns)

    with timer() as total:
        with timer() as compute:
            samples = compute_iterations(
                sample_camera,
                sample_dims,
                schedule=settings.schedule,
                chunk_size=settings.chunk_size,
                workers=settings.workers,
            )
        with timer() as shading:
            symbols, colors = shade(
                samples,
                camera.max_iterations,
                get_ramp(settings.ramp),
                settings.normalization,
            )
            if per_row > 1:
                background = np.ascontiguousarray(colors[1::2])
                colors = np.ascontiguousarray(colors[0::2])
                iterations = np.ascontiguousarray(samples[0::2])
                symbols = np.full(dims.shape, HALF_BLOCK, dtype="<U1")

    timing = {"compute": compute(), "shade": shading(), "total": total()}
    if per_row == 1:
        return Frame(
            iterations=samples,
            symbols=symbols,
            colors=colors,
            max_iterations=camera.max_iterations,
            timing=timing,
        )
    return Frame(
        iterations=iterations,
        symbols=symbols,
        colors=colors,
        max_iterations=camera.max_iterations,
        timing=timing,
        background=background,
        samples=samples,
    )
