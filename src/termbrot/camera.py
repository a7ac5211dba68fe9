"""Camera model: navigation state and the cell-to-plane mapping."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Context, Decimal
from enum import Enum
from typing import Optional, Tuple

__all__ = [
    "CameraLimits",
    "CameraState",
    "Pan",
    "REFERENCE_DIMENSIONS",
    "ViewportDimensions",
    "Zoom",
]

# Wide enough that adding any float pan step to the center is exact.
_CENTER_CONTEXT = Context(prec=400)


class Pan(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Zoom(str, Enum):
    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class ViewportDimensions:
    """Terminal size in character cells."""

    rows: int
    columns: int

    def __post_init__(self) -> None:
        if self.rows < 0 or self.columns < 0:
            raise ValueError(f"Viewport dimensions must be non-negative, got {self.columns}x{self.rows}")

    @property
    def is_empty(self) -> bool:
        return self.rows == 0 or self.columns == 0

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.columns


REFERENCE_DIMENSIONS = ViewportDimensions(rows=24, columns=80)


@dataclass(frozen=True)
class CameraLimits:
    """Step sizes and clamps applied by the camera commands."""

    pan_fraction: float = 0.1
    zoom_factor: float = 0.8
    iteration_step: int = 10
    min_scale: float = 1e-13
    max_scale: float = 0.5
    iteration_cap: int = 5000
    cell_aspect: float = 0.5  # cell width / cell height

    def __post_init__(self) -> None:
        if not 0.0 < self.zoom_factor < 1.0:
            raise ValueError(f"zoom_factor must be in (0, 1), got {self.zoom_factor}")
        if not 0.0 < self.min_scale <= self.max_scale:
            raise ValueError(f"Invalid scale range [{self.min_scale}, {self.max_scale}]")
        if self.pan_fraction <= 0.0:
            raise ValueError(f"pan_fraction must be positive, got {self.pan_fraction}")
        if self.iteration_step < 1 or self.iteration_cap < 1:
            raise ValueError("iteration_step and iteration_cap must be at least 1")
        if self.cell_aspect <= 0.0:
            raise ValueError(f"cell_aspect must be positive, got {self.cell_aspect}")

    def clamp_scale(self, scale: float) -> float:
        return min(max(scale, self.min_scale), self.max_scale)

    def clamp_iterations(self, iterations: int) -> int:
        return min(max(iterations, 1), self.iteration_cap)


@dataclass
class CameraState:
    """Center, scale and iteration budget of the current view.

    The center is kept as two ``Decimal`` values so that repeated pans add
    and subtract float steps without rounding; ``center`` exposes it as a
    float pair for the render kernels.
    """

    real: Decimal = Decimal("-0.5")
    imag: Decimal = Decimal("0.0")
    scale: float = 0.05
    max_iterations: int = 100
    limits: CameraLimits = field(default_factory=CameraLimits)
    _home: Tuple[Decimal, Decimal, float, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.real = _to_decimal(self.real)
        self.imag = _to_decimal(self.imag)
        self.scale = self.limits.clamp_scale(float(self.scale))
        self.max_iterations = self.limits.clamp_iterations(int(self.max_iterations))
        self._home = (self.real, self.imag, self.scale, self.max_iterations)

    @classmethod
    def from_center(
        cls,
        center: Tuple[float, float],
        scale: float,
        max_iterations: int,
        limits: Optional[CameraLimits] = None,
    ) -> CameraState:
        return cls(
            real=_to_decimal(center[0]),
            imag=_to_decimal(center[1]),
            scale=scale,
            max_iterations=max_iterations,
            limits=limits or CameraLimits(),
        )

    @property
    def center(self) -> Tuple[float, float]:
        return float(self.real), float(self.imag)

    @property
    def y_step(self) -> float:
        """Imaginary units per terminal row."""
        return self.scale / self.limits.cell_aspect

    def pan(self, direction: Pan | str, dims: Optional[ViewportDimensions] = None) -> bool:
        direction = Pan(direction)
        dims = dims or REFERENCE_DIMENSIONS
        # Steps are negated as floats: unary minus on a Decimal rounds to
        # the default context.
        if direction in (Pan.LEFT, Pan.RIGHT):
            step = self.limits.pan_fraction * self.scale * max(dims.columns, 1)
            if direction is Pan.LEFT:
                step = -step
            self.real = _CENTER_CONTEXT.add(self.real, Decimal(step))
        else:
            step = self.limits.pan_fraction * self.y_step * max(dims.rows, 1)
            if direction is Pan.DOWN:
                step = -step
            self.imag = _CENTER_CONTEXT.add(self.imag, Decimal(step))
        return True

    def zoom(self, direction: Zoom | str) -> bool:
        direction = Zoom(direction)
        factor = self.limits.zoom_factor if direction is Zoom.IN else 1.0 / self.limits.zoom_factor
        previous = self.scale
        self.scale = self.limits.clamp_scale(self.scale * factor)
        return self.scale != previous

    def adjust_iterations(self, delta: int) -> bool:
        previous = self.max_iterations
        self.max_iterations = self.limits.clamp_iterations(self.max_iterations + int(delta))
        return self.max_iterations != previous

    def reset(self) -> bool:
        home = (self.real, self.imag, self.scale, self.max_iterations)
        self.real, self.imag, self.scale, self.max_iterations = self._home
        return home != self._home

    def fit(
        self,
        dims: ViewportDimensions,
        xlim: Tuple[float, float] = (-2.2, 0.75),
        ylim: Tuple[float, float] = (-1.3, 1.3),
    ) -> None:
        """Center on ``xlim x ylim`` and pick the smallest scale that shows all of it.

        The fitted view becomes the one ``reset`` returns to.
        """
        self.real = _to_decimal((xlim[0] + xlim[1]) / 2.0)
        self.imag = _to_decimal((ylim[0] + ylim[1]) / 2.0)
        if not dims.is_empty:
            x_scale = (xlim[1] - xlim[0]) / dims.columns
            y_scale = (ylim[1] - ylim[0]) / dims.rows * self.limits.cell_aspect
            self.scale = self.limits.clamp_scale(max(x_scale, y_scale))
        self._home = (self.real, self.imag, self.scale, self.max_iterations)

    def subsampled(self, samples_per_row: int) -> CameraState:
        """Copy of this view whose rows are ``samples_per_row`` times finer.

        Sample row ``k`` of a grid with ``samples_per_row * rows`` rows lies
        ``k / samples_per_row`` terminal rows below the top of the viewport.
        """
        limits = replace(self.limits, cell_aspect=self.limits.cell_aspect * samples_per_row)
        return CameraState(self.real, self.imag, self.scale, self.max_iterations, limits)

    def to_complex(self, row: int, column: int, dims: ViewportDimensions) -> complex:
        real, imag = self.center
        x = real + (column - dims.columns // 2) * self.scale
        y = imag + (dims.rows // 2 - row) * self.y_step
        return complex(x, y)


def _to_decimal(value: float | str | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        return Decimal(value)
    return Decimal(float(value))
