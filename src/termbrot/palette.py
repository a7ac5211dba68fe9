"""Ramps that turn escape-time counts into styled terminal cells.

A ramp is ordered from sparse/dark to dense/bright. Escaped cells pick an
entry by intensity in ``[0, 1)``; cells that never escaped get the ramp's
inside cell. Two intensity normalizations are available:

``linear``
    ``n / max_iterations``.
``histogram``
    Histogram equalization over the escaped cells of the frame: a cell's
    intensity is the fraction of escaped cells that escaped strictly sooner.
    This spreads the gradient over the counts that actually occur in view,
    which keeps deep zooms from washing out into one band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

__all__ = [
    "HALF_BLOCK",
    "NORMALIZATIONS",
    "RAMPS",
    "Ramp",
    "get_ramp",
    "histogram_intensity",
    "linear_intensity",
    "ramp_indices",
    "shade",
]

NORMALIZATIONS = ("linear", "histogram")

# Upper half block: foreground paints the top half of a cell, background the bottom.
HALF_BLOCK = "\u2580"


@dataclass(frozen=True)
class Ramp:
    name: str
    symbols: str
    colors: Tuple[int, ...]  # xterm-256 color numbers
    inside_symbol: str = "█"
    inside_color: int = 16

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError(f"Ramp {self.name!r} needs at least one color")
        if len(self.symbols) not in (1, len(self.colors)):
            raise ValueError(f"Ramp {self.name!r}: symbols must be one character or one per color")

    def __len__(self) -> int:
        return len(self.colors)

    def symbol_table(self) -> np.ndarray:
        symbols = self.symbols * len(self.colors) if len(self.symbols) == 1 else self.symbols
        return np.array(list(symbols), dtype="<U1")

    def color_table(self) -> np.ndarray:
        return np.array(self.colors, dtype=np.int16)


RAMPS: Dict[str, Ramp] = {
    "classic": Ramp(
        name="classic",
        symbols=" .:-=+*#%@",
        colors=(236, 238, 240, 242, 244, 246, 248, 250, 252, 255),
    ),
    "ocean": Ramp(
        name="ocean",
        symbols="█",
        colors=(17, 18, 19, 20, 21, 27, 33, 39, 45, 51, 87, 123, 159, 195),
    ),
    "fire": Ramp(
        name="fire",
        symbols="█",
        colors=(52, 88, 124, 160, 196, 202, 208, 214, 220, 226, 227, 228, 229, 230),
    ),
}


def get_ramp(name: str) -> Ramp:
    try:
        return RAMPS[name]
    except KeyError:
        raise ValueError(f"Unknown ramp {name!r}, expected one of {sorted(RAMPS)}") from None


def linear_intensity(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    return iterations.astype(np.float64) / float(max(max_iterations, 1))


def histogram_intensity(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    escaped = iterations < max_iterations
    histogram = np.bincount(iterations[escaped].ravel(), minlength=max_iterations + 1)
    total = histogram.sum()
    if total == 0:
        return np.zeros(iterations.shape, dtype=np.float64)
    # below[n] = share of escaped cells whose count is < n
    below = np.concatenate(([0], np.cumsum(histogram)[:-1])) / float(total)
    return below[iterations]


def ramp_indices(intensity: np.ndarray, size: int) -> np.ndarray:
    return np.minimum((intensity * size).astype(np.int64), size - 1)


def shade(
    iterations: np.ndarray,
    max_iterations: int,
    ramp: Ramp,
    normalization: str = "linear",
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(symbols, colors)`` arrays shaped like ``iterations``."""
    if normalization == "linear":
        intensity = linear_intensity(iterations, max_iterations)
    elif normalization == "histogram":
        intensity = histogram_intensity(iterations, max_iterations)
    else:
        raise ValueError(f"Unknown normalization {normalization!r}, expected one of {NORMALIZATIONS}")

    index = ramp_indices(intensity, len(ramp))
    symbols = ramp.symbol_table()[index]
    colors = ramp.color_table()[index]

    inside = iterations >= max_iterations
    symbols[inside] = ramp.inside_symbol
    colors[inside] = ramp.inside_color
    return symbols, colors
