"""Rendered frames handed to the display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class StyledCell:
    symbol: str
    color: int
    background: Optional[int] = None  # None keeps the terminal background


@dataclass(frozen=True)
class Frame:
    """Container for one complete render of the viewport.

    In half-block frames every cell holds two samples stacked vertically:
    ``colors`` styles the top one, ``background`` the bottom one, and
    ``samples`` keeps all ``2 * rows`` sample rows. ``iterations`` is then
    the top sample of each cell.
    """

    iterations: np.ndarray
    symbols: np.ndarray
    colors: np.ndarray
    max_iterations: int
    timing: Dict[str, Any] = field(default_factory=dict)
    background: Optional[np.ndarray] = None
    samples: Optional[np.ndarray] = None

    @property
    def shape(self) -> Tuple[int, int]:
        return self.iterations.shape

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def columns(self) -> int:
        return self.shape[1]

    @property
    def is_empty(self) -> bool:
        return self.iterations.size == 0

    @property
    def halfblock(self) -> bool:
        return self.background is not None

    def cell(self, row: int, column: int) -> StyledCell:
        background = None if self.background is None else int(self.background[row, column])
        return StyledCell(str(self.symbols[row, column]), int(self.colors[row, column]), background)

    def row_cells(self, row: int) -> List[StyledCell]:
        return [self.cell(row, column) for column in range(self.columns)]

    def __iter__(self) -> Iterator[List[StyledCell]]:
        for row in range(self.rows):
            yield self.row_cells(row)

    def lines(self) -> List[str]:
        """Symbols of each row joined into a string, colors dropped."""
        return ["".join(row) for row in self.symbols.tolist()]

    def escaped_fraction(self) -> float:
        counts = self.iterations if self.samples is None else self.samples
        if counts.size == 0:
            return 0.0
        return float(np.count_nonzero(counts < self.max_iterations)) / counts.size
