"""Structured results returned from benchmark runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .frame import Frame


@dataclass(frozen=True)
class BenchmarkReport:
    """Container for outputs produced by ``run_benchmark``."""

    frame: Optional[Frame]
    timing: Dict[str, Any]
    repeats: Optional[List[Dict[str, Any]]]

    def copy_repeats(self) -> Optional[List[Dict[str, Any]]]:
        if self.repeats is None:
            return None
        return [record.copy() for record in self.repeats]
