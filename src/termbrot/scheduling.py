"""Work scheduling strategies for splitting a frame into row chunks."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional


def total_chunks(rows: int, chunk_size: int) -> int:
    return (rows + chunk_size - 1) // chunk_size


@dataclass
class StaticScheduler:
    """Static work scheduling - pre-assigns chunks to workers round-robin."""
    n_chunks: int
    workers: int
    assignments: Dict[int, List[int]] = field(init=False)

    def __post_init__(self) -> None:
        self.assignments = {worker: [] for worker in range(self.workers)}
        for chunk_id in range(self.n_chunks):
            self.assignments[chunk_id % self.workers].append(chunk_id)

    def chunks_for_worker(self, worker: int) -> List[int]:
        """Get the list of chunk IDs assigned to a specific worker."""
        return self.assignments.get(worker, [])


@dataclass
class DynamicScheduler:
    """Dynamic work scheduling - hands out chunks on demand, safe across threads."""
    n_chunks: int
    next_chunk: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def request_chunk(self) -> Optional[int]:
        """Request the next available chunk, or None if all chunks are assigned."""
        with self._lock:
            if self.next_chunk >= self.n_chunks:
                return None
            chunk_id = self.next_chunk
            self.next_chunk += 1
            return chunk_id
