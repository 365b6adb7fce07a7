"""
Debounced Autosave
==================

Coalesces bursts of graph changes into one write per board.

TIMING:
- schedule() replaces any pending graph for the board and pushes its
  deadline to now + debounce
- tick() writes every board whose deadline has passed
- flush() writes everything pending immediately

Time is read from an injectable monotonic source; no threads or timers.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging
import time

from ..contracts.graph import Graph
from .serialization import encode_graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Pending:
    graph: Graph
    deadline: float


class AutosaveScheduler:
    """
    Debounced writer in front of a storage backend.

    `backend` is any GraphStorageBackend. A failed write is logged and
    dropped; the next schedule() retries with fresher data.
    """

    def __init__(
        self,
        backend,
        debounce_seconds: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
    ):
        if debounce_seconds < 0:
            raise ValueError("debounce_seconds must be non-negative")
        self._backend = backend
        self._debounce = debounce_seconds
        self._clock = clock
        self._pending: Dict[str, _Pending] = {}
        self._write_count = 0

    def schedule(self, board_id: str, graph: Graph, now: Optional[float] = None) -> float:
        """Queue `graph` for `board_id`; returns the new deadline."""
        now = self._clock() if now is None else now
        deadline = now + self._debounce
        self._pending[board_id] = _Pending(graph=graph, deadline=deadline)
        return deadline

    def tick(self, now: Optional[float] = None) -> List:
        """Write boards whose deadline is at or before `now`."""
        now = self._clock() if now is None else now
        due = [board_id for board_id, p in self._pending.items() if p.deadline <= now]
        return [self._write(board_id) for board_id in due]

    def flush(self) -> List:
        return [self._write(board_id) for board_id in list(self._pending)]

    def cancel(self, board_id: str) -> bool:
        return self._pending.pop(board_id, None) is not None

    def is_pending(self, board_id: str) -> bool:
        return board_id in self._pending

    def next_deadline(self) -> Optional[float]:
        if not self._pending:
            return None
        return min(p.deadline for p in self._pending.values())

    @property
    def write_count(self) -> int:
        """Successful writes so far."""
        return self._write_count

    def _write(self, board_id: str):
        pending = self._pending.pop(board_id)
        result = self._backend.write_board(board_id, encode_graph(pending.graph))
        if result.success:
            self._write_count += 1
        else:
            logger.error(
                "Autosave failed for board %s: %s",
                board_id, result.error.message if result.error else "unknown error",
            )
        return result
