"""
History Manager

RESPONSIBILITY: Snapshot-based undo/redo over whole graphs
ALLOWED INPUTS: Graph values tagged with a MutationOrigin
OUTPUTS: Snapshot (immutable, independent copies)

STATE MACHINE:
==============
- snapshots: ordered Snapshot list, cursor: index of the current one
- 0 <= cursor < len(snapshots) whenever non-empty
- record: drop everything after cursor, append, cursor = last
- undo: cursor - 1 if cursor > 0, else no-op
- redo: cursor + 1 if cursor < last, else no-op

undo/redo hand out deep copies, so the store never shares payloads with a
stored snapshot.

Mutations that replay history (undo/redo writing back into the store)
arrive with MutationOrigin.HISTORY_REPLAY and are never recorded.
"""

from __future__ import annotations
from typing import List, Optional
import copy
import logging

from ..contracts.base import MutationOrigin
from ..contracts.graph import Graph, Snapshot

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Linear undo/redo stack.

    With `max_snapshots` set, the oldest snapshots are evicted and the
    cursor shifts with them.
    """

    def __init__(self, max_snapshots: Optional[int] = None):
        if max_snapshots is not None and max_snapshots < 1:
            raise ValueError("max_snapshots must be at least 1")
        self._max = max_snapshots
        self._snapshots: List[Snapshot] = []
        self._cursor = -1
        self._sequence = 0

    # =========================================================================
    # RECORDING
    # =========================================================================

    def record(
        self,
        graph: Graph,
        origin: MutationOrigin = MutationOrigin.USER_EDIT,
    ) -> Optional[Snapshot]:
        """
        Push a deep copy of `graph`, truncating the redo branch.

        Returns the new snapshot, or None when the mutation came from
        history replay.
        """
        if origin is MutationOrigin.HISTORY_REPLAY:
            return None

        del self._snapshots[self._cursor + 1:]
        snapshot = Snapshot(sequence=self._sequence, graph=copy.deepcopy(graph))
        self._sequence += 1
        self._snapshots.append(snapshot)

        if self._max is not None and len(self._snapshots) > self._max:
            evicted = len(self._snapshots) - self._max
            del self._snapshots[:evicted]

        self._cursor = len(self._snapshots) - 1
        return snapshot

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def undo(self) -> Optional[Snapshot]:
        if not self.can_undo:
            return None
        self._cursor -= 1
        logger.debug("Undo -> cursor %d of %d", self._cursor, len(self._snapshots))
        return self._checkout()

    def redo(self) -> Optional[Snapshot]:
        if not self.can_redo:
            return None
        self._cursor += 1
        logger.debug("Redo -> cursor %d of %d", self._cursor, len(self._snapshots))
        return self._checkout()

    def _checkout(self) -> Snapshot:
        stored = self._snapshots[self._cursor]
        return Snapshot(sequence=stored.sequence, graph=copy.deepcopy(stored.graph))

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._snapshots) - 1

    # =========================================================================
    # INSPECTION
    # =========================================================================

    @property
    def cursor(self) -> int:
        """Index of the current snapshot; -1 when empty."""
        return self._cursor

    @property
    def current(self) -> Optional[Snapshot]:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    @property
    def snapshots(self) -> tuple:
        return tuple(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    def clear(self) -> None:
        self._snapshots.clear()
        self._cursor = -1


__all__ = ['HistoryManager']
