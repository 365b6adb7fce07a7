"""
Id Clock
========

Injectable source of entity ids.

Ids are `<prefix><millis>_<suffix>`: a monotonic millisecond reading plus
a random suffix, retried until the id is unused in the caller's scope.

MODES:
======
1. LIVE mode: wall-clock milliseconds, random suffixes
2. REPLAY mode: pre-recorded millisecond ticks and a seeded generator,
   so the same session replays to byte-identical ids
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Container, List, Optional
import random
import time


class ClockExhausted(Exception):
    """Raised when a replay clock runs out of ticks."""
    pass


@dataclass
class IdClock:
    """
    Millisecond clock used for id generation.

    In replay mode the clock never reads system time; it returns the
    recorded ticks in order and never goes backwards.
    """
    _ticks: List[int] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True
    _last: int = 0

    def now_ms(self) -> int:
        if self._is_live:
            current = max(time.time_ns() // 1_000_000, self._last)
            self._current_index += 1
        else:
            if self._current_index >= len(self._ticks):
                raise ClockExhausted(
                    f"Replay clock exhausted at index {self._current_index}. "
                    f"Recorded run had {len(self._ticks)} ticks."
                )
            current = max(self._ticks[self._current_index], self._last)
            self._current_index += 1
        self._last = current
        return current

    def tick_count(self) -> int:
        return self._current_index

    def is_live(self) -> bool:
        return self._is_live

    @classmethod
    def live(cls) -> 'IdClock':
        return cls(_is_live=True)

    @classmethod
    def replay(cls, ticks: List[int]) -> 'IdClock':
        return cls(_ticks=list(ticks), _current_index=0, _is_live=False)

    @classmethod
    def fixed(cls, start: int = 0, count: int = 100_000) -> 'IdClock':
        """Replay clock advancing one millisecond per read."""
        return cls.replay(list(range(start, start + count)))

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"IdClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"


class IdFactory:
    """
    Generates collision-free ids for nodes, edges and copies.

    `taken` is any container answering `in` for ids already used in
    the target scope; ids are regenerated until they are free.
    """

    MAX_ATTEMPTS = 64

    def __init__(
        self,
        clock: Optional[IdClock] = None,
        rng: Optional[random.Random] = None,
        suffix_range: int = 1000,
    ):
        self._clock = clock or IdClock.live()
        self._rng = rng or random.Random()
        self._suffix_range = suffix_range

    @classmethod
    def deterministic(cls, seed: int = 0) -> 'IdFactory':
        return cls(clock=IdClock.fixed(), rng=random.Random(seed))

    def _generate(self, make: Callable[[], str], taken: Container[str]) -> str:
        for _ in range(self.MAX_ATTEMPTS):
            candidate = make()
            if candidate not in taken:
                return candidate
        raise RuntimeError("Could not generate a free id; suffix space exhausted")

    def node_id(self, taken: Container[str] = ()) -> str:
        return self._generate(
            lambda: f"n{self._clock.now_ms()}_{self._rng.randrange(self._suffix_range)}",
            taken,
        )

    def edge_id(self, taken: Container[str] = ()) -> str:
        return self._generate(
            lambda: f"e_{self._clock.now_ms()}_{self._rng.randrange(self._suffix_range)}",
            taken,
        )

    def copy_id(self, source_id: str, taken: Container[str] = ()) -> str:
        return self._generate(
            lambda: f"{source_id}-copy-{self._rng.randrange(1_000_000)}",
            taken,
        )

    def template_id(self, taken: Container[str] = ()) -> str:
        return self._generate(
            lambda: f"tpl_{self._clock.now_ms()}_{self._rng.randrange(self._suffix_range)}",
            taken,
        )
