from __future__ import annotations

import threading
from collections import Counter


class WinHistogram:
    """How many cycles each slab class held the top eviction rank.

    Observability state only; the automove decision never reads it. A signal
    handler may call `snapshot()` while the loop is between statements, so all
    access goes through a re-entrant lock and readers get a copy.
    """

    def __init__(self) -> None:
        self._wins: Counter[int] = Counter()
        self._cycles = 0
        self._lock = threading.RLock()

    def record(self, slab_id: int | None) -> None:
        """Count one cycle, crediting `slab_id` with a win.

        The driver passes None for cycles whose top slab evicted nothing (or
        when nothing could be ranked): the cycle is counted, no slab is credited.
        """
        with self._lock:
            self._cycles += 1
            if slab_id is not None:
                self._wins[slab_id] += 1

    @property
    def cycles(self) -> int:
        with self._lock:
            return self._cycles

    def snapshot(self) -> dict[int, int]:
        with self._lock:
            return dict(self._wins)
