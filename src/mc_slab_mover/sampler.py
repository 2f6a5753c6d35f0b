from __future__ import annotations

import time
from typing import Callable

from .base_stats_source import StatsSource
from .slab_types import Snapshot


class Sampler:
    """Captures snapshots from a StatsSource, optionally an interval apart.

    There is no retry: a ConnectionFailure raised by the source propagates
    unchanged.
    """

    def __init__(
        self, source: StatsSource, sleep: Callable[[float], None] = time.sleep
    ) -> None:
        self._source = source
        self._sleep = sleep

    def sample(self) -> Snapshot:
        return self._source.fetch_snapshot()

    def collect_pair(self, interval: float) -> tuple[Snapshot, Snapshot]:
        before = self.sample()
        self._sleep(interval)
        after = self.sample()
        return before, after
