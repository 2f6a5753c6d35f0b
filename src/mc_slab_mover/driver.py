"""
Driver Loop

Orchestrates sampler -> delta calculator -> ranker -> automove controller on a
fixed period until the connection fails or the process is stopped.

Each cycle sleeps once, takes one new snapshot and reuses it as the next
cycle's baseline, so the server sees one stats exchange per cycle.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .automove import AutomoveController
from .base_stats_source import CommandSink, StatsSource
from .config import MoverConfig
from .deltas import compute_deltas
from .ranker import rank, resolve_metric
from .sampler import Sampler
from .slab_types import Decision, DecisionOutcome, SlabDelta, Snapshot, Totals
from .slack_utils import send_slack_alert_if_needed
from .system_utils import log_monitor_status
from .utils.report_utils import summarize_ranked_slabs
from .win_histogram import WinHistogram

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """Everything one cycle produced; `after` is the next cycle's baseline."""

    after: Snapshot
    ranked: list[SlabDelta]
    totals: Totals
    decision: Decision | None = None

    @property
    def winner(self) -> SlabDelta | None:
        return self.ranked[-1] if self.ranked else None


class DriverLoop:
    """Periodic monitor owning the one server connection and all cycle state."""

    def __init__(
        self,
        source: StatsSource,
        sink: CommandSink,
        config: MoverConfig | None = None,
        controller: AutomoveController | None = None,
        histogram: WinHistogram | None = None,
        sleep: Callable[[float], None] = time.sleep,
        status_every: int = 30,
    ) -> None:
        self.config = (config or MoverConfig()).validate()
        self._sleep = sleep
        self._metric = resolve_metric(self.config.metric)
        self._status_every = status_every
        self.sampler = Sampler(source, sleep=sleep)
        self.controller = controller or AutomoveController(
            sink, loops_threshold=self.config.loops_threshold
        )
        self.histogram = histogram or WinHistogram()

    @property
    def server(self) -> str:
        return f"{self.config.host}:{self.config.port}"

    def _warn_regressions(self, per_slab: dict[int, SlabDelta]) -> None:
        for slab in per_slab.values():
            for name, delta in slab.regressions().items():
                logger.warning(
                    f"Counter {name} of slab {slab.slab_id} went backwards by "
                    f"{-delta}; server restarted or counter wrapped?"
                )

    def run_cycle(self, before: Snapshot) -> CycleResult:
        """Sleep one interval, sample, rank and (if enabled) decide."""
        self._sleep(self.config.sleep_interval)
        after = self.sampler.sample()

        per_slab, totals = compute_deltas(before, after)
        self._warn_regressions(per_slab)
        ranked = rank(
            per_slab, self._metric, clamp_negative=self.config.clamp_negative_deltas
        )
        result = CycleResult(after=after, ranked=ranked, totals=totals)

        if not ranked:
            logger.info("No slab classes present in both samples; no decision this cycle")
            self.histogram.record(None)
            return result

        if self.config.report_enabled:
            logger.info("\n" + summarize_ranked_slabs(ranked, totals))

        if self.config.automove_enabled:
            result.decision = self.controller.step(ranked, totals)
            moved = result.decision.reassignment
            if result.decision.outcome is DecisionOutcome.REASSIGNED and moved:
                send_slack_alert_if_needed(moved, self.server)

        winner = result.winner
        self.histogram.record(
            winner.slab_id if winner is not None and winner.evicted_d > 0 else None
        )
        if self.config.report_enabled and self.histogram.cycles % self._status_every == 0:
            log_monitor_status(self.server, self.histogram.cycles)
        return result

    def run(self, max_cycles: int | None = None) -> int:
        """
        Loop until `max_cycles` cycles ran (forever when None).

        Returns:
            Number of completed cycles

        Raises:
            ConnectionFailure: the server connection broke; nothing is retried
        """
        logger.info(
            f"Monitoring {self.server} every {self.config.sleep_interval}s "
            f"(metric={self.config.metric}, automove="
            f"{'on' if self.config.automove_enabled else 'off'}, "
            f"loops={self.config.loops_threshold})"
        )
        before = self.sampler.sample()
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            before = self.run_cycle(before).after
            cycles += 1
        return cycles
