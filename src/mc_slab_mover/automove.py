"""
Automove Controller

Turns sustained eviction imbalance into a single page reassignment.

Each call to `step()` consumes one cycle's ranking:
- The slab with the highest eviction delta must win `loops_threshold` cycles
  in a row before it becomes the destination.
- A slab becomes a source after `loops_threshold` consecutive cycles without
  evictions while owning more than `min_pages` pages. Any eviction, or too few
  pages, resets its streak.
- At most one reassignment is sent per cycle, for the first qualifying source
  in ranked order.

Streaks are not reset after a move, so the same pair can be moved again on the
next cycle while the imbalance lasts. Cycles in which the top slab evicted
nothing (a zero or negative delta) leave all streaks untouched.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .automove_state import AutomoveState
from .base_stats_source import CommandSink
from .slab_types import Decision, DecisionOutcome, Reassignment, SlabDelta, Totals

logger = logging.getLogger(__name__)


class AutomoveController:
    """Hysteresis state machine deciding page moves between slab classes."""

    def __init__(
        self,
        sink: CommandSink,
        loops_threshold: int = 3,
        min_pages: int = 2,
        state: AutomoveState | None = None,
    ) -> None:
        """
        Initialize AutomoveController.

        Args:
            sink: Executes the reassignment command
            loops_threshold: Consecutive cycles required before acting
            min_pages: Pages a source slab must keep after giving one up
            state: Existing state to continue from, fresh state by default
        """
        if loops_threshold < 1:
            raise ValueError("loops_threshold must be at least 1")
        self._sink = sink
        self.loops_threshold = loops_threshold
        self.min_pages = min_pages
        self.state = state or AutomoveState()

    def _track_destination(self, high: SlabDelta) -> int | None:
        state = self.state
        if high.slab_id == state.winner:
            state.win_streak += 1
        else:
            state.winner = high.slab_id
            state.win_streak = 1
        if state.win_streak >= self.loops_threshold:
            return state.winner
        return None

    def _track_sources(self, ranked: Sequence[SlabDelta]) -> int | None:
        streaks = self.state.zero_streaks
        source: int | None = None
        for slab in ranked:
            if slab.evicted_d == 0 and slab.total_pages > self.min_pages:
                streaks[slab.slab_id] = streaks.get(slab.slab_id, 0) + 1
                if source is None and streaks[slab.slab_id] >= self.loops_threshold:
                    source = slab.slab_id
            else:
                streaks.pop(slab.slab_id, None)
        return source

    def step(
        self, ranked: Sequence[SlabDelta], totals: Totals | None = None
    ) -> Decision:
        """
        Run one decision cycle.

        Args:
            ranked: Ranker output for this cycle, ascending
            totals: Cross-slab totals for this cycle, used for logging only

        Returns:
            Decision describing what happened; REASSIGNED carries the server reply
        """
        if not ranked or ranked[-1].evicted_d <= 0:
            return Decision(DecisionOutcome.IDLE)

        high = ranked[-1]
        dest = self._track_destination(high)
        source = self._track_sources(ranked)

        if dest is None:
            return Decision(DecisionOutcome.WAITING, source=source)

        if source is None or source == dest:
            logger.warning(
                f"Slab {dest} ready to receive a page but no source slab is available"
            )
            return Decision(DecisionOutcome.NO_SOURCE, destination=dest)

        share = ""
        if totals is not None:
            share = f" ({totals.percent('evicted_d', high):.1f}% of evictions)"
        logger.info(f"Moving one page from slab {source} to slab {dest}{share}")
        response = self._sink.reassign(source, dest)
        logger.info(f"slabs reassign {source} {dest}: {response}")
        return Decision(
            DecisionOutcome.REASSIGNED,
            destination=dest,
            source=source,
            reassignment=Reassignment(source, dest, response),
        )
