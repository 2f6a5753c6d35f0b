"""
Automove State

This module contains the AutomoveState class owned by the AutomoveController
to track destination and source streaks between decision cycles.
"""

from dataclasses import dataclass, field


@dataclass
class AutomoveState:
    """Streak counters carried from one decision cycle to the next."""

    winner: int | None = None
    win_streak: int = 0
    zero_streaks: dict[int, int] = field(default_factory=dict)  # slab_id -> cycles
