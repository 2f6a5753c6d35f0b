"""
Slab Types and Data Classes

This module contains the core data structures used by the sampler, the delta
calculator, the ranker and the automove controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

SlabId = int
CounterValue = int | str


class RankMetric(Enum):
    """Scalar metrics the ranker can order slabs by."""

    EVICTIONS = "evictions"
    EVICTIONS_PER_ITEM = "evictions_per_item"


class DecisionOutcome(Enum):
    """Result of one automove decision cycle."""

    IDLE = "idle"
    WAITING = "waiting"
    NO_SOURCE = "no_source"
    REASSIGNED = "reassigned"


@dataclass(frozen=True)
class Snapshot:
    """Counters of every slab class, captured in one exchange with the server."""

    slabs: Mapping[SlabId, Mapping[str, CounterValue]]
    captured_at: float = 0.0

    def __post_init__(self) -> None:
        frozen = {
            int(slab_id): MappingProxyType(dict(counters))
            for slab_id, counters in self.slabs.items()
        }
        object.__setattr__(self, "slabs", MappingProxyType(frozen))

    def __contains__(self, slab_id: object) -> bool:
        return slab_id in self.slabs

    def __getitem__(self, slab_id: SlabId) -> Mapping[str, CounterValue]:
        return self.slabs[slab_id]

    def __len__(self) -> int:
        return len(self.slabs)

    def slab_ids(self) -> list[SlabId]:
        return sorted(self.slabs)


@dataclass(frozen=True)
class SlabDelta:
    """Per-slab counters: absolute `after` values plus `after - before` deltas."""

    slab_id: SlabId
    values: Mapping[str, CounterValue]
    deltas: Mapping[str, int]

    def get(self, name: str, default: Any = 0) -> Any:
        """Look up a counter; a `_d` suffix selects the delta form."""
        if name.endswith("_d"):
            return self.deltas.get(name[:-2], default)
        return self.values.get(name, default)

    @property
    def evicted_d(self) -> int:
        return int(self.deltas.get("evicted", 0))

    @property
    def evicted(self) -> int:
        value = self.values.get("evicted", 0)
        return value if isinstance(value, int) else 0

    @property
    def number(self) -> int:
        value = self.values.get("number", 0)
        return value if isinstance(value, int) else 0

    @property
    def total_pages(self) -> int:
        value = self.values.get("total_pages", 0)
        return value if isinstance(value, int) else 0

    def regressions(self) -> dict[str, int]:
        """Counters that went backwards between the two samples."""
        return {name: d for name, d in self.deltas.items() if d < 0}

    def clamped(self) -> SlabDelta:
        """Copy of this delta with negative deltas replaced by 0."""
        if not self.regressions():
            return self
        return SlabDelta(
            slab_id=self.slab_id,
            values=self.values,
            deltas={name: max(d, 0) for name, d in self.deltas.items()},
        )


@dataclass
class Totals:
    """Numeric counters summed across all slabs, absolute and delta forms."""

    values: dict[str, int] = field(default_factory=dict)
    deltas: dict[str, int] = field(default_factory=dict)

    def add(self, slab: SlabDelta) -> None:
        for name, value in slab.values.items():
            if isinstance(value, int):
                self.values[name] = self.values.get(name, 0) + value
        for name, delta in slab.deltas.items():
            self.deltas[name] = self.deltas.get(name, 0) + delta

    def percent(self, name: str, slab: SlabDelta) -> float:
        """Share of `name` (or `name_d`) held by `slab`, 0.0 when the total is 0."""
        if name.endswith("_d"):
            total = self.deltas.get(name[:-2], 0)
        else:
            total = self.values.get(name, 0)
        if not total:
            return 0.0
        return 100.0 * slab.get(name) / total


@dataclass(frozen=True)
class Reassignment:
    """A page move request and the server's verbatim answer."""

    source: SlabId
    destination: SlabId
    response: str = ""

    @property
    def command(self) -> str:
        return f"slabs reassign {self.source} {self.destination}"


@dataclass(frozen=True)
class Decision:
    """What the automove controller concluded for one cycle."""

    outcome: DecisionOutcome
    destination: SlabId | None = None
    source: SlabId | None = None
    reassignment: Reassignment | None = None
