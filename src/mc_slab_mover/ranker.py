"""
Slab Ranker

Orders slab deltas by eviction pressure, lowest first. The last element of a
ranking is the cycle's winner.

Two metrics are available:
- evictions: eviction delta (default)
- evictions_per_item: eviction delta divided by items stored. Under-populated
  classes get inflated ratios with it, so it is only offered as an alternative.
"""

from __future__ import annotations

from typing import Callable, Mapping

from .slab_types import RankMetric, SlabDelta, SlabId

Metric = Callable[[SlabDelta], float]


def eviction_delta(slab: SlabDelta) -> float:
    return slab.evicted_d


def evictions_per_item(slab: SlabDelta) -> float:
    return slab.evicted_d / max(slab.number, 1)


METRICS: dict[RankMetric, Metric] = {
    RankMetric.EVICTIONS: eviction_delta,
    RankMetric.EVICTIONS_PER_ITEM: evictions_per_item,
}


def resolve_metric(metric: RankMetric | str | Metric) -> Metric:
    """Accept a RankMetric, its string value, or a callable."""
    if callable(metric):
        return metric
    try:
        return METRICS[RankMetric(metric)]
    except ValueError:
        known = ", ".join(m.value for m in RankMetric)
        raise ValueError(f"Unknown metric {metric!r}; expected one of: {known}")


def rank(
    per_slab: Mapping[SlabId, SlabDelta],
    metric: RankMetric | str | Metric = eviction_delta,
    clamp_negative: bool = False,
) -> list[SlabDelta]:
    """
    Sort slabs ascending by `metric`, ties broken by slab id ascending.

    Args:
        per_slab: Output of compute_deltas
        metric: Scalar metric, eviction delta by default
        clamp_negative: Replace negative deltas by 0 before ordering

    Returns:
        Ordered list; empty when there is nothing to rank
    """
    key = resolve_metric(metric)
    slabs = list(per_slab.values())
    if clamp_negative:
        slabs = [slab.clamped() for slab in slabs]
    return sorted(slabs, key=lambda slab: (key(slab), slab.slab_id))
