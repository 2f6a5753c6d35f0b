from __future__ import annotations

from .slab_types import SlabDelta, SlabId, Snapshot, Totals


def compute_deltas(
    before: Snapshot, after: Snapshot
) -> tuple[dict[SlabId, SlabDelta], Totals]:
    """Per-slab deltas and cross-slab totals between two snapshots.

    Only slabs present in both snapshots are included. A numeric field of
    `after` gets a delta when `before` holds a numeric value for it too.
    Negative deltas (counter reset) are kept as-is.
    """
    per_slab: dict[SlabId, SlabDelta] = {}
    totals = Totals()

    for slab_id in after.slab_ids():
        if slab_id not in before:
            continue
        old = before[slab_id]
        new = after[slab_id]

        deltas: dict[str, int] = {}
        for name, value in new.items():
            if not isinstance(value, int):
                continue
            previous = old.get(name)
            if isinstance(previous, int):
                deltas[name] = value - previous

        slab = SlabDelta(slab_id=slab_id, values=dict(new), deltas=deltas)
        per_slab[slab_id] = slab
        totals.add(slab)

    return per_slab, totals
