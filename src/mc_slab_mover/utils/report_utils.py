from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from ..slab_types import SlabDelta, Totals

REPORT_COLUMNS = [
    "slab",
    "evicted_d",
    "evicted_pct",
    "number",
    "total_pages",
    "pages_pct",
]


def ranked_slabs_frame(ranked: Sequence[SlabDelta], totals: Totals) -> pd.DataFrame:
    """One row per ranked slab, in ranking order, with shares of the totals."""
    rows = [
        {
            "slab": slab.slab_id,
            "evicted_d": slab.evicted_d,
            "evicted_pct": round(totals.percent("evicted_d", slab), 1),
            "number": slab.number,
            "total_pages": slab.total_pages,
            "pages_pct": round(totals.percent("total_pages", slab), 1),
        }
        for slab in ranked
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def summarize_ranked_slabs(ranked: Sequence[SlabDelta], totals: Totals) -> str:
    """Human-readable table of one cycle's ranking, highest pressure last.

    Pure utility (no side effects), suitable for testing.
    """
    lines: list[str] = ["=== SLAB RANKING ==="]
    if not ranked:
        return "\n".join(lines + ["No slab classes to rank."])

    frame = ranked_slabs_frame(ranked, totals)
    lines.append(frame.to_string(index=False))
    lines.append(
        f"totals: evicted_d={totals.deltas.get('evicted', 0)} "
        f"number={totals.values.get('number', 0)} "
        f"total_pages={totals.values.get('total_pages', 0)}"
    )
    return "\n".join(lines)


def summarize_win_histogram(counts: Mapping[int, int], cycles: int | None = None) -> str:
    """Render the win histogram, most frequent winner first."""
    lines: list[str] = ["=== WIN HISTOGRAM ==="]
    if cycles is not None:
        lines.append(f"cycles: {cycles}")
    if not counts:
        return "\n".join(lines + ["No winners recorded yet."])

    frame = pd.DataFrame(
        sorted(counts.items()), columns=["slab", "wins"]
    ).sort_values(["wins", "slab"], ascending=[False, True], kind="stable")
    total = int(frame["wins"].sum())
    frame["share_pct"] = (100.0 * frame["wins"] / total).round(1)
    lines.append(frame.to_string(index=False))
    return "\n".join(lines)
