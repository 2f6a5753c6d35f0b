from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

STAT_LINE_RE = re.compile(r"^STAT (?:items:)?(\d+):(\S+) (.*)$")
DIGITS_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class ParsedCounter:
    slab_id: int
    name: str
    value: int | str


@dataclass(frozen=True)
class Ignored:
    line: str


def coerce_value(raw: str) -> int | str:
    """All-digit values become ints; anything else is carried as the raw string."""
    return int(raw) if DIGITS_RE.match(raw) else raw


def parse_stat_line(line: str) -> ParsedCounter | Ignored:
    """Parse one `STAT [items:]<slab>:<field> <value>` line.

    Global counters (`STAT active_slabs 3`), terminators and anything else that
    does not carry a slab id come back as Ignored.
    """
    match = STAT_LINE_RE.match(line.rstrip("\r\n"))
    if match is None:
        return Ignored(line)
    slab_id, name, raw = match.groups()
    return ParsedCounter(int(slab_id), name, coerce_value(raw.strip()))


def collect_counters(
    lines: Iterable[str], into: dict[int, dict[str, int | str]] | None = None
) -> tuple[dict[int, dict[str, int | str]], int]:
    """Fold parsed lines into a slab_id -> counters mapping.

    Returns the mapping and the number of ignored lines.
    """
    slabs = into if into is not None else {}
    ignored = 0
    for line in lines:
        outcome = parse_stat_line(line)
        if isinstance(outcome, Ignored):
            ignored += 1
            continue
        slabs.setdefault(outcome.slab_id, {})[outcome.name] = outcome.value
    return slabs, ignored
