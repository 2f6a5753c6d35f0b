"""
Abstract Stats Source and Command Sink

This module contains the abstract base classes that define the interface
between the decision engine and the cache server. The real implementation
speaks the memcached text protocol; tests plug in canned doubles.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .slab_types import Snapshot


@dataclass(frozen=True)
class TransportResult:
    """Outcome of one request/response exchange.

    Either `ok` with the response `lines`, or a failure carrying `error`.
    """

    ok: bool
    lines: list[str] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def success(cls, lines: list[str]) -> TransportResult:
        return cls(ok=True, lines=list(lines))

    @classmethod
    def failure(cls, error: str) -> TransportResult:
        return cls(ok=False, error=error)


class StatsSource(ABC):
    """
    Abstract provider of per-slab counter snapshots.

    The Sampler polls this interface without knowing how the counters are
    obtained.
    """

    @abstractmethod
    def fetch_snapshot(self) -> Snapshot:
        """
        Capture the counters of every slab class.

        Returns:
            An immutable Snapshot

        Raises:
            ConnectionFailure: if the transport broke
        """
        pass


class CommandSink(ABC):
    """
    Abstract executor of page reassignment commands.
    """

    @abstractmethod
    def reassign(self, source: int, destination: int) -> str:
        """
        Ask the server to move one page from `source` to `destination`.

        Args:
            source: Slab class giving up a page
            destination: Slab class receiving the page

        Returns:
            The server's single response line, verbatim

        Raises:
            ConnectionFailure: if the transport broke
        """
        pass
