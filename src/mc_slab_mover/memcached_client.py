"""
Memcached Connection

A single persistent connection to a memcached server speaking the text
protocol. It implements both the StatsSource and the CommandSink interfaces.

Design notes:
- One blocking socket per process, never shared or pooled.
- The connect timeout is the only timeout; once connected, reads block.
- `request()` never raises on transport errors; it returns a TransportResult
  and the public operations turn a failed result into ConnectionFailure.
"""

from __future__ import annotations

import logging
import socket
import time
from typing import Callable

from .base_stats_source import CommandSink, StatsSource, TransportResult
from .errors import ConnectionFailure
from .slab_types import Snapshot
from .utils.stat_parser import collect_counters

logger = logging.getLogger(__name__)

STATS_COMMANDS = ("stats items", "stats slabs")
TERMINATORS = ("END", "ERROR", "CLIENT_ERROR", "SERVER_ERROR")


class MemcachedConnection(StatsSource, CommandSink):
    """Line-oriented memcached admin connection."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 11211,
        timeout: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize MemcachedConnection.

        Args:
            host: Server host name or address
            port: Server TCP port
            timeout: Connect timeout in seconds
            clock: Time source used to stamp snapshots
        """
        self.host = host
        self.port = port
        self._timeout = timeout
        self._clock = clock
        self._sock: socket.socket | None = None
        self._reader = None

    def __enter__(self):
        """Context manager entry - connect."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close the socket."""
        self.close()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        if self._sock is not None:
            return
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self._timeout)
        except OSError as e:
            raise ConnectionFailure(
                f"Cannot connect to {self.host}:{self.port}: {e}"
            ) from e
        sock.settimeout(None)
        self._sock = sock
        self._reader = sock.makefile("rb")
        logger.info(f"Connected to memcached at {self.host}:{self.port}")

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def request(self, command: str, multiline: bool = True) -> TransportResult:
        """
        Send one command and read its response.

        Args:
            command: Command text without the line terminator
            multiline: Read until a terminator line instead of a single line

        Returns:
            TransportResult with the response lines (terminator included), or a
            failure describing what broke
        """
        if self._sock is None or self._reader is None:
            return TransportResult.failure("not connected")

        try:
            self._sock.sendall(f"{command}\r\n".encode("ascii"))
            lines: list[str] = []
            while True:
                raw = self._reader.readline()
                if not raw:
                    return TransportResult.failure("connection closed by server")
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                lines.append(line)
                if not multiline or line.startswith(TERMINATORS):
                    return TransportResult.success(lines)
        except OSError as e:
            return TransportResult.failure(str(e) or e.__class__.__name__)

    def _checked(self, command: str, multiline: bool = True) -> list[str]:
        result = self.request(command, multiline=multiline)
        if not result.ok:
            raise ConnectionFailure(result.error or "transport failure", command)
        return result.lines

    # StatsSource interface
    def fetch_snapshot(self) -> Snapshot:
        slabs: dict[int, dict[str, int | str]] = {}
        ignored = 0
        for command in STATS_COMMANDS:
            lines = self._checked(command)
            if lines and not lines[-1].startswith("END"):
                logger.warning(f"Server rejected {command!r}: {lines[-1]}")
            _, skipped = collect_counters(lines, into=slabs)
            ignored += skipped
        logger.debug(f"Parsed {len(slabs)} slab classes, ignored {ignored} lines")
        return Snapshot(slabs, captured_at=self._clock())

    # CommandSink interface
    def reassign(self, source: int, destination: int) -> str:
        lines = self._checked(f"slabs reassign {source} {destination}", multiline=False)
        return lines[0]
