"""
Error Types

Exceptions raised by the slab mover. Only transport failures are fatal; every
other condition is reported through a Decision or a log line.
"""


class SlabMoverError(Exception):
    """Base class for slab mover errors."""


class ConnectionFailure(SlabMoverError):
    """The connection to the cache server broke (no data, reset, refused)."""

    def __init__(self, message: str, command: str | None = None) -> None:
        self.command = command
        if command:
            message = f"{message} (while sending {command!r})"
        super().__init__(message)
