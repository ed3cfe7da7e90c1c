"""Simulation event log.

The engine is a pure function, so it never writes anywhere on its own.
Callers that want a record of a run hand ``simulate`` or
``compare_all`` a ``Logger`` and read back structured entries: one
DEBUG entry per page fault, an INFO summary per finished run, and
WARNING entries for input the shell or web layer rejected.

Entries carry the reference *step* they belong to, so a fault entry
can be matched against the corresponding row of the trace table.

A logger may be bounded with ``max_entries``.  Once full, the oldest
entries are dropped as new ones arrive, which keeps a long-lived
session (the web app's shell) from growing without limit.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity of an event; levels compare with ``<`` for filtering."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One event from a simulation session.

    Attributes:
        level: How important the event is.
        message: What happened, e.g. ``"Fault on page 3, evicted page 7 from frame 0"``.
        source: The policy name for engine events, else "compare", "shell" or "web".
        step: Index of the reference being processed, if the event has one.

    """

    level: LogLevel
    message: str
    source: str
    step: int | None = None

    def __str__(self) -> str:
        """Render as ``[LEVEL] source@step: message`` (``@step`` only when known)."""
        where = self.source if self.step is None else f"{self.source}@{self.step}"
        return f"[{self.level.name}] {where}: {self.message}"


class Logger:
    """Ordered buffer of session events, optionally capped in size."""

    def __init__(self, *, max_entries: int | None = None) -> None:
        """Create an empty logger.

        Args:
            max_entries: Keep at most this many entries, discarding the
                oldest first.  None means unbounded.

        Raises:
            ValueError: If *max_entries* is less than 1.

        """
        if max_entries is not None and max_entries < 1:
            msg = f"max_entries must be at least 1, got {max_entries}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    @property
    def max_entries(self) -> int | None:
        """Return the cap on stored entries, or None if unbounded."""
        return self._entries.maxlen

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of the stored entries, oldest first."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int | None = None,
    ) -> None:
        """Record an event, evicting the oldest entry if the buffer is full."""
        self._entries.append(LogEntry(level=level, message=message, source=source, step=step))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return stored entries at or above *min_level* from *source*.

        Either criterion may be omitted.
        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
        ]

    def clear(self) -> None:
        """Discard every stored entry."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of stored entries."""
        return len(self._entries)
