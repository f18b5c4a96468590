"""Store event log — a small structured audit trail.

Every ``Settings`` instance keeps a log of what happened to it: when it
was created, what a load imported and skipped, which writes were
rejected and why.  The operations themselves still report plain
success/failure; the log is where the *reason* ends up.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — one immutable record (level, message, source, key).
- **Logger** — an append-only buffer with filtering, optionally capped
  so that a long-lived store does not grow its log without bound.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

# Entries kept by the log each Settings creates for itself.
DEFAULT_LOG_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "persistence").
        key: The settings key involved, if any.

    """

    level: LogLevel
    message: str
    source: str
    key: str | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with the key appended."""
        text = f"[{self.level.name}] {self.source}: {self.message}"
        if self.key is not None:
            text += f" (key={self.key!r})"
        return text


class Logger:
    """Append-only log buffer with filtering.

    With a ``capacity`` the oldest entries are dropped first once the
    buffer is full.
    """

    def __init__(self, *, capacity: int | None = None) -> None:
        """Create an empty logger.

        Args:
            capacity: Maximum entries kept, or None to keep everything.

        """
        if capacity is not None and capacity < 1:
            msg = f"capacity must be at least 1, got {capacity}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def entries(self) -> list[LogEntry]:
        """Return all retained entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        key: str | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            key: Settings key associated with the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, key=key))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        key: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching every given criterion.

        Args:
            min_level: If set, only entries at or above this level.
            source: If set, only entries from this source.
            key: If set, only entries about this key.

        Returns:
            A new list of matching entries.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
            and (key is None or e.key == key)
        ]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of retained entries."""
        return len(self._entries)
