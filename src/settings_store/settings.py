"""Settings — the public face of the store.

``Settings`` wraps a ``PairStore`` and exposes the whole contract:

- ``create()`` / ``free()`` — lifecycle.
- ``get_string`` / ``get_int`` / ``get_float`` — lookups with defaults.
- ``set_string`` / ``set_int`` / ``set_float`` — insert or replace.
- ``remove`` — delete one key.
- ``load`` / ``save`` — the ``key = value`` text file.

Every operation reports a plain **success/failure** result instead of
raising.  The layers underneath raise typed exceptions
(``InvalidArgumentError``, ``CapacityExceededError``,
``OutOfMemoryError``, ``PersistenceError``); this class catches them at
the boundary, records the reason in its ``Logger``, and returns False.
Lookups never fail at all: a missing key yields the caller's default.

Typed values are stored as text.  Integers are written in decimal and
floats in six-decimal fixed point (``123.1`` → ``"123.100000"``).
Reading them back is permissive in the style of ``atoi``/``atof``:
malformed text parses as far as it can and otherwise gives zero.

Strings returned by ``get_string`` are the stored values themselves.
Python strings are immutable, so holding on to one is always safe.

Not thread-safe.  A store shared between threads must be guarded by the
caller, e.g. with a ``threading.Lock`` around every call.
"""

from collections.abc import Iterator

from settings_store.config import StoreConfig
from settings_store.logging import DEFAULT_LOG_CAPACITY, Logger, LogLevel
from settings_store.memory import Allocator, OutOfMemoryError
from settings_store.pairs import PairStore, PairStoreError
from settings_store.persistence import LoadReport, PathLike, PersistenceError, dump_pairs, load_pairs
from settings_store.text import format_float, format_int, parse_float, parse_int

_SOURCE_STORE = "store"
_SOURCE_PERSISTENCE = "persistence"


class Settings:
    """An ordered, in-memory key/value settings store.

    The store is usable from construction until ``free()``.  After that,
    lookups return their defaults and every other operation fails.
    """

    def __init__(
        self,
        *,
        config: StoreConfig | None = None,
        allocator: Allocator | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create an empty settings store.

        Prefer ``Settings.create()``, which reports allocation failure
        as ``None`` instead of raising.

        Args:
            config: Capacity policy and limits (unbounded by default).
            allocator: Memory capability for the store's pairs.
            logger: Event log to write to (by default a new one keeping the
                last ``DEFAULT_LOG_CAPACITY`` entries).

        Raises:
            OutOfMemoryError: If the store itself cannot be allocated.

        """
        self._logger = logger if logger is not None else Logger(capacity=DEFAULT_LOG_CAPACITY)
        self._store: PairStore | None = PairStore(config=config, allocator=allocator)
        self._last_load: LoadReport | None = None
        self._logger.log(LogLevel.INFO, f"Store created ({self._store.config.policy})", source=_SOURCE_STORE)

    @classmethod
    def create(
        cls,
        *,
        config: StoreConfig | None = None,
        allocator: Allocator | None = None,
        logger: Logger | None = None,
    ) -> "Settings | None":
        """Create a store, returning None if it cannot be allocated."""
        try:
            return cls(config=config, allocator=allocator, logger=logger)
        except OutOfMemoryError as exc:
            if logger is not None:
                logger.log(LogLevel.ERROR, f"Store creation failed: {exc}", source=_SOURCE_STORE)
            return None

    # -- Introspection ------------------------------------------------------

    @property
    def logger(self) -> Logger:
        """Return the store's event log."""
        return self._logger

    @property
    def freed(self) -> bool:
        """Return True once ``free()`` has been called."""
        return self._store is None

    @property
    def config(self) -> StoreConfig | None:
        """Return the store's configuration, or None once freed."""
        return self._store.config if self._store is not None else None

    @property
    def last_load(self) -> LoadReport | None:
        """Return the report from the most recent successful load."""
        return self._last_load

    def __len__(self) -> int:
        """Return the number of stored pairs."""
        return len(self._store) if self._store is not None else 0

    def __iter__(self) -> Iterator[str]:
        """Iterate over keys in insertion order."""
        return iter(self.keys())

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is stored."""
        return self._store is not None and key in self._store

    def keys(self) -> list[str]:
        """Return all keys in insertion order."""
        return self._store.keys() if self._store is not None else []

    def items(self) -> list[tuple[str, str]]:
        """Return all ``(key, value)`` pairs in insertion order."""
        return self._store.items() if self._store is not None else []

    # -- Lifecycle ----------------------------------------------------------

    def clear(self) -> bool:
        """Remove every pair, keeping the store usable."""
        if self._store is None:
            return False
        count = len(self._store)
        self._store.clear()
        self._logger.log(LogLevel.INFO, f"Cleared {count} pairs", source=_SOURCE_STORE)
        return True

    def free(self) -> None:
        """Release every pair and the store itself.

        Calling ``free()`` again is a no-op.
        """
        if self._store is None:
            return
        count = len(self._store)
        self._store.release()
        self._store = None
        self._logger.log(LogLevel.INFO, f"Store freed ({count} pairs released)", source=_SOURCE_STORE)

    # -- Strings ------------------------------------------------------------

    def get_string(self, key: str | None, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if it is not set."""
        if self._store is None:
            return default
        return self._store.get(key, default)

    def set_string(self, key: str | None, value: str | None) -> bool:
        """Insert or replace a string value.

        Returns:
            True on success; False if an argument is missing, the value
            does not fit, memory runs out, or the store was freed.

        """
        if self._store is None:
            self._logger.log(LogLevel.WARNING, "Set on a freed store", source=_SOURCE_STORE, key=key)
            return False
        try:
            self._store.set(key, value)
        except (PairStoreError, OutOfMemoryError) as exc:
            self._logger.log(LogLevel.WARNING, f"Set rejected: {exc}", source=_SOURCE_STORE, key=key)
            return False
        return True

    def remove(self, key: str | None) -> bool:
        """Remove *key* and its value.

        Returns:
            True if the key was removed; False if it was missing, None,
            or the store was freed.

        """
        if self._store is None:
            return False
        try:
            self._store.remove(key)
        except PairStoreError as exc:
            self._logger.log(LogLevel.DEBUG, f"Remove failed: {exc}", source=_SOURCE_STORE, key=key)
            return False
        return True

    # -- Typed accessors ----------------------------------------------------

    def get_int(self, key: str | None, default: int = 0) -> int:
        """Return the integer stored at *key*, or *default* if not set."""
        text = self.get_string(key)
        if text is None:
            return default
        return parse_int(text)

    def set_int(self, key: str | None, value: int) -> bool:
        """Store an integer as decimal text."""
        if not isinstance(value, int):
            self._logger.log(LogLevel.WARNING, "Set rejected: value is not an integer", source=_SOURCE_STORE, key=key)
            return False
        try:
            text = format_int(value)
        except ValueError as exc:
            self._logger.log(LogLevel.WARNING, f"Set rejected: {exc}", source=_SOURCE_STORE, key=key)
            return False
        return self.set_string(key, text)

    def get_float(self, key: str | None, default: float = 0.0) -> float:
        """Return the float stored at *key*, or *default* if not set."""
        text = self.get_string(key)
        if text is None:
            return default
        return parse_float(text)

    def set_float(self, key: str | None, value: float) -> bool:
        """Store a float as six-decimal fixed-point text."""
        if not isinstance(value, int | float):
            self._logger.log(LogLevel.WARNING, "Set rejected: value is not a number", source=_SOURCE_STORE, key=key)
            return False
        try:
            text = format_float(value)
        except OverflowError as exc:
            self._logger.log(LogLevel.WARNING, f"Set rejected: {exc}", source=_SOURCE_STORE, key=key)
            return False
        return self.set_string(key, text)

    # -- Persistence --------------------------------------------------------

    def load(self, path: PathLike | None) -> bool:
        """Merge the settings file at *path* into this store.

        Lines without ``=`` are skipped and records the store refuses are
        dropped; neither fails the load.  See ``last_load`` for counts.

        Returns:
            True once the file was opened and read; False if the path is
            None, cannot be opened, or the store was freed.

        """
        if self._store is None:
            return False
        try:
            report = load_pairs(self._store, path)
        except (PairStoreError, PersistenceError) as exc:
            self._logger.log(LogLevel.WARNING, f"Load failed: {exc}", source=_SOURCE_PERSISTENCE)
            return False
        for number in report.skipped_lines:
            self._logger.log(LogLevel.DEBUG, f"Line {number} skipped: no '='", source=_SOURCE_PERSISTENCE)
        for number in report.rejected_lines:
            self._logger.log(LogLevel.WARNING, f"Line {number} rejected by the store", source=_SOURCE_PERSISTENCE)
        self._logger.log(
            LogLevel.INFO,
            f"Loaded {report.applied} records ({report.skipped} skipped, {report.rejected} rejected)",
            source=_SOURCE_PERSISTENCE,
        )
        self._last_load = report
        return True

    def save(self, path: PathLike | None) -> bool:
        """Write every pair to *path* as ``key = value`` lines.

        Returns:
            True on success; False if the path is None, cannot be opened
            for writing, or the store was freed.

        """
        if self._store is None:
            return False
        try:
            written = dump_pairs(self._store, path)
        except (PairStoreError, PersistenceError) as exc:
            self._logger.log(LogLevel.WARNING, f"Save failed: {exc}", source=_SOURCE_PERSISTENCE)
            return False
        self._logger.log(LogLevel.INFO, f"Saved {written} records", source=_SOURCE_PERSISTENCE)
        return True
