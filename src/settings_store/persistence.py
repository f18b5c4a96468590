"""Settings persistence — load and save the ``key = value`` text format.

The on-disk format is as plain as it gets::

    key name = some value
    another key = another value

- One record per line, split at the *first* ``=``.
- Whitespace around keys and values is ignored on load and written as
  exactly one space on each side of ``=`` on save.
- Lines without ``=`` are not records and are skipped.  There is no
  comment syntax, no quoting and no escaping.

Loading is **best effort**.  Once the file is open, every line is read
and every well-formed record is offered to the store; a record the store
refuses (too long for a bounded slot, out of memory) is counted and the
load carries on.  Only failing to open the file fails the load as a
whole, and that happens before anything is imported.  Later records win
over earlier ones for the same key, but a key keeps the position of its
first appearance.

How lines are read depends on the store's capacity policy: bounded
stores read at most ``line_length - 1`` characters at a time, so an
overlong line arrives as several chunks (each parsed on its own);
unbounded stores read whole lines of any length.

Records end at ``\\n`` only.  A lone ``\\r`` stays inside its line, and the
``\\r`` of a CRLF ending is trimmed away with the other whitespace.

Files are text in UTF-8 with ``surrogateescape``, so any byte sequence
loads and saves back unchanged.  A string that has no byte form at all
(an unpaired surrogate set directly in Python) makes the save fail before
the file is touched.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import IO, TypeAlias

from settings_store.memory import OutOfMemoryError
from settings_store.pairs import InvalidArgumentError, PairStore, PairStoreError
from settings_store.text import split_on_first_equals

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

PathLike: TypeAlias = str | os.PathLike[str]


class PersistenceError(Exception):
    """Raise when a settings file cannot be opened or read."""


@dataclass(frozen=True)
class LoadReport:
    """Outcome of one load.

    Attributes:
        applied: Records stored successfully.
        skipped_lines: Line numbers (1-based) with no ``=``.
        rejected_lines: Line numbers whose record the store refused.

    """

    applied: int = 0
    skipped_lines: tuple[int, ...] = ()
    rejected_lines: tuple[int, ...] = ()

    @property
    def skipped(self) -> int:
        """Return how many lines were skipped."""
        return len(self.skipped_lines)

    @property
    def rejected(self) -> int:
        """Return how many records were refused."""
        return len(self.rejected_lines)


def _require_path(path: PathLike | None) -> PathLike:
    if path is None:
        msg = "path is required"
        raise InvalidArgumentError(msg)
    return path


def _open(path: PathLike, *, writing: bool) -> IO[str]:
    """Open a settings file, translating failures to PersistenceError."""
    try:
        if writing:
            return open(path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n")  # noqa: SIM115
        return open(path, encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n")  # noqa: SIM115
    except OSError as exc:
        purpose = "writing" if writing else "reading"
        msg = f"Cannot open {os.fspath(path)!r} for {purpose}: {exc.strerror}"
        raise PersistenceError(msg) from exc


def read_records(handle: IO[str], *, chunk: int | None = None) -> Iterator[str]:
    """Yield the lines of an open settings file.

    Args:
        handle: A text file opened for reading.
        chunk: Most characters per line, or None for whole lines.

    """
    if chunk is None:
        yield from handle
        return
    while line := handle.readline(chunk):
        yield line


def load_pairs(store: PairStore, path: PathLike | None) -> LoadReport:
    """Read a settings file into a store.

    Args:
        store: The store to populate (existing pairs are kept or replaced).
        path: The file to read.

    Returns:
        A LoadReport describing what was applied, skipped and rejected.

    Raises:
        InvalidArgumentError: If path is None.
        PersistenceError: If the file cannot be opened or read.

    """
    target = _require_path(path)
    handle = _open(target, writing=False)
    applied = 0
    skipped: list[int] = []
    rejected: list[int] = []
    with handle:
        try:
            for number, line in enumerate(read_records(handle, chunk=store.config.line_chunk), start=1):
                record = split_on_first_equals(line)
                if record is None:
                    skipped.append(number)
                    continue
                try:
                    store.set(*record)
                except (PairStoreError, OutOfMemoryError):
                    rejected.append(number)
                    continue
                applied += 1
        except OSError as exc:
            msg = f"Error reading {os.fspath(target)!r}: {exc}"
            raise PersistenceError(msg) from exc
    return LoadReport(applied=applied, skipped_lines=tuple(skipped), rejected_lines=tuple(rejected))


def dump_pairs(store: PairStore, path: PathLike | None) -> int:
    """Write every pair to a settings file, one ``key = value`` per line.

    The records are rendered and encoded before the file is opened, so a
    value that cannot be written leaves any existing file untouched.  The
    file is then truncated; an empty store gives an empty file.

    Args:
        store: The store to save.
        path: The file to write.

    Returns:
        The number of pairs written.

    Raises:
        InvalidArgumentError: If path is None.
        PersistenceError: If a pair cannot be encoded, or the file cannot
            be opened or written.

    """
    target = _require_path(path)
    lines = [f"{key} = {value}\n" for key, value in store]
    text = "".join(lines)
    try:
        text.encode(ENCODING, ENCODING_ERRORS)
    except UnicodeEncodeError as exc:
        msg = f"Cannot encode settings for {os.fspath(target)!r}: {exc.reason}"
        raise PersistenceError(msg) from exc
    handle = _open(target, writing=True)
    with handle:
        try:
            handle.write(text)
        except OSError as exc:
            msg = f"Error writing {os.fspath(target)!r}: {exc}"
            raise PersistenceError(msg) from exc
    return len(lines)
