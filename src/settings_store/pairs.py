"""Pair store — an ordered collection of unique key/value strings.

The store keeps its pairs in **insertion order**.  Replacing a key's
value leaves the pair where it is; only brand-new keys go on the end.
That order is what iteration and saving see.

Storage is an **arena**: a list of ``Pair`` records addressed by slot
index.  Each pair carries the slot indices of its predecessor and
successor, and the store remembers the first and last slot.  This is a
doubly-linked list without object references:

- Appending links the new slot after ``last`` — O(1).
- Removing splices a slot out by relinking its neighbours — O(1) once
  found — and pushes the slot onto a free stack for reuse.
- Lookup walks the links from ``first`` comparing keys exactly.  Settings
  stores hold tens of entries, so a linear scan is all that is needed.

Every pair is charged to an allocator (see ``memory.py``).  The store
asks for memory *before* touching any links, so an ``OutOfMemoryError``
always leaves the store exactly as it was.

Single-threaded: the store does no locking.  Callers sharing one store
between threads must serialise access themselves.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from settings_store.config import StoreConfig
from settings_store.memory import Allocator, MemoryManager

# Bytes charged for the store itself and for each pair's bookkeeping.
STORE_HEADER_SIZE = 16
PAIR_OVERHEAD = 16


class PairStoreError(Exception):
    """Base class for pair store failures."""


class InvalidArgumentError(PairStoreError):
    """Raise when a required argument is missing or of the wrong type."""


class CapacityExceededError(PairStoreError):
    """Raise when a key or value does not fit a bounded slot."""


class PairNotFoundError(PairStoreError):
    """Raise when removing a key the store does not hold."""


@dataclass
class Pair:
    """One key/value entry and its position in the store's sequence.

    Attributes:
        key: The key (unique within the store).
        value: The current value.
        block: Allocator handle charged for this pair.
        prev: Slot index of the predecessor, or None if first.
        next: Slot index of the successor, or None if last.

    """

    key: str
    value: str
    block: int
    prev: int | None = None
    next: int | None = None


class PairStore:
    """Ordered, unique key/value storage backed by an allocator.

    Values handed out are plain strings; callers never see the ``Pair``
    records themselves.
    """

    def __init__(
        self,
        *,
        config: StoreConfig | None = None,
        allocator: Allocator | None = None,
    ) -> None:
        """Create an empty store, charging its header to the allocator.

        Args:
            config: Capacity policy and limits (unbounded by default).
            allocator: Memory capability (a fresh ``MemoryManager`` by default).

        Raises:
            OutOfMemoryError: If the header cannot be allocated.

        """
        self._config = config if config is not None else StoreConfig()
        self._allocator: Allocator = allocator if allocator is not None else MemoryManager()
        self._header: int | None = self._allocator.allocate(STORE_HEADER_SIZE)
        self._slots: list[Pair | None] = []
        self._free_slots: list[int] = []
        self._first: int | None = None
        self._last: int | None = None
        self._count = 0

    @property
    def config(self) -> StoreConfig:
        """Return the store's configuration."""
        return self._config

    @property
    def allocator(self) -> Allocator:
        """Return the allocator the store charges."""
        return self._allocator

    @property
    def released(self) -> bool:
        """Return True once the store has been torn down."""
        return self._header is None

    def __len__(self) -> int:
        """Return the number of pairs."""
        return self._count

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` tuples in insertion order."""
        index = self._first
        while index is not None:
            pair = self._pair_at(index)
            yield pair.key, pair.value
            index = pair.next

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is present."""
        return isinstance(key, str) and self._find(key) is not None

    def keys(self) -> list[str]:
        """Return all keys in insertion order."""
        return [key for key, _ in self]

    def items(self) -> list[tuple[str, str]]:
        """Return all ``(key, value)`` pairs in insertion order."""
        return list(self)

    def get(self, key: str | None, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if absent.

        A ``None`` key never matches anything.
        """
        if key is None:
            return default
        index = self._find(key)
        if index is None:
            return default
        return self._pair_at(index).value

    def set(self, key: str | None, value: str | None) -> None:
        """Insert or replace a pair.

        An existing key keeps its position and gets the new value; a new
        key is appended.  Empty strings are valid keys and values.

        Args:
            key: The key.
            value: The value.

        Raises:
            InvalidArgumentError: If key or value is None or not a string,
                or the store has been released.
            CapacityExceededError: If a bounded slot is too small.
            OutOfMemoryError: If the allocator refuses; nothing changes.

        """
        self._check_open()
        if key is None or value is None:
            msg = "key and value are required"
            raise InvalidArgumentError(msg)
        if not isinstance(key, str) or not isinstance(value, str):  # pyright: ignore[reportUnnecessaryIsInstance]
            msg = f"key and value must be strings, got {type(key).__name__} and {type(value).__name__}"
            raise InvalidArgumentError(msg)
        self._check_capacity(key, value)

        size = self._pair_size(key, value)
        index = self._find(key)
        if index is not None:
            pair = self._pair_at(index)
            if not self._config.bounded:
                pair.block = self._allocator.reallocate(pair.block, size)
            pair.value = value
            return

        block = self._allocator.allocate(size)
        self._append(Pair(key=key, value=value, block=block))

    def remove(self, key: str | None) -> None:
        """Unlink and release the pair for *key*.

        Raises:
            InvalidArgumentError: If key is None or the store is released.
            PairNotFoundError: If the key is not present.

        """
        self._check_open()
        if key is None:
            msg = "key is required"
            raise InvalidArgumentError(msg)
        index = self._find(key)
        if index is None:
            msg = f"Key {key!r} not found"
            raise PairNotFoundError(msg)
        pair = self._pair_at(index)
        self._unlink(index, pair)
        self._allocator.release(pair.block)

    def clear(self) -> None:
        """Release every pair, leaving an empty but usable store."""
        index = self._first
        while index is not None:
            pair = self._pair_at(index)
            index = pair.next
            self._allocator.release(pair.block)
        self._slots.clear()
        self._free_slots.clear()
        self._first = None
        self._last = None
        self._count = 0

    def release(self) -> None:
        """Tear down the store: release every pair, then the header.

        Releasing an already-released store is a no-op.
        """
        if self._header is None:
            return
        self.clear()
        self._allocator.release(self._header)
        self._header = None

    # -- Internals ----------------------------------------------------------

    def _check_open(self) -> None:
        if self._header is None:
            msg = "store has been released"
            raise InvalidArgumentError(msg)

    def _check_capacity(self, key: str, value: str) -> None:
        """Raise CapacityExceededError if a bounded slot cannot hold the pair."""
        max_key = self._config.max_key_chars
        max_value = self._config.max_value_chars
        if max_key is not None and len(key) > max_key:
            msg = f"Key of {len(key)} characters exceeds the limit of {max_key}"
            raise CapacityExceededError(msg)
        if max_value is not None and len(value) > max_value:
            msg = f"Value of {len(value)} characters exceeds the limit of {max_value}"
            raise CapacityExceededError(msg)

    def _pair_size(self, key: str, value: str) -> int:
        """Return the bytes to charge for a pair (terminators included)."""
        if self._config.bounded:
            return self._config.key_length + self._config.value_length + PAIR_OVERHEAD
        return len(key) + 1 + len(value) + 1 + PAIR_OVERHEAD

    def _find(self, key: str) -> int | None:
        """Return the slot index holding *key*, or None."""
        index = self._first
        while index is not None:
            pair = self._pair_at(index)
            if pair.key == key:
                return index
            index = pair.next
        return None

    def _pair_at(self, index: int) -> Pair:
        pair = self._slots[index]
        if pair is None:
            msg = f"Slot {index} is empty"
            raise PairStoreError(msg)
        return pair

    def _append(self, pair: Pair) -> None:
        """Place *pair* in a free slot and link it after the last pair."""
        if self._free_slots:
            index = self._free_slots.pop()
            self._slots[index] = pair
        else:
            index = len(self._slots)
            self._slots.append(pair)

        pair.prev = self._last
        pair.next = None
        if self._last is None:
            self._first = index
        else:
            self._pair_at(self._last).next = index
        self._last = index
        self._count += 1

    def _unlink(self, index: int, pair: Pair) -> None:
        """Splice the pair at *index* out of the sequence and free its slot."""
        if pair.next is None:
            self._last = pair.prev
        else:
            self._pair_at(pair.next).prev = pair.prev
        if pair.prev is None:
            self._first = pair.next
        else:
            self._pair_at(pair.prev).next = pair.next
        self._slots[index] = None
        self._free_slots.append(index)
        self._count -= 1
