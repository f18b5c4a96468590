"""Memory accounting — the allocator capability behind every store.

A settings store never grabs memory directly.  It asks an **allocator**
for a block, may later ask to resize it, and finally hands it back:

- ``allocate(size)`` — reserve *size* bytes, returning a block handle.
- ``reallocate(block, size)`` — resize an existing block.
- ``release(block)`` — give the block back.

Any of the first two may fail with ``OutOfMemoryError``.  The store
treats that as an ordinary, recoverable failure of the operation that
asked: nothing is half-applied and the store stays usable.

``MemoryManager`` is the stock allocator.  It does not hand out real
memory (Python manages that for us); it *accounts* for it.  Each block
is a handle mapped to its size, and an optional ``capacity`` caps the
total.  Shrinking the capacity to what is already in use is a simple way
to make the very next allocation fail.
"""

from typing import Protocol


class OutOfMemoryError(Exception):
    """Raise when an allocation cannot be satisfied."""


class Allocator(Protocol):
    """The allocate / reallocate / release capability a store depends on."""

    def allocate(self, size: int) -> int:
        """Reserve *size* bytes and return a block handle."""
        ...

    def reallocate(self, block: int, size: int) -> int:
        """Resize *block* to *size* bytes and return its handle."""
        ...

    def release(self, block: int) -> None:
        """Return *block* to the allocator."""
        ...


class MemoryManager:
    """Byte-accounting allocator with an optional capacity.

    The manager owns one data structure: a dict mapping each live block
    handle to its size.  Handles are never reused, so a stale handle is
    always detected on release.
    """

    def __init__(self, *, capacity: int | None = None) -> None:
        """Create a memory manager.

        Args:
            capacity: Total bytes available, or None for no limit.

        """
        if capacity is not None and capacity < 0:
            msg = f"capacity must be non-negative, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._blocks: dict[int, int] = {}
        self._used = 0
        self._next_block = 1

    @property
    def capacity(self) -> int | None:
        """Return the byte capacity, or None if unlimited."""
        return self._capacity

    @property
    def used_bytes(self) -> int:
        """Return the number of bytes currently allocated."""
        return self._used

    @property
    def free_bytes(self) -> int | None:
        """Return the bytes still available, or None if unlimited."""
        if self._capacity is None:
            return None
        return self._capacity - self._used

    @property
    def block_count(self) -> int:
        """Return the number of live blocks."""
        return len(self._blocks)

    def size_of(self, block: int) -> int:
        """Return the size of a live block.

        Raises:
            ValueError: If the block is not allocated.

        """
        self._check_block(block)
        return self._blocks[block]

    def resize(self, capacity: int | None) -> None:
        """Change the byte capacity.

        Args:
            capacity: The new capacity, or None for no limit.

        Raises:
            ValueError: If the new capacity is below the bytes in use.

        """
        if capacity is not None and capacity < self._used:
            msg = f"Cannot shrink capacity to {capacity}: {self._used} bytes in use"
            raise ValueError(msg)
        self._capacity = capacity

    def allocate(self, size: int) -> int:
        """Reserve a new block.

        Args:
            size: Number of bytes requested.

        Returns:
            The new block handle.

        Raises:
            ValueError: If size is negative.
            OutOfMemoryError: If the request exceeds the remaining capacity.

        """
        self._check_size(size)
        if not self._fits(size):
            msg = f"Cannot allocate {size} bytes: only {self.free_bytes} free"
            raise OutOfMemoryError(msg)
        block = self._next_block
        self._next_block += 1
        self._blocks[block] = size
        self._used += size
        return block

    def reallocate(self, block: int, size: int) -> int:
        """Resize a live block in place.

        On failure the block keeps its old size.

        Args:
            block: The block to resize.
            size: The new size in bytes.

        Returns:
            The block handle (unchanged).

        Raises:
            ValueError: If the block is unknown or size is negative.
            OutOfMemoryError: If growing would exceed the capacity.

        """
        self._check_block(block)
        self._check_size(size)
        growth = size - self._blocks[block]
        if growth > 0 and not self._fits(growth):
            msg = f"Cannot grow block {block} by {growth} bytes: only {self.free_bytes} free"
            raise OutOfMemoryError(msg)
        self._blocks[block] = size
        self._used += growth
        return block

    def release(self, block: int) -> None:
        """Free a live block.

        Raises:
            ValueError: If the block is not allocated.

        """
        self._check_block(block)
        self._used -= self._blocks.pop(block)

    def _fits(self, size: int) -> bool:
        return self._capacity is None or self._used + size <= self._capacity

    def _check_block(self, block: int) -> None:
        """Raise ValueError if *block* is not a live handle."""
        if block not in self._blocks:
            msg = f"Block {block} is not allocated"
            raise ValueError(msg)

    @staticmethod
    def _check_size(size: int) -> None:
        if size < 0:
            msg = f"size must be non-negative, got {size}"
            raise ValueError(msg)
