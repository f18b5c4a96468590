"""Store configuration — capacity policy and size limits.

A settings store can run under one of two **capacity policies**:

- ``UNBOUNDED`` — keys and values may be any length; their storage
  grows to fit.  Lines in a settings file are read whole, however long.
- ``BOUNDED`` — every key and value lives in a fixed-size slot.  A key
  of ``key_length`` characters or more (the slot also needs room for a
  terminator) is rejected, and likewise for values.  File lines are read
  in chunks of at most ``line_length - 1`` characters; the rest of an
  overlong line is read as the next chunk.

Both policies expose the same operations; only *when* a "too long"
failure happens differs.  The policy is fixed when a store is built and
never changes afterwards.
"""

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_KEY_LENGTH = 128
DEFAULT_VALUE_LENGTH = 128
DEFAULT_LINE_LENGTH = 1024

# A line buffer must hold at least one character plus its terminator.
_MIN_LINE_LENGTH = 2


class CapacityPolicy(StrEnum):
    """Select how key and value storage is sized."""

    UNBOUNDED = "unbounded"
    BOUNDED = "bounded"


@dataclass(frozen=True)
class StoreConfig:
    """Immutable sizing configuration for a settings store.

    Attributes:
        policy: The capacity policy.
        key_length: Slot size for keys, terminator included (bounded only).
        value_length: Slot size for values, terminator included (bounded only).
        line_length: Line buffer size used when reading files (bounded only).

    """

    policy: CapacityPolicy = CapacityPolicy.UNBOUNDED
    key_length: int = DEFAULT_KEY_LENGTH
    value_length: int = DEFAULT_VALUE_LENGTH
    line_length: int = DEFAULT_LINE_LENGTH

    def __post_init__(self) -> None:
        """Reject sizes that could never hold anything."""
        if self.key_length < 1:
            msg = f"key_length must be at least 1, got {self.key_length}"
            raise ValueError(msg)
        if self.value_length < 1:
            msg = f"value_length must be at least 1, got {self.value_length}"
            raise ValueError(msg)
        if self.line_length < _MIN_LINE_LENGTH:
            msg = f"line_length must be at least {_MIN_LINE_LENGTH}, got {self.line_length}"
            raise ValueError(msg)

    @property
    def bounded(self) -> bool:
        """Return True under the bounded capacity policy."""
        return self.policy is CapacityPolicy.BOUNDED

    @property
    def max_key_chars(self) -> int | None:
        """Return the longest key accepted, or None if unlimited."""
        return self.key_length - 1 if self.bounded else None

    @property
    def max_value_chars(self) -> int | None:
        """Return the longest value accepted, or None if unlimited."""
        return self.value_length - 1 if self.bounded else None

    @property
    def line_chunk(self) -> int | None:
        """Return the most characters read per line, or None for whole lines."""
        return self.line_length - 1 if self.bounded else None

    @classmethod
    def bounded_to(
        cls,
        *,
        key_length: int = DEFAULT_KEY_LENGTH,
        value_length: int = DEFAULT_VALUE_LENGTH,
        line_length: int = DEFAULT_LINE_LENGTH,
    ) -> "StoreConfig":
        """Build a bounded configuration with the given slot sizes."""
        return cls(
            policy=CapacityPolicy.BOUNDED,
            key_length=key_length,
            value_length=value_length,
            line_length=line_length,
        )
