"""settings_store — an ordered key/value settings store with text-file persistence.

Embed a ``Settings`` object in a program to hold named configuration
values with defaults, then load and save them as ``key = value`` lines::

    from settings_store import Settings

    settings = Settings()
    settings.load("app.conf")
    port = settings.get_int("port", 8080)
    settings.set_string("theme", "dark")
    settings.save("app.conf")

Re-exports the public symbols of the subpackages.
"""

from settings_store.config import (
    DEFAULT_KEY_LENGTH,
    DEFAULT_LINE_LENGTH,
    DEFAULT_VALUE_LENGTH,
    CapacityPolicy,
    StoreConfig,
)
from settings_store.logging import DEFAULT_LOG_CAPACITY, LogEntry, Logger, LogLevel
from settings_store.memory import Allocator, MemoryManager, OutOfMemoryError
from settings_store.pairs import (
    CapacityExceededError,
    InvalidArgumentError,
    PairNotFoundError,
    PairStore,
    PairStoreError,
)
from settings_store.persistence import LoadReport, PersistenceError, dump_pairs, load_pairs
from settings_store.settings import Settings

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_KEY_LENGTH",
    "DEFAULT_LINE_LENGTH",
    "DEFAULT_LOG_CAPACITY",
    "DEFAULT_VALUE_LENGTH",
    "Allocator",
    "CapacityExceededError",
    "CapacityPolicy",
    "InvalidArgumentError",
    "LoadReport",
    "LogEntry",
    "LogLevel",
    "Logger",
    "MemoryManager",
    "OutOfMemoryError",
    "PairNotFoundError",
    "PairStore",
    "PairStoreError",
    "PersistenceError",
    "Settings",
    "StoreConfig",
    "__version__",
    "dump_pairs",
    "load_pairs",
]
