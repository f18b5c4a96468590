"""Handle-style API — free functions over an optional store handle.

Some callers prefer to hold a *handle* and pass it to functions, the way
the C-era interface worked::

    store = create()
    if store is None:
        ...  # out of memory
    set_string(store, "name", "value")
    save(store, "app.conf")
    free(store)

Each function accepts ``None`` for the handle and treats it as a
missing argument: mutations and file operations return False, lookups
return the default, and ``free(None)`` does nothing.  Everything else is
delegated to ``Settings``.
"""

from settings_store.config import StoreConfig
from settings_store.logging import Logger
from settings_store.memory import Allocator
from settings_store.persistence import PathLike
from settings_store.settings import Settings


def create(
    *,
    config: StoreConfig | None = None,
    allocator: Allocator | None = None,
    logger: Logger | None = None,
) -> Settings | None:
    """Create an empty store, or return None if it cannot be allocated."""
    return Settings.create(config=config, allocator=allocator, logger=logger)


def free(store: Settings | None) -> None:
    """Release a store and all of its pairs.  ``None`` is a no-op."""
    if store is not None:
        store.free()


def load(store: Settings | None, path: PathLike | None) -> bool:
    """Merge a settings file into *store*."""
    if store is None:
        return False
    return store.load(path)


def save(store: Settings | None, path: PathLike | None) -> bool:
    """Write *store* to a settings file."""
    if store is None:
        return False
    return store.save(path)


def get_string(store: Settings | None, key: str | None, default: str | None = None) -> str | None:
    """Return the string at *key*, or *default*."""
    if store is None:
        return default
    return store.get_string(key, default)


def get_int(store: Settings | None, key: str | None, default: int = 0) -> int:
    """Return the integer at *key*, or *default*."""
    if store is None:
        return default
    return store.get_int(key, default)


def get_float(store: Settings | None, key: str | None, default: float = 0.0) -> float:
    """Return the float at *key*, or *default*."""
    if store is None:
        return default
    return store.get_float(key, default)


def set_string(store: Settings | None, key: str | None, value: str | None) -> bool:
    """Insert or replace a string value."""
    if store is None:
        return False
    return store.set_string(key, value)


def set_int(store: Settings | None, key: str | None, value: int) -> bool:
    """Insert or replace an integer value."""
    if store is None:
        return False
    return store.set_int(key, value)


def set_float(store: Settings | None, key: str | None, value: float) -> bool:
    """Insert or replace a float value."""
    if store is None:
        return False
    return store.set_float(key, value)


def remove(store: Settings | None, key: str | None) -> bool:
    """Remove *key* from *store*."""
    if store is None:
        return False
    return store.remove(key)
