"""Tests for the Settings store.

``Settings`` is the public contract: every operation reports success or
failure instead of raising, lookups fall back to defaults, and typed
values are stored as text and parsed back permissively.
"""

from pathlib import Path

from settings_store.config import StoreConfig
from settings_store.logging import DEFAULT_LOG_CAPACITY, Logger, LogLevel
from settings_store.memory import MemoryManager
from settings_store.pairs import STORE_HEADER_SIZE
from settings_store.settings import Settings
from settings_store.text import LONG_MAX

TOO_LONG = 500
OVERLONG_DIGITS = 5000
SKIPPED_LINES = 600


def _settings(**values: str) -> Settings:
    """Create settings holding the given string values in order."""
    settings = Settings()
    for key, value in values.items():
        assert settings.set_string(key, value)
    return settings


class TestCreate:
    """Verify store creation and teardown."""

    def test_create_returns_store(self) -> None:
        """create() should return an empty store."""
        settings = Settings.create()
        assert settings is not None
        assert len(settings) == 0

    def test_create_without_memory_returns_none(self) -> None:
        """Allocation failure is reported as None."""
        logger = Logger()
        assert Settings.create(allocator=MemoryManager(capacity=0), logger=logger) is None
        assert logger.filter(min_level=LogLevel.ERROR)

    def test_free_releases_memory(self) -> None:
        """free() returns every block to the allocator."""
        mm = MemoryManager()
        settings = Settings(allocator=mm)
        settings.set_string("foo", "abc")
        settings.free()
        assert mm.block_count == 0
        assert settings.freed

    def test_free_twice_is_noop(self) -> None:
        """A second free() does nothing."""
        settings = Settings()
        settings.free()
        settings.free()
        assert settings.freed

    def test_freed_store_rejects_writes(self) -> None:
        """After free(), writes fail and reads give defaults."""
        settings = _settings(foo="abc")
        settings.free()
        assert not settings.set_string("foo", "def")
        assert settings.get_string("foo", "D") == "D"
        assert not settings.remove("foo")
        assert len(settings) == 0
        assert settings.config is None


class TestStrings:
    """Verify string values."""

    def test_add(self) -> None:
        """Several keys can be stored and read back."""
        settings = _settings(foo="abc", bar="def", baz="ghi")
        assert settings.get_string("foo", "ERROR") == "abc"
        assert settings.get_string("bar", "ERROR") == "def"
        assert settings.get_string("baz", "ERROR") == "ghi"

    def test_add_without_memory(self) -> None:
        """A set that cannot allocate fails cleanly."""
        mm = MemoryManager(capacity=STORE_HEADER_SIZE)
        settings = Settings(allocator=mm)
        assert not settings.set_string("foo", "abc")
        assert "foo" not in settings

    def test_replace(self) -> None:
        """Setting a key again replaces its value."""
        settings = _settings(foo="abc")
        assert settings.set_string("foo", "def")
        assert settings.get_string("foo", "ERROR") == "def"

    def test_null_key(self) -> None:
        """A None key is rejected."""
        settings = Settings()
        assert not settings.set_string(None, "abc")

    def test_null_value(self) -> None:
        """A None value is rejected and the old value kept."""
        settings = _settings(foo="abc")
        assert not settings.set_string("foo", None)
        assert settings.get_string("foo") == "abc"

    def test_empty_key(self) -> None:
        """The empty string is a valid key."""
        settings = _settings(**{"": "abc"})
        assert settings.get_string("", "ERROR") == "abc"

    def test_empty_value(self) -> None:
        """The empty string is a valid value."""
        settings = _settings(foo="")
        assert settings.get_string("foo", "ERROR") == ""

    def test_missing(self) -> None:
        """A missing key gives the default."""
        assert Settings().get_string("foo", "abc") == "abc"

    def test_missing_null_key(self) -> None:
        """A None key gives the default even when other keys exist."""
        settings = _settings(foo="abc")
        assert settings.get_string(None, "ERROR") == "ERROR"

    def test_long_key_accepted_when_unbounded(self) -> None:
        """Unbounded stores take keys of any length."""
        settings = Settings()
        assert settings.set_string("X" * TOO_LONG, "abc")

    def test_too_long_key_when_bounded(self) -> None:
        """Bounded stores reject overlong keys."""
        settings = Settings(config=StoreConfig.bounded_to())
        assert not settings.set_string("X" * TOO_LONG, "abc")
        assert len(settings) == 0

    def test_too_long_value_when_bounded(self) -> None:
        """Bounded stores reject overlong values."""
        settings = Settings(config=StoreConfig.bounded_to())
        assert not settings.set_string("foo", "X" * TOO_LONG)

    def test_rejection_is_logged(self) -> None:
        """A refused write leaves a warning naming the key."""
        settings = Settings(config=StoreConfig.bounded_to())
        settings.set_string("foo", "X" * TOO_LONG)
        warnings = settings.logger.filter(min_level=LogLevel.WARNING, key="foo")
        assert len(warnings) == 1


class TestIntegers:
    """Verify integer values."""

    def test_add(self) -> None:
        """Integers round-trip through the store."""
        settings = Settings()
        assert settings.set_int("foo", 1264)
        assert settings.set_int("bar", 456)
        assert settings.get_int("foo", 9999) == 1264
        assert settings.get_int("bar", 9999) == 456

    def test_negative(self) -> None:
        """Negative integers keep their sign."""
        settings = Settings()
        assert settings.set_int("foo", -789)
        assert settings.get_int("foo", 9999) == -789

    def test_stored_as_decimal_text(self) -> None:
        """The underlying value is plain decimal."""
        settings = Settings()
        settings.set_int("foo", -42)
        assert settings.get_string("foo") == "-42"

    def test_replace(self) -> None:
        """A new integer replaces the old one."""
        settings = Settings()
        settings.set_int("foo", 1264)
        settings.set_int("foo", 456)
        assert settings.get_int("foo", 9999) == 456

    def test_null_key(self) -> None:
        """A None key is rejected."""
        assert not Settings().set_int(None, 1234)

    def test_empty_key(self) -> None:
        """The empty string is a valid key."""
        settings = Settings()
        assert settings.set_int("", 1264)
        assert settings.get_int("", 9999) == 1264

    def test_missing(self) -> None:
        """A missing key gives the default."""
        assert Settings().get_int("foo", 1264) == 1264

    def test_malformed_text_parses_permissively(self) -> None:
        """Non-numeric text reads as 0, numeric prefixes as the prefix."""
        settings = _settings(word="hello", prefix="12 monkeys")
        assert settings.get_int("word", 9999) == 0
        assert settings.get_int("prefix", 9999) == 12

    def test_non_integer_rejected(self) -> None:
        """set_int refuses values that are not integers."""
        settings = Settings()
        assert not settings.set_int("foo", "12")  # type: ignore[arg-type]
        assert "foo" not in settings

    def test_unformattable_integer_rejected(self) -> None:
        """An integer too long to render as text is refused, not raised."""
        settings = Settings()
        assert not settings.set_int("foo", 10**OVERLONG_DIGITS)
        assert "foo" not in settings
        assert settings.logger.filter(min_level=LogLevel.WARNING, key="foo")

    def test_overlong_stored_digits_saturate(self) -> None:
        """get_int still answers when the stored digits are too long to convert."""
        settings = _settings(foo="1" * OVERLONG_DIGITS)
        assert settings.get_int("foo", 9) == LONG_MAX


class TestFloats:
    """Verify float values."""

    def test_add(self) -> None:
        """Floats round-trip through the store."""
        settings = Settings()
        assert settings.set_float("foo", 123.1)
        assert settings.set_float("bar", 456.2)
        assert settings.set_float("baz", 789.3)
        assert settings.get_float("foo", 9999.0) == 123.1
        assert settings.get_float("bar", 9999.0) == 456.2
        assert settings.get_float("baz", 9999.0) == 789.3

    def test_negative(self) -> None:
        """Negative floats keep their sign."""
        settings = Settings()
        settings.set_float("foo", -123.1)
        assert settings.get_float("foo", 9999.0) == -123.1

    def test_stored_as_fixed_point(self) -> None:
        """The underlying value has six decimals."""
        settings = Settings()
        settings.set_float("foo", 123.1)
        assert settings.get_string("foo") == "123.100000"

    def test_integer_argument_accepted(self) -> None:
        """An int is a valid float value."""
        settings = Settings()
        assert settings.set_float("foo", 2)
        assert settings.get_string("foo") == "2.000000"

    def test_null_key(self) -> None:
        """A None key is rejected."""
        assert not Settings().set_float(None, 123.1)

    def test_missing(self) -> None:
        """A missing key gives the default."""
        assert Settings().get_float("foo", 123.1) == 123.1

    def test_invalid_text_reads_as_zero(self) -> None:
        """Text with no numeric prefix reads as 0.0."""
        settings = _settings(foo="abc")
        assert settings.get_float("foo", 9999.0) == 0.0

    def test_non_number_rejected(self) -> None:
        """set_float refuses values that are not numbers."""
        assert not Settings().set_float("foo", "1.5")  # type: ignore[arg-type]

    def test_integer_beyond_float_range_rejected(self) -> None:
        """An int too large for a float is refused, not raised."""
        settings = Settings()
        assert not settings.set_float("foo", 10**400)
        assert "foo" not in settings


class TestRemove:
    """Verify removal."""

    def test_remove_existing(self) -> None:
        """A removed key falls back to the default."""
        settings = _settings(foo="abc")
        assert settings.remove("foo")
        assert settings.get_string("foo", "D") == "D"

    def test_remove_twice(self) -> None:
        """The second removal fails."""
        settings = _settings(foo="abc")
        assert settings.remove("foo")
        assert not settings.remove("foo")

    def test_remove_missing(self) -> None:
        """Removing a key that was never set fails."""
        assert not Settings().remove("foo")

    def test_remove_null_key(self) -> None:
        """Removing a None key fails."""
        assert not Settings().remove(None)


class TestIteration:
    """Verify ordered views of the store."""

    def test_keys_in_insertion_order(self) -> None:
        """Iteration follows first-set order, unaffected by replacement."""
        settings = _settings(a="1", b="2", c="3")
        settings.set_string("b", "changed")
        assert list(settings) == ["a", "b", "c"]
        assert settings.items() == [("a", "1"), ("b", "changed"), ("c", "3")]

    def test_clear(self) -> None:
        """clear() empties the store but keeps it usable."""
        settings = _settings(a="1", b="2")
        assert settings.clear()
        assert len(settings) == 0
        assert settings.set_string("c", "3")


class TestLoad:
    """Verify loading from a file."""

    def test_load(self, tmp_path: Path) -> None:
        """Keys, ints and floats are all readable after a load."""
        path = tmp_path / "settings.conf"
        path.write_text("foo  bar  = abc def =   ghi   \n  bar =   54321 \nbaz =  123.1\n")
        settings = Settings()
        assert settings.load(path)
        assert settings.get_string("foo  bar", "ERROR") == "abc def =   ghi"
        assert settings.get_int("bar", 9999) == 54321
        assert settings.get_float("baz", 9999.0) == 123.1

    def test_load_accepts_str_path(self, tmp_path: Path) -> None:
        """Paths may be given as strings."""
        path = tmp_path / "settings.conf"
        path.write_text("a = 1\n")
        settings = Settings()
        assert settings.load(str(path))
        assert settings.get_int("a") == 1

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """A missing file fails the load."""
        settings = Settings()
        assert not settings.load(tmp_path / "missing_file.txt")
        assert settings.last_load is None

    def test_load_null_path(self) -> None:
        """A None path fails the load."""
        assert not Settings().load(None)

    def test_load_reports_skipped_lines(self, tmp_path: Path) -> None:
        """Skipped lines are counted and logged, but the load succeeds."""
        path = tmp_path / "settings.conf"
        path.write_text("no equals here\na = 1\n")
        settings = Settings()
        assert settings.load(path)
        assert settings.last_load is not None
        assert settings.last_load.skipped == 1
        debug = settings.logger.filter(source="persistence")
        assert any("Line 1 skipped" in e.message for e in debug)

    def test_load_into_freed_store(self, tmp_path: Path) -> None:
        """A freed store cannot load."""
        path = tmp_path / "settings.conf"
        path.write_text("a = 1\n")
        settings = Settings()
        settings.free()
        assert not settings.load(path)


class TestSave:
    """Verify saving to a file."""

    def test_save(self, tmp_path: Path) -> None:
        """The saved file is exactly the canonical records in order."""
        settings = _settings(foo="abc def ghi", bar="54321", baz="123.1")
        path = tmp_path / "settings.conf"
        assert settings.save(path)
        assert path.read_bytes() == b"foo = abc def ghi\nbar = 54321\nbaz = 123.1\n"

    def test_save_empty(self, tmp_path: Path) -> None:
        """An empty store saves an empty file."""
        path = tmp_path / "settings.conf"
        assert Settings().save(path)
        assert path.read_bytes() == b""

    def test_save_null_path(self) -> None:
        """A None path fails the save."""
        assert not Settings().save(None)

    def test_save_unwritable(self, tmp_path: Path) -> None:
        """A path in a missing directory fails the save."""
        assert not _settings(a="1").save(tmp_path / "missing" / "settings.conf")

    def test_save_unencodable_value(self, tmp_path: Path) -> None:
        """A value with no byte form fails the save and keeps the old file."""
        path = tmp_path / "settings.conf"
        path.write_bytes(b"old = 1\n")
        settings = _settings(k="\ud800")
        assert not settings.save(path)
        assert path.read_bytes() == b"old = 1\n"

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saving and loading into a fresh store reproduces the mapping."""
        settings = _settings(name="demo", colour="blue")
        settings.set_int("port", 8080)
        settings.set_float("ratio", 0.75)
        path = tmp_path / "settings.conf"
        assert settings.save(path)

        restored = Settings()
        assert restored.load(path)
        assert restored.items() == settings.items()
        assert restored.get_int("port") == 8080
        assert restored.get_float("ratio") == 0.75


class TestLogRetention:
    """Verify that a store's own log stays bounded."""

    def test_repeated_loads_do_not_grow_log_past_capacity(self, tmp_path: Path) -> None:
        """Skipped-line entries from many loads are capped."""
        path = tmp_path / "settings.conf"
        path.write_text("no record here\n" * SKIPPED_LINES)
        settings = Settings()
        for _ in range(3):
            assert settings.load(path)
        assert len(settings.logger) == DEFAULT_LOG_CAPACITY

    def test_supplied_logger_is_used_as_is(self) -> None:
        """A caller's logger keeps its own capacity."""
        logger = Logger()
        settings = Settings(logger=logger)
        assert settings.logger is logger
