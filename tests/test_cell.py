# tests/test_cell.py

from __future__ import annotations

import json
import logging
from pathlib import Path

from taskdeck.core.theme import DARK_MODE_STORAGE_KEY, ThemePreference
from taskdeck.storage.cell import PersistentCell, read_value, write_value
from taskdeck.storage.kv_store import MemoryKeyValueStore, SqliteKeyValueStore

from .fakes import FailingReadStorage, FailingWriteStorage


def test_read_absent_key_falls_back_without_error() -> None:
    storage = MemoryKeyValueStore()
    result = read_value(storage, "missing", [1, 2])
    assert result.value == [1, 2]
    assert result.ok is False
    assert result.error is None


def test_read_corrupted_payload_falls_back_and_logs(caplog) -> None:
    storage = MemoryKeyValueStore({"k": "{not json"})
    with caplog.at_level(logging.WARNING, logger="taskdeck.storage.cell"):
        result = read_value(storage, "k", "fallback")
    assert result.value == "fallback"
    assert result.ok is False
    assert isinstance(result.error, ValueError)
    assert "k" in caplog.text


def test_read_decoder_rejection_is_a_fallback() -> None:
    def decode(raw):
        raise TypeError("nope")

    storage = MemoryKeyValueStore({"k": "123"})
    result = read_value(storage, "k", 0, decode)
    assert result.value == 0
    assert isinstance(result.error, TypeError)


def test_read_decoder_crash_of_any_kind_is_a_fallback() -> None:
    def decode(raw):
        return int(float(raw))

    storage = MemoryKeyValueStore({"k": "Infinity"})
    result = read_value(storage, "k", -1, decode)
    assert result.value == -1
    assert result.ok is False
    assert isinstance(result.error, OverflowError)


def test_write_encoder_crash_keeps_previous_payload() -> None:
    def encode(value):
        return value.upper()

    storage = MemoryKeyValueStore()
    assert write_value(storage, "k", "a", encode) is True

    assert write_value(storage, "k", 42, encode) is False

    assert storage.get_item("k") == '"A"'
    assert storage.write_count == 1


def test_cell_update_survives_encoder_crash() -> None:
    def encode(value):
        return value.upper()

    storage = MemoryKeyValueStore()
    cell = PersistentCell(storage, "k", "", encode=encode)
    cell.update("ok")
    assert cell.update(3) == 3
    assert cell.value == 3
    assert storage.get_item("k") == '"OK"'


def test_read_storage_error_is_a_fallback() -> None:
    result = read_value(FailingReadStorage(), "k", "d")
    assert result.value == "d"
    assert result.ok is False
    assert result.error is not None


def test_write_serialization_failure_keeps_previous_payload() -> None:
    storage = MemoryKeyValueStore()
    assert write_value(storage, "k", {"a": 1}) is True
    before = storage.get_item("k")

    assert write_value(storage, "k", {"bad": {1, 2}}) is False

    assert storage.get_item("k") == before
    assert storage.write_count == 1


def test_cell_reads_at_startup_and_writes_through() -> None:
    storage = MemoryKeyValueStore({"count": "5"})
    cell = PersistentCell(storage, "count", 0)
    assert cell.value == 5
    assert cell.last_read.ok is True

    assert cell.update(lambda prev: prev + 1) == 6
    assert cell.write(10) == 10
    assert json.loads(storage.get_item("count") or "null") == 10
    assert storage.write_count == 2


def test_cell_update_accepts_direct_value() -> None:
    storage = MemoryKeyValueStore()
    cell = PersistentCell(storage, "name", "")
    cell.update("hello")
    assert cell.value == "hello"
    assert storage.get_item("name") == '"hello"'


def test_cell_keeps_in_memory_value_when_write_fails() -> None:
    storage = FailingWriteStorage()
    cell = PersistentCell(storage, "k", 1)
    assert cell.update(2) == 2
    assert cell.value == 2
    assert storage.get_item("k") is None


def test_cell_failed_serialization_does_not_count_as_write() -> None:
    storage = MemoryKeyValueStore()
    cell = PersistentCell(storage, "k", [])
    cell.update([1])
    cell.update({object()})
    assert json.loads(storage.get_item("k") or "null") == [1]
    assert storage.write_count == 1


def test_sqlite_store_set_get_remove(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    kv = SqliteKeyValueStore(db)
    assert kv.get_item("a") is None

    kv.set_item("a", "1")
    kv.set_item("a", "2")
    kv.set_item("b", "x")
    assert kv.get_item("a") == "2"
    assert kv.keys() == ["a", "b"]

    # Survives a new instance on the same file.
    kv2 = SqliteKeyValueStore(db)
    assert kv2.get_item("b") == "x"

    kv2.remove_item("a")
    assert kv2.keys() == ["b"]


def test_theme_preference_toggle_persists() -> None:
    storage = MemoryKeyValueStore()
    theme = ThemePreference(storage)
    assert theme.is_dark is False

    assert theme.toggle() is True
    assert storage.get_item(DARK_MODE_STORAGE_KEY) == "true"
    assert ThemePreference(storage).is_dark is True


def test_theme_preference_rejects_non_boolean_payload() -> None:
    storage = MemoryKeyValueStore({DARK_MODE_STORAGE_KEY: '"yes"'})
    assert ThemePreference(storage).is_dark is False
