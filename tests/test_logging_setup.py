# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskdeck.logging_setup import (
    LOG_FILE_NAME,
    _ConsoleNoiseFilter,
    level_from_name,
    setup_logging,
)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_storage_debug_hidden_by_default() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("taskdeck.storage.kv_store", logging.DEBUG)) is False
    assert f.filter(_record("taskdeck.storage.cell", logging.WARNING)) is True


def test_storage_debug_shown_when_enabled() -> None:
    f = _ConsoleNoiseFilter(storage_level=logging.DEBUG)
    assert f.filter(_record("taskdeck.storage.kv_store", logging.DEBUG)) is True


def test_other_taskdeck_records_pass_and_foreign_need_error() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("taskdeck.tasks.task_store", logging.DEBUG)) is True
    assert f.filter(_record("py.warnings", logging.WARNING)) is False
    assert f.filter(_record("urllib3", logging.WARNING)) is False
    assert f.filter(_record("urllib3", logging.ERROR)) is True


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), ("nonsense", logging.INFO), (None, logging.INFO)],
)
def test_level_from_name(name, expected) -> None:
    assert level_from_name(name) == expected


@pytest.mark.parametrize(
    ("console_level", "storage_level"),
    [(logging.DEBUG, logging.DEBUG), (logging.INFO, logging.WARNING)],
)
def test_setup_logging_ties_storage_verbosity_to_console_level(
    tmp_path: Path, restore_root_logging, console_level: int, storage_level: int
) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=console_level)

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    root = logging.getLogger()
    filters = [f for h in root.handlers for f in h.filters if isinstance(f, _ConsoleNoiseFilter)]
    assert len(filters) == 1
    assert filters[0].storage_level == storage_level

    logging.getLogger("taskdeck.storage.kv_store").debug("kv set key=tasks")
    for h in root.handlers:
        h.flush()
    assert "kv set key=tasks" in log_file.read_text(encoding="utf-8")
