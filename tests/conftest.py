# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.core.state import AppState
from taskdeck.storage.kv_store import MemoryKeyValueStore
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        log_dir=tmp_path,
        in_memory=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real composition root.

    NOTE: We keep the real SQLite storage here because its durability is part
    of what we want to test.
    """
    return create_initial_state(settings=settings)


@pytest.fixture()
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(storage: MemoryKeyValueStore, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, clock=clock)
