# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the durable storage, task store and theme preference into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..core.theme import ThemePreference
from ..storage.kv_store import MemoryKeyValueStore, SqliteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStorage:
    if getattr(settings, "in_memory", False):
        logger.info("Using in-memory storage; nothing will be saved.")
        return MemoryKeyValueStore()
    _ensure_local_dirs(settings)
    return SqliteKeyValueStore(settings.storage_path)


def create_initial_state(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and storage) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back
    to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        storage = create_storage(settings)

    return AppState(
        settings=settings,
        storage=storage,
        task_store=TaskStore(storage),
        theme=ThemePreference(storage),
    )
