# src/taskdeck/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.task_models import FilterOptions
from ..tasks.task_store import TaskStore
from .ports import KeyValueStorage
from .theme import ThemePreference


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    storage: KeyValueStorage
    task_store: TaskStore
    theme: ThemePreference

    # Session-only view state (status/search/sort); discarded on exit.
    view: FilterOptions = field(default_factory=FilterOptions)

    # Serializes command handling when more than one connector is attached.
    lock: threading.Lock = field(default_factory=threading.Lock)
