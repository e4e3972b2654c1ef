# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from ..core.ports import KeyValueStorage
from ..storage.cell import PersistentCell
from .task_models import Priority, Task, TaskFormData, new_task_id, now_ms

logger = logging.getLogger(__name__)

TASKS_STORAGE_KEY = "tasks"

_MUTABLE_FIELDS = ("title", "description", "priority", "completed")
_PRIORITY_VALUES = frozenset(p.value for p in Priority)


def _encode_tasks(tasks: tuple[Task, ...]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


def _decode_tasks(raw: Any) -> tuple[Task, ...]:
    """
    Rebuild the collection from its JSON form.

    A payload that is not a list is rejected as a whole (the cell falls back
    to an empty collection); individual bad records are skipped.
    """
    if not isinstance(raw, list):
        raise TypeError(f"expected a list of tasks, got {type(raw).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for i, item in enumerate(raw):
        if not isinstance(item, Mapping):
            logger.warning("Skipping task record #%d: not an object", i)
            continue
        try:
            task = Task.from_dict(item)
        except (ValueError, TypeError) as e:
            logger.warning("Skipping task record #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping task record #%d: duplicate id %s", i, task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return tuple(out)


def _form_fields(data: TaskFormData | Mapping[str, Any]) -> tuple[str, str, Priority]:
    if isinstance(data, TaskFormData):
        return data.title.strip(), data.description.strip(), Priority.parse(data.priority)
    title = str(data.get("title") or "").strip()
    description = str(data.get("description") or "").strip()
    return title, description, Priority.parse(data.get("priority"))


def _clean_updates(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the mutable fields, normalized; id/created_at never pass."""
    clean: dict[str, Any] = {}
    for name in _MUTABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name in ("title", "description"):
            clean[name] = str(value if value is not None else "").strip()
        elif name == "priority":
            if isinstance(value, str) and value.strip().lower() in _PRIORITY_VALUES:
                clean[name] = Priority(value.strip().lower())
            else:
                logger.warning("Ignoring unknown priority %r in update", value)
        else:
            clean[name] = bool(value)

    ignored = set(fields) - set(_MUTABLE_FIELDS)
    if ignored:
        logger.debug("Ignoring non-mutable task fields in update: %s", sorted(ignored))
    return clean


class TaskStore:
    """
    Canonical, insertion-ordered task collection persisted under "tasks".

    Every mutation builds a new tuple (copy-on-write); Task records are
    frozen and replaced via dataclasses.replace. Snapshots handed out earlier
    stay valid.

    Thread-safety:
    - one lock serializes each read-modify-write cycle
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._cell: PersistentCell[tuple[Task, ...]] = PersistentCell(
            storage,
            TASKS_STORAGE_KEY,
            (),
            encode=_encode_tasks,
            decode=_decode_tasks,
        )
        logger.info("TaskStore ready total=%s", len(self._cell.value))

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._cell.value

    def list_tasks(self) -> list[Task]:
        return list(self._cell.value)

    def get_task(self, task_id: str) -> Task | None:
        for task in self._cell.value:
            if task.id == task_id:
                return task
        return None

    def find_by_prefix(self, prefix: str) -> list[Task]:
        """Tasks whose id starts with prefix (used for abbreviated ids)."""
        prefix = (prefix or "").strip()
        if not prefix:
            return []
        return [t for t in self._cell.value if t.id.startswith(prefix)]

    # ---- write side ----

    def add_task(self, data: TaskFormData | Mapping[str, Any]) -> Task:
        title, description, priority = _form_fields(data)
        with self._lock:
            current = self._cell.value
            task_id = self._id_factory()
            while any(t.id == task_id for t in current):
                task_id = self._id_factory()
            task = Task(
                id=task_id,
                title=title,
                description=description,
                priority=priority,
                completed=False,
                created_at=int(self._clock()),
            )
            self._cell.write(current + (task,))
        logger.debug("Task added id=%s priority=%s", task.id, task.priority.value)
        return task

    def update_task(self, task_id: str, **fields: Any) -> Task | None:
        updates = _clean_updates(fields)
        return self._replace_one(task_id, lambda t: replace(t, **updates))

    def toggle_complete(self, task_id: str) -> Task | None:
        return self._replace_one(task_id, lambda t: replace(t, completed=not t.completed))

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            current = self._cell.value
            remaining = tuple(t for t in current if t.id != task_id)
            if len(remaining) == len(current):
                logger.debug("delete_task: unknown id=%s (no-op)", task_id)
                return False
            self._cell.write(remaining)
        logger.debug("Task deleted id=%s", task_id)
        return True

    # ---- helpers ----

    def _replace_one(self, task_id: str, change: Callable[[Task], Task]) -> Task | None:
        with self._lock:
            current = self._cell.value
            for i, task in enumerate(current):
                if task.id == task_id:
                    updated = change(task)
                    self._cell.write(current[:i] + (updated,) + current[i + 1 :])
                    logger.debug("Task updated id=%s", task_id)
                    return updated
        logger.debug("Task update: unknown id=%s (no-op)", task_id)
        return None
