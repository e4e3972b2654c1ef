# src/taskdeck/tasks/task_query.py

"""
Pure view pipeline over a task snapshot: status filter -> text search -> sort.

Nothing here mutates its input; every function returns a new list, even
when it degrades to identity for an unknown status/sort value.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .task_models import PRIORITY_WEIGHT, FilterStatus, SortOption, Task, TaskCounts


def _coerce(enum_cls: Any, raw: Any) -> Any | None:
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def filter_by_status(tasks: Iterable[Task], status: FilterStatus | str) -> list[Task]:
    wanted = _coerce(FilterStatus, status)
    if wanted is FilterStatus.ACTIVE:
        return [t for t in tasks if not t.completed]
    if wanted is FilterStatus.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def search_tasks(tasks: Iterable[Task], query: str | None) -> list[Task]:
    """Case-insensitive substring match on title or description."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(tasks)
    return [
        t for t in tasks if needle in t.title.lower() or needle in t.description.lower()
    ]


def _priority_key(task: Task) -> tuple[int, int]:
    return (PRIORITY_WEIGHT.get(task.priority, 0), task.created_at)


def sort_tasks(tasks: Iterable[Task], sort_by: SortOption | str) -> list[Task]:
    """
    date:     newest first
    priority: high -> low, then newest first within a priority
    other:    input order
    """
    mode = _coerce(SortOption, sort_by)
    if mode is SortOption.DATE:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if mode is SortOption.PRIORITY:
        return sorted(tasks, key=_priority_key, reverse=True)
    return list(tasks)


def process_tasks(
    tasks: Iterable[Task],
    status: FilterStatus | str,
    search_query: str | None,
    sort_by: SortOption | str,
) -> list[Task]:
    # Sort runs last, on the already reduced set.
    processed = filter_by_status(tasks, status)
    processed = search_tasks(processed, search_query)
    return sort_tasks(processed, sort_by)


def count_by_status(tasks: Iterable[Task]) -> TaskCounts:
    total = 0
    done = 0
    for t in tasks:
        total += 1
        if t.completed:
            done += 1
    return TaskCounts(all=total, active=total - done, completed=done)
