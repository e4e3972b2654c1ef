# src/taskdeck/tasks/task_models.py

from __future__ import annotations

import math
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        """Lenient parse used on load and on update; unknown -> medium."""
        if isinstance(raw, Priority):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


PRIORITY_WEIGHT: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class FilterStatus(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class SortOption(StrEnum):
    DATE = "date"
    PRIORITY = "priority"


def now_ms() -> int:
    return int(time.time() * 1000)


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    priority: Priority
    completed: bool
    created_at: int  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        """Storage record; field names follow the durable layout."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        """Raise ValueError/TypeError for records that cannot be a Task."""
        task_id = raw.get("id")
        title = raw.get("title")
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task record without a string id")
        if not isinstance(title, str):
            raise ValueError(f"task {task_id} has no string title")

        created = raw.get("createdAt", 0)
        if isinstance(created, bool) or not isinstance(created, (int, float)):
            raise TypeError(f"task {task_id} has non-numeric createdAt")
        if not math.isfinite(created):
            raise ValueError(f"task {task_id} has non-finite createdAt")

        return cls(
            id=task_id,
            title=title,
            description=str(raw.get("description") or ""),
            priority=Priority.parse(raw.get("priority")),
            completed=raw.get("completed") is True,
            created_at=int(created),
        )


@dataclass(frozen=True, slots=True)
class TaskFormData:
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM


@dataclass(slots=True)
class FilterOptions:
    """Per-session view state; never persisted."""

    status: FilterStatus = FilterStatus.ALL
    search_query: str = ""
    sort_by: SortOption = SortOption.DATE


@dataclass(frozen=True, slots=True)
class TaskCounts:
    all: int
    active: int
    completed: int
