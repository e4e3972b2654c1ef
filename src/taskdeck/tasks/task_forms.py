# src/taskdeck/tasks/task_forms.py

"""
Input boundary for task data.

The store accepts any string; the caps and the required title are enforced
here, before anything reaches it.
"""

from __future__ import annotations

from .task_models import Priority, TaskFormData

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskFormError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def validate_task_form(
    title: str | None,
    description: str | None = "",
    priority: Priority | str | None = None,
) -> TaskFormData:
    clean_title = (title or "").strip()
    if not clean_title:
        raise TaskFormError("title", "Please enter a task title")
    if len(clean_title) > TITLE_MAX_LENGTH:
        raise TaskFormError("title", f"Title must be at most {TITLE_MAX_LENGTH} characters")

    clean_description = (description or "").strip()
    if len(clean_description) > DESCRIPTION_MAX_LENGTH:
        raise TaskFormError(
            "description", f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )

    if priority is None or (isinstance(priority, str) and not priority.strip()):
        clean_priority = Priority.MEDIUM
    else:
        try:
            clean_priority = Priority(str(priority).strip().lower())
        except ValueError:
            raise TaskFormError("priority", "Priority must be one of: low, medium, high") from None

    return TaskFormData(title=clean_title, description=clean_description, priority=clean_priority)


def priority_label(priority: Priority | str) -> str:
    value = str(priority)
    return value[:1].upper() + value[1:]
