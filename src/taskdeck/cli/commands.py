# src/taskdeck/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_forms import TaskFormError, priority_label, validate_task_form
from ..tasks.task_models import FilterStatus, SortOption, Task
from ..tasks.task_query import count_by_status, process_tasks

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ID_DISPLAY_LENGTH = 8


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_form(args: list[str]) -> list[str]:
    """'/add Buy milk | 2 litres | low' -> ['Buy milk', '2 litres', 'low']"""
    return [p.strip() for p in " ".join(args).split("|")]


def _resolve_task(state: AppState, raw_id: str) -> Task | str:
    """Exact id or a unique id prefix; returns an error message otherwise."""
    task = state.task_store.get_task(raw_id)
    if task is not None:
        return task
    matches = state.task_store.find_by_prefix(raw_id)
    if not matches:
        return f"No task with id {raw_id}."
    if len(matches) > 1:
        return f"Id prefix {raw_id} is ambiguous ({len(matches)} tasks)."
    return matches[0]


def _format_date(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).astimezone().strftime("%Y-%m-%d")


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = (
        f"[{mark}] {task.id[:ID_DISPLAY_LENGTH]}  {priority_label(task.priority):<6}  "
        f"{task.title}  ({_format_date(task.created_at)})"
    )
    if task.description:
        line += f"\n      {task.description}"
    return line


# ---- task commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description [| priority]]
    """
    parts = _split_form(args)
    title = parts[0]
    description = parts[1] if len(parts) > 1 else ""
    priority = parts[2] if len(parts) > 2 else None
    try:
        data = validate_task_form(title, description, priority)
    except TaskFormError as e:
        return e.message
    task = state.task_store.add_task(data)
    return f"Added task {task.id[:ID_DISPLAY_LENGTH]}: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> <title> [| description [| priority]]

    Omitted description/priority keep their current values.
    """
    if len(args) < 2:
        return "Usage: /edit <id> <title> [| description [| priority]]"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found

    parts = _split_form(args[1:])
    description = parts[1] if len(parts) > 1 else found.description
    priority = parts[2] if len(parts) > 2 else found.priority
    try:
        data = validate_task_form(parts[0], description, priority)
    except TaskFormError as e:
        return e.message

    state.task_store.update_task(
        found.id, title=data.title, description=data.description, priority=data.priority
    )
    return f"Updated task {found.id[:ID_DISPLAY_LENGTH]}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    updated = state.task_store.toggle_complete(found.id)
    if updated is None:
        return f"No task with id {args[0]}."
    return f"{'Completed' if updated.completed else 'Reopened'}: {updated.title}"


def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /rm <id>       -> ask for confirmation
    /rm <id> yes   -> delete
    """
    if not args or len(args) > 2:
        return "Usage: /rm <id> [yes]"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    if len(args) < 2 or args[1].lower() not in ("yes", "y"):
        return (
            f'Are you sure you want to delete "{found.title}"? '
            f"Repeat with: /rm {args[0]} yes"
        )
    if emit:
        emit(f"Deleting {found.id[:ID_DISPLAY_LENGTH]}...")
    state.task_store.delete_task(found.id)
    return f'Deleted "{found.title}".'


# ---- view commands ----


def cmd_list(state: AppState, args: list[str]) -> str:
    view = state.view
    tasks = process_tasks(state.task_store.tasks, view.status, view.search_query, view.sort_by)
    header = f"Tasks (status={view.status}, sort={view.sort_by}"
    if view.search_query:
        header += f", search={view.search_query!r}"
    header += f"): {len(tasks)}"
    if not tasks:
        return header + "\n  No tasks found."
    return "\n".join([header, *(format_task(t) for t in tasks)])


def cmd_filter(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return f"Status filter is {state.view.status}. Use /filter all|active|completed."
    try:
        state.view.status = FilterStatus(args[0].lower())
    except ValueError:
        return "Usage: /filter all|active|completed"
    return cmd_list(state, [])


def cmd_search(state: AppState, args: list[str]) -> str:
    state.view.search_query = " ".join(args).strip()
    return cmd_list(state, [])


def cmd_sort(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return f"Sorting by {state.view.sort_by}. Use /sort date|priority."
    try:
        state.view.sort_by = SortOption(args[0].lower())
    except ValueError:
        return "Usage: /sort date|priority"
    return cmd_list(state, [])


def cmd_stat(state: AppState, args: list[str]) -> str:
    counts = count_by_status(state.task_store.tasks)
    noun = "task" if counts.active == 1 else "tasks"
    return (
        "Status:\n"
        f"  All: {counts.all}\n"
        f"  Active: {counts.active} {noun}\n"
        f"  Completed: {counts.completed}"
    )


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme          -> show current theme
    /theme on|off   -> dark mode on/off
    /theme toggle   -> flip
    """
    if not args:
        return f"Dark mode is {'ON' if state.theme.is_dark else 'OFF'}. Use /theme on|off|toggle."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes", "dark"):
        enabled = state.theme.set_dark(True)
    elif arg in ("off", "0", "false", "no", "light"):
        enabled = state.theme.set_dark(False)
    elif arg == "toggle":
        enabled = state.theme.toggle()
    else:
        return "Usage: /theme on|off|toggle"
    return f"Dark mode {'ON' if enabled else 'OFF'}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [| description [| low|medium|high]]."
)
registry.register(
    "edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description [| priority]]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id> yes.", aliases=["delete"])
registry.register("list", cmd_list, help_text="Show tasks with the current filter/search/sort.", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Status filter: /filter all|active|completed.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("sort", cmd_sort, help_text="Sort order: /sort date|priority.")
registry.register("stat", cmd_stat, help_text="Show task counts.")
registry.register("theme", cmd_theme, help_text="Dark mode: /theme on|off|toggle.")
