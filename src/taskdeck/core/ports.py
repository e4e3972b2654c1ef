# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the durable backend swappable and makes testing easier.
"""

from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Durable string -> string slot store (the localStorage analogue).

    Payloads are already-serialized text; the storage never interprets them.
    set_item must replace the previous payload as a single write.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, payload: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...
