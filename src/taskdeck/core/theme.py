# src/taskdeck/core/theme.py

from __future__ import annotations

import logging

from ..storage.cell import PersistentCell
from .ports import KeyValueStorage

logger = logging.getLogger(__name__)

DARK_MODE_STORAGE_KEY = "darkMode"


def _decode_bool(raw: object) -> bool:
    if not isinstance(raw, bool):
        raise TypeError(f"expected a boolean, got {type(raw).__name__}")
    return raw


class ThemePreference:
    """Dark-mode flag; owned by the presentation side, not by TaskStore."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._cell: PersistentCell[bool] = PersistentCell(
            storage, DARK_MODE_STORAGE_KEY, False, decode=_decode_bool
        )

    @property
    def is_dark(self) -> bool:
        return self._cell.value

    def set_dark(self, enabled: bool) -> bool:
        return self._cell.write(bool(enabled))

    def toggle(self) -> bool:
        enabled = self._cell.update(lambda prev: not prev)
        logger.debug("Dark mode toggled -> %s", enabled)
        return enabled
