# src/taskdeck/storage/cell.py

"""
Typed durable slot on top of a KeyValueStorage.

Lifecycle: read once at construction (falling back to the default),
write-through on every change, no explicit teardown.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True, slots=True)
class ReadResult(Generic[T]):
    """
    Outcome of a durable read.

    ok=False means the default was used; error is the cause
    (None when the key was simply absent).
    """

    value: T
    ok: bool
    error: Exception | None = None


def read_value(
    storage: KeyValueStorage,
    key: str,
    default: T,
    decode: Callable[[Any], T] = _identity,
) -> ReadResult[T]:
    try:
        payload = storage.get_item(key)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Error reading storage key %r: %s", key, e)
        return ReadResult(default, ok=False, error=e)

    if payload is None:
        return ReadResult(default, ok=False)

    try:
        value = decode(json.loads(payload))
    except Exception as e:
        # Bad JSON, or a payload the decoder refuses: both mean "absent".
        logger.warning("Error decoding storage key %r, using default: %s", key, e)
        return ReadResult(default, ok=False, error=e)

    return ReadResult(value, ok=True)


def write_value(
    storage: KeyValueStorage,
    key: str,
    value: T,
    encode: Callable[[T], Any] = _identity,
) -> bool:
    """
    Serialize and persist value under key.

    The payload is fully built before storage is touched, so a failed
    serialization leaves the previous durable value as it was.
    """
    try:
        payload = json.dumps(encode(value), ensure_ascii=False)
    except Exception:
        logger.exception("Failed to serialize value for storage key %r; keeping previous.", key)
        return False

    try:
        storage.set_item(key, payload)
    except (sqlite3.Error, OSError):
        logger.exception("Failed to write storage key %r; keeping previous.", key)
        return False
    return True


class PersistentCell(Generic[T]):
    """One typed value persisted under one storage key."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        default: T,
        *,
        encode: Callable[[T], Any] = _identity,
        decode: Callable[[Any], T] = _identity,
    ) -> None:
        self._storage = storage
        self._key = key
        self._encode = encode
        self._decode = decode
        self.last_read: ReadResult[T] = read_value(storage, key, default, decode)
        self._value: T = self.last_read.value

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> T:
        return self._value

    def write(self, value: T) -> T:
        return self.update(value)

    def update(self, value_or_updater: T | Callable[[T], T]) -> T:
        """
        Apply a replacement value or an updater (previous -> next), then persist.

        The in-memory value keeps the change even when persisting fails;
        durability is best-effort for the rest of the session.
        """
        if callable(value_or_updater):
            new_value = value_or_updater(self._value)
        else:
            new_value = value_or_updater
        self._value = new_value
        write_value(self._storage, self._key, new_value, self._encode)
        return new_value
