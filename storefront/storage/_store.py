"""
Storage: typed key-value protocol for local durable state.

All methods return Result for explicit error handling.
Storage is synchronous: callers persist right after a state change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Callable

from kungfu import Result, Ok


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StorageError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Protocol: Result-based
# ═══════════════════════════════════════════════════════════════════════════════


class Storage(Protocol):
    """
    Key-value string storage protocol.

    Example (browser bridge):

        class LocalStorage:
            def __init__(self, window):
                self.window = window

            def get(self, key: str) -> Result[str | None, StorageError]:
                try:
                    return Ok(self.window.localStorage.getItem(key))
                except Exception as e:
                    return Error(StorageError("Failed to read", e))

            # ... other methods
    """

    def get(self, key: str) -> Result[str | None, StorageError]:
        """Read value. Returns Ok(None) if absent."""
        ...

    def set(self, key: str, value: str) -> Result[None, StorageError]:
        """Write value, replacing any previous one."""
        ...

    def remove(self, key: str) -> Result[bool, StorageError]:
        """Delete value. Returns Ok(True) if it existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Storage Builder
# ═══════════════════════════════════════════════════════════════════════════════

type GetFn = Callable[[str], Result[str | None, StorageError]]
type SetFn = Callable[[str, str], Result[None, StorageError]]
type RemoveFn = Callable[[str], Result[bool, StorageError]]


@dataclass(frozen=True)
class FunctionalStorage:
    """
    Storage built from functions.

    Example:
        storage = storage_from(
            get=bridge.read,
            set=bridge.write,
            remove=bridge.delete,
        )
    """

    _get: GetFn
    _set: SetFn
    _remove: RemoveFn

    def get(self, key: str) -> Result[str | None, StorageError]:
        return self._get(key)

    def set(self, key: str, value: str) -> Result[None, StorageError]:
        return self._set(key, value)

    def remove(self, key: str) -> Result[bool, StorageError]:
        return self._remove(key)


def storage_from(get: GetFn, set: SetFn, remove: RemoveFn) -> FunctionalStorage:
    """Create Storage from functions."""
    return FunctionalStorage(_get=get, _set=set, _remove=remove)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Storage
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryStorage:
    """
    In-memory storage.

    Note: data does not survive a restart. Default when no storage URL
    is configured, and the backend used in tests.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Result[str | None, StorageError]:
        return Ok(self._values.get(key))

    def set(self, key: str, value: str) -> Result[None, StorageError]:
        self._values[key] = value
        return Ok(None)

    def remove(self, key: str) -> Result[bool, StorageError]:
        return Ok(self._values.pop(key, None) is not None)

    def __contains__(self, key: str) -> bool:
        return key in self._values


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StorageError",
    "Storage",
    "FunctionalStorage",
    "storage_from",
    "MemoryStorage",
)
