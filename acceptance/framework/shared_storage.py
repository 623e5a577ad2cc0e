"""
================================================================================
Shared Storage
================================================================================

Scenario-scoped key/value handoff between step handlers.

A fresh `SharedStorage` is created for every scenario and passed explicitly
as the first argument of each step handler, so no handler reaches for hidden
global state.

================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from loguru import logger


class KeyNotFoundError(KeyError):
    """Raised when reading a key that was never stored."""

    def __str__(self) -> str:
        return f'There is no entry stored under key "{self.args[0]}"'


class SharedStorage:
    """
    Mutable mapping from string keys to arbitrary entity references.

    Usage:
        >>> storage = SharedStorage()
        >>> storage.set("country", france)
        >>> storage.get("country") is france
        True
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._latest_key: Optional[str] = None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value
        self._latest_key = key
        logger.debug(f"Storage set: {key} -> {value!r}")

    def get(self, key: str) -> Any:
        """Return the stored reference; raise `KeyNotFoundError` when absent."""
        if key not in self._entries:
            raise KeyNotFoundError(key)
        return self._entries[key]

    def has(self, key: str) -> bool:
        return key in self._entries

    def get_latest_resource(self) -> Any:
        """Return the value stored most recently."""
        if self._latest_key is None:
            raise KeyNotFoundError("latest_resource")
        return self._entries[self._latest_key]

    def set_clipboard(self, entries: Mapping[str, Any]) -> None:
        """Replace the whole storage content."""
        self._entries = dict(entries)
        self._latest_key = next(reversed(self._entries), None) if self._entries else None

    def clear(self) -> None:
        self._entries.clear()
        self._latest_key = None

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "SharedStorage",
    "KeyNotFoundError",
]
