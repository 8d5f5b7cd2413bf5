"""
Storage Protocols - Host preference store and per-user study state.
"""

from typing import Any, Protocol, runtime_checkable

__all__ = ["PreferenceStore", "StateStore"]


@runtime_checkable
class PreferenceStore(Protocol):
    """Host preference store, persisted outside process memory.

    Absence of a value is a valid state, never an error.
    """

    def has_user_value(self, key: str) -> bool: ...

    def get_int(self, key: str) -> int | None:
        """Integer value, or None if absent or not numeric."""
        ...

    def set_int(self, key: str, value: int) -> None: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear_user_pref(self, key: str) -> None: ...


@runtime_checkable
class StateStore(Protocol):
    """Persisted per-user study state."""

    def clear(self) -> Any:
        """Delete all per-user state. Destructive; uninstall only."""
        ...
