"""
Study State - Per-user study state kept in the preference store.
"""

from typing import Any

import structlog

from .contracts import PreferenceStore

__all__ = ["StudyState"]

logger = structlog.get_logger(__name__)


class StudyState:
    """Per-user study state stored as one JSON object under a single key."""

    def __init__(self, prefs: PreferenceStore, key: str) -> None:
        self._prefs = prefs
        self.key = key

    def _data(self) -> dict[str, Any]:
        data = self._prefs.get(self.key)
        return dict(data) if isinstance(data, dict) else {}

    def get(self, name: str, default: Any = None) -> Any:
        return self._data().get(name, default)

    def set(self, name: str, value: Any) -> None:
        data = self._data()
        data[name] = value
        self._prefs.set(self.key, data)

    def clear(self) -> None:
        """Delete all per-user state."""
        self._prefs.clear_user_pref(self.key)
        logger.info("study_state_cleared", key=self.key)
