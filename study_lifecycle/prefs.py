"""
Preference Store - JSON file-backed host preferences.

Values survive process restarts. The whole file is rewritten on every
change; the store holds a handful of small values.
"""

import json
import math
from pathlib import Path
from typing import Any

import structlog

__all__ = ["FilePreferenceStore"]

logger = structlog.get_logger(__name__)


class FilePreferenceStore:
    """Preference store persisted to a JSON file.

    A missing or unreadable file is treated as an empty store.

    Example:
        prefs = FilePreferenceStore(config.prefs_file)
        if not prefs.has_user_value("expiration"):
            prefs.set_int("expiration", now + length)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._values: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("prefs_parse_error", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("prefs_not_an_object", path=str(self.path))
            return {}
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True))

    def reload(self) -> None:
        """Re-read values from disk."""
        self._values = self._load()

    def has_user_value(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._save()

    def get_int(self, key: str) -> int | None:
        """Integer value, or None if absent or not numeric.

        Finite floats are truncated to int.
        """
        value = self._values.get(key)
        if isinstance(value, bool):
            return None
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if not isinstance(value, int):
            return None
        return value

    def set_int(self, key: str, value: int) -> None:
        self.set(key, int(value))

    def clear_user_pref(self, key: str) -> None:
        """Remove a value. Removing an absent key is a no-op."""
        if key in self._values:
            del self._values[key]
            self._save()

    def __contains__(self, key: str) -> bool:
        return key in self._values
