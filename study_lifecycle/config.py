"""
Centralized configuration for the study lifecycle controller.

Configuration sources (priority order):
1. Environment variables (STUDY_*)
2. Default values

Environment variables:
- STUDY_RUNTIME_DIR: Runtime directory (default: ~/.local/share/study-lifecycle)
- STUDY_EXPIRATION_PREF: Preference key of the expiration record
- STUDY_STATE_PREF: Preference key of the per-user study state
- STUDY_UI_READY_TOPIC: One-shot host notification topic (default: sessionstore-windows-restored)
- STUDY_RESOURCE_ID: Visual resource registered while the study runs
- STUDY_PHASES_FILE: JSON phase configuration (default: built-in phases)
- STUDY_LOG_LEVEL: Log level (default: INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path

__all__ = ["StudyConfig", "config", "DEFAULT_RUNTIME_DIR"]

DEFAULT_RUNTIME_DIR = Path.home() / ".local/share/study-lifecycle"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with STUDY_ prefix."""
    return os.environ.get(f"STUDY_{key}", default)


def _get_env_path(key: str, default: Path | None) -> Path | None:
    """Get path environment variable."""
    val = os.environ.get(f"STUDY_{key}")
    return Path(val) if val else default


@dataclass(frozen=True)
class StudyConfig:
    """Immutable study configuration."""

    runtime_dir: Path = _get_env_path("RUNTIME_DIR", DEFAULT_RUNTIME_DIR)
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    # Persisted preference keys
    expiration_pref: str = _get_env(
        "EXPIRATION_PREF", "extensions.pioneer-online-news.expirationDateString"
    )
    state_pref: str = _get_env("STATE_PREF", "extensions.pioneer-online-news.state")

    # Host integration
    ui_ready_topic: str = _get_env("UI_READY_TOPIC", "sessionstore-windows-restored")
    resource_id: str = _get_env(
        "RESOURCE_ID", "resource://pioneer-study-online-news/content/panel.css"
    )

    phases_file: Path | None = _get_env_path("PHASES_FILE", None)

    @property
    def state_dir(self) -> Path:
        """State directory for persisted preferences."""
        return self.runtime_dir / "state"

    @property
    def prefs_file(self) -> Path:
        """Preference store file path."""
        return self.state_dir / "prefs.json"


# Global singleton
config = StudyConfig()
