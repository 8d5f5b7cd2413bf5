"""
Phases - Study phase configuration.

Only the phase durations matter to the lifecycle controller: their sum is
the total study length used to compute the expiration record.

Phase files are JSON, either an object keyed by phase name:
    {"treatment": {"duration": 1209600000}, "postStudy": {}}
or a list of objects carrying a "name":
    [{"name": "treatment", "duration": 1209600000}]
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import structlog

from .errors import PhaseConfigError

__all__ = ["DAY_MS", "DEFAULT_PHASES", "Phase", "load_phases", "parse_phases", "study_length_ms"]

logger = structlog.get_logger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(slots=True, frozen=True)
class Phase:
    """A single study phase.

    Attributes:
        name: Phase identifier
        duration_ms: Length in milliseconds (0 for open-ended phases)
    """
    name: str
    duration_ms: int = 0

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "Phase":
        duration = data.get("duration")
        if duration is None:
            return cls(name)
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise PhaseConfigError(f"Phase '{name}' has non-integer duration: {duration!r}")
        if duration < 0:
            raise PhaseConfigError(f"Phase '{name}' has negative duration: {duration}")
        return cls(name, duration)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "duration": self.duration_ms}


DEFAULT_PHASES: tuple[Phase, ...] = (
    Phase("preTreatment", 7 * DAY_MS),
    Phase("treatment", 14 * DAY_MS),
    Phase("postTreatment", 9 * DAY_MS),
    Phase("postStudy"),
)


def parse_phases(data: Any) -> tuple[Phase, ...]:
    """Parse phases from decoded JSON.

    Raises:
        PhaseConfigError: If the structure or a duration is invalid
    """
    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, list):
        try:
            items = [(entry["name"], entry) for entry in data]
        except (KeyError, TypeError) as e:
            raise PhaseConfigError(f"Phase list entries need a 'name': {e}") from e
    else:
        raise PhaseConfigError(f"Phase config must be an object or list, got {type(data).__name__}")

    phases = []
    for name, entry in items:
        if not isinstance(entry, dict):
            raise PhaseConfigError(f"Phase '{name}' must be an object")
        phases.append(Phase.from_dict(str(name), entry))
    return tuple(phases)


def load_phases(path: Path | None = None) -> tuple[Phase, ...]:
    """Load phases from a JSON file, or the built-in phases if path is None.

    Raises:
        FileNotFoundError: If the file doesn't exist
        PhaseConfigError: If the file is not valid phase configuration
    """
    if path is None:
        return DEFAULT_PHASES

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise PhaseConfigError(f"Invalid phase file {path}: {e}") from e

    phases = parse_phases(data)
    logger.debug("phases_loaded", path=str(path), count=len(phases))
    return phases


def study_length_ms(phases: Iterable[Phase]) -> int:
    """Total study length: the sum of all phase durations."""
    return sum(p.duration_ms for p in phases)
