"""
CLI Commands - Handlers for the study command.

All commands work on the persisted preference store directly; none needs
the host to be running.
"""

import argparse
import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..lifecycle import now_ms
from ..phases import DAY_MS, load_phases, study_length_ms
from ..prefs import FilePreferenceStore

if TYPE_CHECKING:
    from ..config import StudyConfig

__all__ = ["COMMANDS", "format_duration", "format_timestamp", "run_command"]

COMMANDS = {"status", "expiration", "reset-expiration", "phases"}


def format_timestamp(ms: int) -> str:
    """Epoch milliseconds as ISO-8601 UTC."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(timespec="seconds")


def format_duration(ms: int) -> str:
    """Milliseconds as '<days>d <hours>h'."""
    days, rest = divmod(ms, DAY_MS)
    return f"{days}d {rest // (60 * 60 * 1000)}h"


def run_command(command: str, args: argparse.Namespace, config: "StudyConfig") -> int:
    """Run the specified command.

    Returns:
        Exit code
    """
    prefs = FilePreferenceStore(config.prefs_file)

    if command == "status":
        return _status(prefs, config)
    elif command == "expiration":
        record = prefs.get_int(config.expiration_pref)
        if record is None:
            print("No expiration record")
            return 1
        print(record)
        return 0
    elif command == "reset-expiration":
        return _reset_expiration(prefs, config, confirmed=args.yes)
    elif command == "phases":
        return _phases(config, as_json=args.json)

    print(f"Unknown command: {command}")
    return 1


def _status(prefs: FilePreferenceStore, config: "StudyConfig") -> int:
    record = prefs.get_int(config.expiration_pref)
    if record is None:
        print("Expiration: not set (computed on next startup)")
    else:
        print(f"Expiration: {format_timestamp(record)} ({record})")
        print(f"Expired: {'yes' if now_ms() > record else 'no'}")

    phases = load_phases(config.phases_file)
    print(f"Phases: {len(phases)} ({format_duration(study_length_ms(phases))} total)")
    print(f"Prefs: {config.prefs_file}")
    return 0


def _reset_expiration(prefs: FilePreferenceStore, config: "StudyConfig", confirmed: bool) -> int:
    if not prefs.has_user_value(config.expiration_pref):
        print("No expiration record")
        return 0

    if not confirmed:
        answer = input("Remove the expiration record? The study period restarts. [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            return 1

    prefs.clear_user_pref(config.expiration_pref)
    print("Expiration record removed")
    return 0


def _phases(config: "StudyConfig", as_json: bool) -> int:
    phases = load_phases(config.phases_file)
    if as_json:
        print(json.dumps([p.to_dict() for p in phases], indent=2))
        return 0

    for phase in phases:
        length = format_duration(phase.duration_ms) if phase.duration_ms else "open-ended"
        print(f"  {phase.name}: {length}")
    print(f"Total: {format_duration(study_length_ms(phases))}")
    return 0
