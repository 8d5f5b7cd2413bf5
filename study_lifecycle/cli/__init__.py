"""
CLI - Operator commands for the study lifecycle.

Commands:
    study status             Expiration record, whether it has passed, phases
    study expiration         Raw expiration record (epoch ms)
    study reset-expiration   Remove the record; the next startup recomputes it
    study phases             Configured phases and total study length

Example:
    $ study status
    Expiration: 2026-11-17T09:12:03+00:00 (1795338723000)
    Expired: no
    Phases: 4 (30d 0h total)
"""

from .main import main

__all__ = ["main"]
