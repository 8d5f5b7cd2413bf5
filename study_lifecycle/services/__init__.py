"""
Services - Subordinate service names, ordering and registry.
"""

from .registry import (
    ACTIVE_URI,
    DWELL_TIME,
    HOSTS,
    PHASES,
    SHUTDOWN_ORDER,
    STARTUP_ORDER,
    STORAGE,
    ServiceRegistry,
)

__all__ = [
    "ACTIVE_URI",
    "DWELL_TIME",
    "HOSTS",
    "PHASES",
    "SHUTDOWN_ORDER",
    "STARTUP_ORDER",
    "STORAGE",
    "ServiceRegistry",
]
