"""
Study Lifecycle - Lifecycle controller for an opt-in, time-boxed study.

Decides at every host lifecycle transition whether the study may run,
brings its services up and down in order, and ends the study once consent
is withdrawn or the study period is over.
"""

__version__ = "1.0.0"

from .config import StudyConfig, config

__all__ = [
    "__version__",
    "StudyConfig",
    "config",
]
