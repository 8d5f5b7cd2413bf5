"""
Subordinate Service Protocol - Contract for measurement/storage services.

Storage, host tracking, URI tracking, dwell-time measurement and phase
scheduling all satisfy this contract. The controller starts and stops
them; it doesn't manage them otherwise.
"""

from typing import Any, Protocol, runtime_checkable

__all__ = ["SubordinateService"]


@runtime_checkable
class SubordinateService(Protocol):
    """Lifecycle contract for a subordinate service.

    startup() and shutdown() may be plain functions or coroutines; the
    controller awaits whatever they return when it is awaitable.

    Example:
        class DwellTime:
            name = "dwell-time"

            def startup(self) -> None:
                self._timer = start_idle_timer()

            def shutdown(self) -> None:
                self._timer.cancel()
    """

    @property
    def name(self) -> str:
        """Unique service identifier."""
        ...

    def startup(self) -> Any:
        """Bring the service up. Storage startup must be awaited."""
        ...

    def shutdown(self) -> Any:
        """Tear the service down."""
        ...
