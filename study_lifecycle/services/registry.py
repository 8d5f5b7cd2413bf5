"""
Service Registry - Ordered startup and shutdown of subordinate services.

Startup is strictly sequential and fail-fast: a service that depends on
storage must never start without it. Shutdown of each service is
independent; the caller isolates each service's failure from the next.
"""

from typing import Any, Callable, Iterable

import structlog

from ..contracts import SubordinateService
from ..errors import ServiceStartupError
from ..utils import maybe_await

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

logger = structlog.get_logger(__name__)

STORAGE = "storage"
HOSTS = "hosts"
ACTIVE_URI = "active-uri"
DWELL_TIME = "dwell-time"
PHASES = "phases"

# Dependencies first
STARTUP_ORDER: tuple[str, ...] = (STORAGE, HOSTS, ACTIVE_URI, DWELL_TIME, PHASES)

# Consumers before the services they depend on
SHUTDOWN_ORDER: tuple[str, ...] = (DWELL_TIME, ACTIVE_URI, HOSTS, PHASES, STORAGE)


class ServiceRegistry:
    """Registry for subordinate services.

    Example:
        registry = ServiceRegistry([storage, hosts, active_uri, dwell_time, phases])

        await registry.startup_in_order(STARTUP_ORDER)
        ...
        for name in SHUTDOWN_ORDER:
            await registry.shutdown(name)
    """

    def __init__(self, services: Iterable[SubordinateService] = ()) -> None:
        self._services: dict[str, SubordinateService] = {}
        self._started: list[str] = []
        for service in services:
            self.register(service)

    def register(self, service: SubordinateService) -> None:
        """Register a service. A duplicate name is ignored with a warning."""
        if service.name in self._services:
            logger.warning("service_already_registered", name=service.name)
            return
        self._services[service.name] = service
        logger.debug("service_registered", name=service.name)

    def get(self, name: str) -> SubordinateService | None:
        return self._services.get(name)

    @property
    def started(self) -> list[str]:
        """Names of started services, in start order."""
        return list(self._started)

    def is_started(self, name: str) -> bool:
        return name in self._started

    async def startup(self, name: str) -> bool:
        """Start a specific service.

        Returns:
            True if started, False if no such service is registered

        Raises:
            ServiceStartupError: If the service's startup raised
        """
        service = self._services.get(name)
        if service is None:
            logger.warning("service_not_found", name=name)
            return False

        if name in self._started:
            logger.debug("service_already_started", name=name)
            return True

        try:
            await maybe_await(service.startup())
        except Exception as e:
            logger.error("service_startup_failed", name=name, error=str(e))
            raise ServiceStartupError(name, e) from e

        self._started.append(name)
        logger.info("service_started", name=name)
        return True

    async def startup_in_order(
        self,
        names: Iterable[str],
        proceed: Callable[[], bool] | None = None,
    ) -> list[str]:
        """Start services one after another; stop at the first failure.

        Args:
            names: Service names in start order
            proceed: Checked before each service; returning False stops
                the sequence without error

        Returns:
            Names of the services started by this call

        Raises:
            ServiceStartupError: From the first failing service
        """
        started = []
        for name in names:
            if proceed is not None and not proceed():
                logger.warning("service_startup_stopped", before=name)
                break
            if await self.startup(name):
                started.append(name)
        return started

    async def shutdown(self, name: str) -> bool:
        """Shut down a specific service.

        Shutdown is attempted even for services this registry didn't
        start: a service may hold resources acquired outside startup().
        The service is no longer tracked as started afterwards, whatever
        the outcome.

        Returns:
            True if shut down, False if no such service is registered

        Raises:
            Whatever the service's shutdown raised
        """
        service = self._services.get(name)
        if service is None:
            return False

        try:
            await maybe_await(service.shutdown())
        finally:
            if name in self._started:
                self._started.remove(name)

        logger.info("service_shutdown", name=name)
        return True

    def list_services(self) -> list[dict[str, Any]]:
        """List registered services with their status."""
        return [
            {"name": name, "started": name in self._started}
            for name in self._services
        ]

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, name: str) -> bool:
        return name in self._services
