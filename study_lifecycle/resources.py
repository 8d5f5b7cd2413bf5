"""
Resource Registry - In-process registrar for the study's visual resources.
"""

import structlog

from .errors import ResourceAlreadyRegisteredError, ResourceNotRegisteredError

__all__ = ["ResourceRegistry"]

logger = structlog.get_logger(__name__)


class ResourceRegistry:
    """Tracks which resources are registered with the host.

    Strict like the host's stylesheet service: double registration and
    unregistering an absent resource both raise.
    """

    def __init__(self) -> None:
        self._registered: set[str] = set()

    def register(self, resource_id: str) -> None:
        if resource_id in self._registered:
            raise ResourceAlreadyRegisteredError(resource_id)
        self._registered.add(resource_id)
        logger.debug("resource_registered", resource=resource_id)

    def unregister(self, resource_id: str) -> None:
        if resource_id not in self._registered:
            raise ResourceNotRegisteredError(resource_id)
        self._registered.discard(resource_id)
        logger.debug("resource_unregistered", resource=resource_id)

    def is_registered(self, resource_id: str) -> bool:
        return resource_id in self._registered

    def __len__(self) -> int:
        return len(self._registered)
