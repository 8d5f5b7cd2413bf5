"""
Resource Registrar Protocol - Contract for host styling registration.
"""

from typing import Protocol, runtime_checkable

__all__ = ["ResourceRegistrar"]


@runtime_checkable
class ResourceRegistrar(Protocol):
    """Global registration of the study's visual resource (stylesheet).

    Registration is a single global flag per resource. Implementations
    may raise on double registration or on unregistering an absent
    resource, so callers check is_registered() first.
    """

    def register(self, resource_id: str) -> None: ...

    def unregister(self, resource_id: str) -> None: ...

    def is_registered(self, resource_id: str) -> bool: ...
