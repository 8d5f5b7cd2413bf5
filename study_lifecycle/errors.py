"""
Errors - Exception hierarchy for the study lifecycle controller.

Ineligibility and expiration are business outcomes, not errors, and have
no exception type here.
"""

__all__ = [
    "InvalidTransitionError",
    "NotSubscribedError",
    "PhaseConfigError",
    "ResourceAlreadyRegisteredError",
    "ResourceNotRegisteredError",
    "ServiceStartupError",
    "StudyLifecycleError",
    "UnknownReasonError",
]


class StudyLifecycleError(Exception):
    """Base class for all lifecycle errors."""


class UnknownReasonError(StudyLifecycleError, ValueError):
    """Raised when the host passes a reason code we don't know."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown lifecycle reason: {value!r}")


class InvalidTransitionError(StudyLifecycleError):
    """Raised when the controller is asked to make an illegal state change."""

    def __init__(self, current: object, target: object):
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition: {current} -> {target}")


class ServiceStartupError(StudyLifecycleError):
    """Raised when a subordinate service fails to start."""

    def __init__(self, service_name: str, cause: BaseException):
        self.service_name = service_name
        self.cause = cause
        super().__init__(f"Service '{service_name}' failed to start: {cause}")


class ResourceAlreadyRegisteredError(StudyLifecycleError):
    """Raised when registering a resource twice."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(f"Resource already registered: {resource_id}")


class ResourceNotRegisteredError(StudyLifecycleError):
    """Raised when unregistering a resource that isn't registered."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(f"Resource not registered: {resource_id}")


class NotSubscribedError(StudyLifecycleError):
    """Raised when removing a subscription the bus doesn't hold."""

    def __init__(self, topic: str):
        self.topic = topic
        super().__init__(f"Not subscribed to topic '{topic}'")


class PhaseConfigError(StudyLifecycleError, ValueError):
    """Raised for malformed phase configuration."""
