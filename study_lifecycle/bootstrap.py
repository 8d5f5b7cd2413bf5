"""
Bootstrap - Builds the controller and exposes the host entry points.

The host calls the module-level install/startup/shutdown/uninstall
functions; they delegate to one process-global controller.

Example:
    from study_lifecycle import bootstrap

    bootstrap.init_controller(provider=opt_in_client, services=[storage, hosts, ...])

    await bootstrap.startup(data, 1)    # APP_STARTUP
    await bootstrap.shutdown(data, 4)   # ADDON_DISABLE
"""

from typing import Any, Iterable

import structlog

from .config import StudyConfig
from .contracts import EligibilityProvider, PreferenceStore, ResourceRegistrar, SubordinateService
from .events import NotificationBus, get_notification_bus
from .lifecycle import ControllerState, EligibilityGate, LifecycleController, ShutdownReport, now_ms
from .lifecycle.gate import Clock
from .phases import load_phases
from .prefs import FilePreferenceStore
from .resources import ResourceRegistry
from .services import ServiceRegistry
from .state import StudyState

__all__ = [
    "create_controller",
    "get_controller",
    "init_controller",
    "reset_controller",
    "install",
    "shutdown",
    "startup",
    "uninstall",
]

logger = structlog.get_logger(__name__)


def create_controller(
    provider: EligibilityProvider,
    services: Iterable[SubordinateService],
    config: StudyConfig | None = None,
    prefs: PreferenceStore | None = None,
    resources: ResourceRegistrar | None = None,
    bus: NotificationBus | None = None,
    clock: Clock = now_ms,
) -> LifecycleController:
    """Create a controller with all collaborators wired up.

    Args:
        provider: Opt-in client (consent query and study termination)
        services: Subordinate services, looked up by name
        config: Study configuration (uses defaults if None)
        prefs: Preference store (file-backed store under config.runtime_dir if None)
        resources: Resource registrar (in-process registry if None)
        bus: Notification bus (global bus if None)
        clock: Epoch-milliseconds clock

    Raises:
        PhaseConfigError: If config.phases_file is malformed
    """
    if config is None:
        config = StudyConfig()
    if prefs is None:
        prefs = FilePreferenceStore(config.prefs_file)
    if resources is None:
        resources = ResourceRegistry()
    if bus is None:
        bus = get_notification_bus()

    phases = load_phases(config.phases_file)
    gate = EligibilityGate(provider, prefs, phases, config.expiration_pref, clock=clock)

    return LifecycleController(
        gate=gate,
        services=ServiceRegistry(services),
        resources=resources,
        state_store=StudyState(prefs, config.state_pref),
        bus=bus,
        ui_ready_topic=config.ui_ready_topic,
        resource_id=config.resource_id,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Global singleton
# ─────────────────────────────────────────────────────────────────────────────

_controller: LifecycleController | None = None


def init_controller(*args: Any, **kwargs: Any) -> LifecycleController:
    """Create the process-global controller (arguments as create_controller)."""
    global _controller
    _controller = create_controller(*args, **kwargs)
    return _controller


def get_controller() -> LifecycleController:
    """Get the process-global controller.

    Raises:
        RuntimeError: If init_controller() hasn't been called
    """
    if _controller is None:
        raise RuntimeError("Study controller not initialized; call init_controller() first")
    return _controller


def reset_controller() -> None:
    """Drop the process-global controller (for testing)."""
    global _controller
    _controller = None


# ─────────────────────────────────────────────────────────────────────────────
# Host entry points
# ─────────────────────────────────────────────────────────────────────────────

def install(data: Any = None, reason: Any = None) -> None:
    pass


async def startup(data: Any, reason: Any) -> ControllerState:
    return await get_controller().startup(data, reason)


async def shutdown(data: Any = None, reason: Any = None) -> ShutdownReport:
    """Host shutdown. Never raises, even without a controller."""
    if _controller is None:
        logger.warning("shutdown_without_controller")
        return ShutdownReport(None)
    return await _controller.shutdown(data, reason)


def uninstall(data: Any = None, reason: Any = None) -> None:
    pass
