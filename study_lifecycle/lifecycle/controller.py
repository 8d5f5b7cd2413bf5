"""
Lifecycle Controller - Host entry points for the study.

Startup:
    gate (consent, expiration) -> deferred or direct -> finish_startup:
    register stylesheet, then storage, hosts, active-uri, dwell-time,
    phases, each awaited before the next. A startup failure propagates.

Shutdown:
    cancel deferred start, clear state (uninstall only), stop dwell-time,
    active-uri, hosts, phases, storage, unregister stylesheet. Every step
    runs whatever happened to the previous one, and shutdown never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from ..contracts import ResourceRegistrar, StateStore
from ..errors import UnknownReasonError
from ..events import NotificationBus
from ..services import SHUTDOWN_ORDER, STARTUP_ORDER, ServiceRegistry
from ..utils import maybe_await
from .deferred import DeferredStart
from .gate import END_EXPIRED, EligibilityGate
from .reasons import LifecycleReason
from .states import (
    ControllerState,
    can_transition,
    state_after_gate,
    state_for_reason,
    transition,
)

__all__ = ["LifecycleController", "ShutdownReport", "StepResult"]

logger = structlog.get_logger(__name__)

EVENT_SOURCE = "study"

_STARTABLE = (ControllerState.INSTALLED, ControllerState.AWAITING_UI)


@dataclass(slots=True, frozen=True)
class StepResult:
    """Outcome of one shutdown step."""
    name: str
    ok: bool
    error: BaseException | None = None


@dataclass(slots=True)
class ShutdownReport:
    """Per-step outcomes of a shutdown, in execution order."""
    reason: LifecycleReason | None
    steps: list[StepResult] = field(default_factory=list)

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]

    @property
    def failed(self) -> list[StepResult]:
        return [s for s in self.steps if not s.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason.name if self.reason else None,
            "steps": [
                {"name": s.name, "ok": s.ok, "error": str(s.error) if s.error else None}
                for s in self.steps
            ],
        }


class LifecycleController:
    """Drives the study through install/startup/shutdown/uninstall.

    One instance per process. The host never runs two entry points
    concurrently, so no locking is done here.

    Example:
        controller = LifecycleController(gate, services, resources, state, bus,
                                         ui_ready_topic=config.ui_ready_topic,
                                         resource_id=config.resource_id)

        await controller.startup(None, LifecycleReason.APP_STARTUP)
        await bus.emit("host", config.ui_ready_topic)   # finishes startup
        ...
        report = await controller.shutdown(None, LifecycleReason.ADDON_DISABLE)
    """

    def __init__(
        self,
        gate: EligibilityGate,
        services: ServiceRegistry,
        resources: ResourceRegistrar,
        state_store: StateStore,
        bus: NotificationBus,
        ui_ready_topic: str,
        resource_id: str,
    ) -> None:
        self.gate = gate
        self.services = services
        self.resources = resources
        self.state_store = state_store
        self.bus = bus
        self.resource_id = resource_id

        self._deferred = DeferredStart(bus, ui_ready_topic, self.on_ui_ready)
        self._state = ControllerState.UNLOADED
        self._reason: LifecycleReason | None = None
        self._expiration: int | None = None
        self._last_error: str | None = None
        self._shutdowns = 0

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def reason(self) -> LifecycleReason | None:
        """Reason passed to the latest entry point."""
        return self._reason

    @property
    def deferred(self) -> DeferredStart:
        return self._deferred

    def _set_state(self, target: ControllerState) -> None:
        self._state = transition(self._state, target)
        logger.debug("controller_state", state=target.value)

    async def _emit(self, topic: str, data: dict | None = None) -> None:
        await self.bus.emit(EVENT_SOURCE, topic, data)

    # ─────────────────────────────────────────────────────────────────
    # Host entry points
    # ─────────────────────────────────────────────────────────────────

    def install(self, data: Any = None, reason: Any = None) -> None:
        """Nothing to do; state is created on first startup."""

    def uninstall(self, data: Any = None, reason: Any = None) -> None:
        """Nothing to do; state is cleared by shutdown(ADDON_UNINSTALL)."""

    async def startup(self, data: Any, reason: LifecycleReason | int | str) -> ControllerState:
        """Gate the study, then start it now or once the UI is ready.

        Returns:
            The state the controller ended up in

        Raises:
            UnknownReasonError: If reason can't be decoded
            ServiceStartupError: If a subordinate service fails to start
        """
        reason = LifecycleReason.decode(reason)
        self._reason = reason
        self._last_error = None
        self._set_state(ControllerState.INSTALLED)
        logger.info("study_startup", reason=reason.name)

        await self._start_provider()

        decision = await self.gate.evaluate()
        self._expiration = decision.expiration

        ended = state_after_gate(decision.eligible, decision.end_reason == END_EXPIRED)
        if ended is not None:
            self._set_state(ended)
            await self._emit("study.ended", {"reason": decision.end_reason})
            return self._state

        if state_for_reason(reason) is ControllerState.AWAITING_UI:
            self._deferred.arm()
            self._set_state(ControllerState.AWAITING_UI)
            await self._emit("study.deferred", {"topic": self._deferred.topic})
            return self._state

        await self.finish_startup()
        return self._state

    async def _start_provider(self) -> None:
        # The opt-in client must be up before it can answer consent queries
        startup = getattr(self.gate.provider, "startup", None)
        if callable(startup):
            await maybe_await(startup())

    async def on_ui_ready(self) -> None:
        """Deferred-start callback, run once the UI-ready topic fires."""
        if self._state is not ControllerState.AWAITING_UI:
            logger.warning("ui_ready_ignored", state=self._state.value)
            return
        await self.finish_startup()

    async def finish_startup(self) -> None:
        """Register the stylesheet and start services in dependency order.

        Runs at most once per activation; a call in any state other than
        INSTALLED or AWAITING_UI is ignored. A shutdown that lands while a service is starting stops the
        sequence; services started by this call are then stopped again.

        Raises:
            ServiceStartupError: From the first service that fails; the
                services after it are not started
        """
        if self._state not in _STARTABLE:
            logger.warning("finish_startup_ignored", state=self._state.value)
            return

        try:
            if self.resources.is_registered(self.resource_id):
                logger.debug("resource_already_registered", resource=self.resource_id)
            else:
                self.resources.register(self.resource_id)

            shutdowns = self._shutdowns
            started = await self.services.startup_in_order(
                STARTUP_ORDER, proceed=lambda: self._shutdowns == shutdowns
            )
        except Exception as e:
            self._last_error = str(e)
            logger.error("study_startup_failed", error=str(e))
            raise

        if self._shutdowns != shutdowns:
            logger.warning("study_startup_interrupted", started=started)
            for name in SHUTDOWN_ORDER:
                if name in started:
                    await self._stop_late_service(name)
            return

        self._set_state(ControllerState.RUNNING)
        logger.info("study_started", services=started)
        await self._emit("study.started", {"services": started})

    async def shutdown(
        self,
        data: Any = None,
        reason: LifecycleReason | int | str | None = None,
    ) -> ShutdownReport:
        """Tear everything down, best effort. Never raises.

        Safe before any startup, after an early end (ineligible/expired),
        while waiting for the UI, and after a full startup.
        """
        decoded: LifecycleReason | None = None
        if reason is not None:
            try:
                decoded = LifecycleReason.decode(reason)
            except UnknownReasonError as e:
                logger.warning("shutdown_unknown_reason", error=str(e))
        self._reason = decoded
        self._shutdowns += 1

        if can_transition(self._state, ControllerState.SHUTTING_DOWN):
            self._state = ControllerState.SHUTTING_DOWN
        else:
            logger.warning("shutdown_unexpected_state", state=self._state.value)

        logger.info("study_shutdown", reason=decoded.name if decoded else None)
        report = ShutdownReport(decoded)

        await self._run_step(report, "deferred_start", self._deferred.disarm)

        if decoded is not None and decoded.is_uninstall:
            await self._run_step(report, "clear_state", self.state_store.clear)

        for name in SHUTDOWN_ORDER:
            await self._run_step(report, f"service:{name}", self._service_stopper(name))

        await self._run_step(report, "resource", self._unregister_resource)

        self._state = ControllerState.UNLOADED
        failed = [s.name for s in report.failed]
        if failed:
            logger.warning("study_stopped_with_errors", failed_steps=failed)
        else:
            logger.info("study_stopped")

        try:
            await self._emit("study.stopped", {
                "reason": decoded.name if decoded else None,
                "failed_steps": failed,
            })
        except Exception as e:
            logger.error("shutdown_emit_failed", error=str(e))

        return report

    async def _run_step(self, report: ShutdownReport, name: str, step: Callable[[], Any]) -> None:
        try:
            await maybe_await(step())
        except Exception as e:
            logger.error("shutdown_step_failed", step=name, error=str(e))
            report.steps.append(StepResult(name, False, e))
            return
        report.steps.append(StepResult(name, True))

    async def _stop_late_service(self, name: str) -> None:
        try:
            await self.services.shutdown(name)
        except Exception as e:
            logger.error("late_service_shutdown_failed", name=name, error=str(e))

    def _service_stopper(self, name: str) -> Callable[[], Any]:
        return lambda: self.services.shutdown(name)

    def _unregister_resource(self) -> None:
        if self.resources.is_registered(self.resource_id):
            self.resources.unregister(self.resource_id)
        else:
            logger.debug("resource_not_registered", resource=self.resource_id)

    # ─────────────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────────────

    def status(self) -> dict[str, Any]:
        """Current controller status."""
        return {
            "state": self._state.value,
            "reason": self._reason.name if self._reason else None,
            "expiration": self._expiration,
            "deferred": self._deferred.armed,
            "resource_registered": self.resources.is_registered(self.resource_id),
            "started_services": self.services.started,
            "last_error": self._last_error,
        }
