"""
Lifecycle - The study's lifecycle state machine.

Handles:
- Reason decoding (host reason codes)
- Eligibility and expiration gating
- Deferred start until the host UI is ready
- Ordered startup and best-effort ordered shutdown

Example:
    from study_lifecycle.lifecycle import LifecycleController, LifecycleReason

    state = await controller.startup(None, LifecycleReason.ADDON_ENABLE)
    report = await controller.shutdown(None, LifecycleReason.ADDON_DISABLE)
"""

from .controller import LifecycleController, ShutdownReport, StepResult
from .deferred import DeferredStart
from .gate import END_EXPIRED, END_INELIGIBLE, EligibilityGate, GateDecision, now_ms
from .reasons import LifecycleReason
from .states import ControllerState, transition

__all__ = [
    "ControllerState",
    "DeferredStart",
    "END_EXPIRED",
    "END_INELIGIBLE",
    "EligibilityGate",
    "GateDecision",
    "LifecycleController",
    "LifecycleReason",
    "ShutdownReport",
    "StepResult",
    "now_ms",
    "transition",
]
