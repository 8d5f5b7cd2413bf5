"""
Controller States - Finite-state model of the lifecycle controller.

    UNLOADED -> INSTALLED -> INELIGIBLE | EXPIRED          (absorbing)
                          -> AWAITING_UI -> RUNNING
                          -> RUNNING
    any state -> SHUTTING_DOWN -> UNLOADED

All functions here are pure.
"""

from enum import Enum

from ..errors import InvalidTransitionError
from .reasons import LifecycleReason

__all__ = [
    "ControllerState",
    "TRANSITIONS",
    "can_transition",
    "state_after_gate",
    "state_for_reason",
    "transition",
]


class ControllerState(Enum):
    UNLOADED = "unloaded"
    INSTALLED = "installed"
    INELIGIBLE = "ineligible"
    EXPIRED = "expired"
    AWAITING_UI = "awaiting_ui"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"

    @property
    def is_terminal(self) -> bool:
        """Study ended early; no service ever starts from here."""
        return self in (ControllerState.INELIGIBLE, ControllerState.EXPIRED)


_S = ControllerState

TRANSITIONS: dict[ControllerState, frozenset[ControllerState]] = {
    _S.UNLOADED: frozenset({_S.INSTALLED, _S.SHUTTING_DOWN}),
    _S.INSTALLED: frozenset(
        {_S.INELIGIBLE, _S.EXPIRED, _S.AWAITING_UI, _S.RUNNING, _S.SHUTTING_DOWN}
    ),
    _S.INELIGIBLE: frozenset({_S.SHUTTING_DOWN}),
    _S.EXPIRED: frozenset({_S.SHUTTING_DOWN}),
    _S.AWAITING_UI: frozenset({_S.RUNNING, _S.SHUTTING_DOWN}),
    _S.RUNNING: frozenset({_S.SHUTTING_DOWN}),
    _S.SHUTTING_DOWN: frozenset({_S.UNLOADED}),
}


def can_transition(current: ControllerState, target: ControllerState) -> bool:
    return target in TRANSITIONS[current]


def transition(current: ControllerState, target: ControllerState) -> ControllerState:
    """Validate a state change and return the new state.

    Raises:
        InvalidTransitionError: If target is not reachable from current
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target


def state_after_gate(eligible: bool, expired: bool) -> ControllerState | None:
    """Outcome of the eligibility/expiration gate.

    Ineligibility wins over expiration. None means the gate passed.
    """
    if not eligible:
        return _S.INELIGIBLE
    if expired:
        return _S.EXPIRED
    return None


def state_for_reason(reason: LifecycleReason) -> ControllerState:
    """Where a gated startup goes next: wait for the UI, or run now."""
    if reason.is_cold_boot:
        return _S.AWAITING_UI
    return _S.RUNNING
