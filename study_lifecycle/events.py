"""
Notification Bus - Host observer topics and study lifecycle events.

The host publishes named topics (e.g. the one-shot "UI ready" notification)
and the controller publishes its own milestones ("study.started",
"study.ended", ...). Subscribers filter by glob patterns.

Usage:
    # Subscribe; keep the handle to remove it later
    sub = bus.on(handler, topic="sessionstore-windows-restored")
    bus.remove(sub)                 # raises NotSubscribedError if already gone

    # Publish
    await bus.emit("host", "sessionstore-windows-restored")
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import datetime
from fnmatch import fnmatch
from typing import Any

import structlog

from .errors import NotSubscribedError

__all__ = [
    "Event",
    "Handler",
    "NotificationBus",
    "Subscription",
    "get_notification_bus",
    "init_notification_bus",
]

logger = structlog.get_logger(__name__)

Handler = Callable[["Event"], Any | Coroutine[Any, Any, Any]]


@dataclass(slots=True, frozen=True)
class Event:
    """Immutable event envelope.

    Attributes:
        source: Origin identifier ("host", "study")
        topic: What happened ("sessionstore-windows-restored", "study.started")
        data: Payload
        ts: Timestamp (auto-set)
    """
    source: str
    topic: str
    data: dict = field(default_factory=dict)
    ts: float = field(default_factory=lambda: datetime.now().timestamp())


@dataclass(slots=True, eq=False)
class Subscription:
    """Single subscription with filters. Compared by identity."""
    handler: Handler
    source: str = "*"
    topic: str = "*"

    def matches(self, event: Event) -> bool:
        """Check if event matches this subscription's filters."""
        if not fnmatch(event.source, self.source):
            return False
        return fnmatch(event.topic, self.topic)


class NotificationBus:
    """Async pub/sub with pattern-based subscriptions.

    Handlers for one event run concurrently; a failing handler is logged
    and doesn't affect the others or the emitter.
    """

    __slots__ = ("_subs", "_logger")

    def __init__(self) -> None:
        self._subs: list[Subscription] = []
        self._logger = logger.bind(component="notification_bus")

    def on(self, handler: Handler, *, source: str = "*", topic: str = "*") -> Subscription:
        """Subscribe to events matching filters.

        Returns:
            Subscription handle for remove()
        """
        sub = Subscription(handler, source, topic)
        self._subs.append(sub)
        return sub

    def remove(self, sub: Subscription) -> None:
        """Remove a subscription.

        Raises:
            NotSubscribedError: If the subscription is not active
        """
        if sub not in self._subs:
            raise NotSubscribedError(sub.topic)
        self._subs.remove(sub)

    def is_subscribed(self, sub: Subscription) -> bool:
        return sub in self._subs

    def subscribers(self, topic: str) -> int:
        """Count subscriptions whose topic pattern matches topic."""
        return sum(1 for s in self._subs if fnmatch(topic, s.topic))

    async def emit(self, source: str, topic: str, data: dict | None = None) -> None:
        """Emit an event to all matching subscribers."""
        event = Event(source, topic, data or {})

        # Snapshot: handlers may unsubscribe while we dispatch
        handlers = [s.handler for s in self._subs if s.matches(event)]
        if not handlers:
            return

        async def run_handler(h: Handler) -> None:
            try:
                result = h(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                self._logger.error(
                    "handler_error",
                    source=event.source,
                    topic=event.topic,
                    error=str(e),
                )

        await asyncio.gather(*[run_handler(h) for h in handlers])


# ─────────────────────────────────────────────────────────────────────────────
# Global singleton
# ─────────────────────────────────────────────────────────────────────────────

_bus: NotificationBus | None = None


def get_notification_bus() -> NotificationBus:
    """Get or create the global notification bus."""
    global _bus
    if _bus is None:
        _bus = NotificationBus()
    return _bus


def init_notification_bus() -> NotificationBus:
    """Initialize fresh notification bus (for testing)."""
    global _bus
    _bus = NotificationBus()
    return _bus
