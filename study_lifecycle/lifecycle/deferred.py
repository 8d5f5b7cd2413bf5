"""
Deferred Start - Wait for the host UI before doing heavy startup work.

On a cold application boot the controller subscribes to the host's
one-shot "UI ready" topic and finishes startup when it fires. The
subscription is removed before the callback runs so the topic cannot
trigger startup twice, and shutdown can cancel a start that never fired.
"""

from typing import Any, Awaitable, Callable

import structlog

from ..errors import NotSubscribedError
from ..events import Event, NotificationBus, Subscription
from ..utils import maybe_await

__all__ = ["DeferredStart"]

logger = structlog.get_logger(__name__)


class DeferredStart:
    """One-shot subscription handle owned by the controller.

    Example:
        deferred = DeferredStart(bus, "sessionstore-windows-restored", finish_startup)
        deferred.arm()
        ...
        deferred.disarm()   # safe whether armed, fired or never armed
    """

    def __init__(
        self,
        bus: NotificationBus,
        topic: str,
        on_ready: Callable[[], Awaitable[Any] | Any],
    ) -> None:
        self.bus = bus
        self.topic = topic
        self.on_ready = on_ready
        self._sub: Subscription | None = None
        self.fired = False

    @property
    def armed(self) -> bool:
        """True while a subscription is outstanding."""
        return self._sub is not None

    def arm(self) -> bool:
        """Subscribe to the ready topic.

        Returns:
            True if a new subscription was made, False if already armed
        """
        if self._sub is not None:
            logger.debug("deferred_start_already_armed", topic=self.topic)
            return False

        self.fired = False
        self._sub = self.bus.on(self._handle, topic=self.topic)
        logger.info("deferred_start_armed", topic=self.topic)
        return True

    def disarm(self) -> bool:
        """Remove the subscription.

        A subscription that already fired, was never made, or was removed
        elsewhere is a no-op.

        Returns:
            True if an outstanding subscription was removed
        """
        sub, self._sub = self._sub, None
        if sub is None:
            return False
        try:
            self.bus.remove(sub)
        except NotSubscribedError:
            logger.debug("deferred_start_not_subscribed", topic=self.topic)
            return False
        logger.debug("deferred_start_disarmed", topic=self.topic)
        return True

    async def _handle(self, event: Event) -> None:
        if self._sub is None:
            # Cancelled while the event was being dispatched
            return
        self.disarm()
        self.fired = True
        logger.info("ui_ready", topic=event.topic, source=event.source)
        await maybe_await(self.on_ready())
