"""Tests for the deferred-start subscription handle."""

import pytest

from study_lifecycle.lifecycle import DeferredStart

TOPIC = "ui-ready"


@pytest.fixture
def calls():
    return []


@pytest.fixture
def deferred(bus, calls):
    async def on_ready():
        calls.append("ready")

    return DeferredStart(bus, TOPIC, on_ready)


class TestDeferredStart:
    """Arm, fire and cancel."""

    def test_initially_disarmed(self, deferred, bus):
        """Nothing is subscribed until armed."""
        assert deferred.armed is False
        assert bus.subscribers(TOPIC) == 0

    def test_arm_once(self, deferred, bus):
        """Arming twice keeps a single subscription."""
        assert deferred.arm() is True
        assert deferred.arm() is False

        assert bus.subscribers(TOPIC) == 1

    @pytest.mark.asyncio
    async def test_fires_once(self, deferred, bus, calls):
        """The callback runs once and the subscription is removed."""
        deferred.arm()

        await bus.emit("host", TOPIC)
        await bus.emit("host", TOPIC)

        assert calls == ["ready"]
        assert deferred.fired is True
        assert deferred.armed is False
        assert bus.subscribers(TOPIC) == 0

    @pytest.mark.asyncio
    async def test_disarm_prevents_firing(self, deferred, bus, calls):
        """A disarmed start never runs."""
        deferred.arm()

        assert deferred.disarm() is True
        await bus.emit("host", TOPIC)

        assert calls == []

    def test_disarm_never_armed(self, deferred):
        """Disarming without arming is a no-op."""
        assert deferred.disarm() is False

    @pytest.mark.asyncio
    async def test_disarm_after_fired(self, deferred, bus):
        """Disarming after the topic fired is a no-op."""
        deferred.arm()
        await bus.emit("host", TOPIC)

        assert deferred.disarm() is False

    def test_disarm_when_removed_elsewhere(self, deferred, bus):
        """A subscription already gone from the bus is tolerated."""
        deferred.arm()
        bus.remove(deferred._sub)

        assert deferred.disarm() is False
        assert deferred.armed is False

    @pytest.mark.asyncio
    async def test_rearm_after_fired(self, deferred, bus, calls):
        """A new activation can arm again."""
        deferred.arm()
        await bus.emit("host", TOPIC)

        deferred.arm()
        await bus.emit("host", TOPIC)

        assert calls == ["ready", "ready"]
