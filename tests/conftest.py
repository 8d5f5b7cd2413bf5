"""Shared test fixtures."""

import tempfile
from pathlib import Path

import pytest

from study_lifecycle.bootstrap import create_controller
from study_lifecycle.config import StudyConfig
from study_lifecycle.events import init_notification_bus
from study_lifecycle.prefs import FilePreferenceStore
from study_lifecycle.resources import ResourceRegistry
from study_lifecycle.services import ACTIVE_URI, DWELL_TIME, HOSTS, PHASES, STORAGE

# Fixed "now" for deterministic expiration math
NOW = 1_700_000_000_000


class FakeProvider:
    """Opt-in client that records calls."""

    def __init__(self, events: list[str], opted_in: bool = True) -> None:
        self.events = events
        self.opted_in = opted_in
        self.ended: list[str] = []

    def startup(self) -> None:
        self.events.append("provider.startup")

    async def is_user_opted_in(self) -> bool:
        self.events.append("provider.is_user_opted_in")
        return self.opted_in

    def end_study(self, reason: str) -> None:
        self.events.append(f"end_study:{reason}")
        self.ended.append(reason)


class FakeService:
    """Subordinate service that records startup/shutdown."""

    def __init__(
        self,
        name: str,
        events: list[str],
        fail_startup: bool = False,
        fail_shutdown: bool = False,
    ) -> None:
        self.name = name
        self.events = events
        self.fail_startup = fail_startup
        self.fail_shutdown = fail_shutdown

    def startup(self) -> None:
        self.events.append(f"{self.name}.startup")
        if self.fail_startup:
            raise RuntimeError(f"{self.name} startup failed")

    def shutdown(self) -> None:
        self.events.append(f"{self.name}.shutdown")
        if self.fail_shutdown:
            raise RuntimeError(f"{self.name} shutdown failed")


class FakeStorage(FakeService):
    """Storage service with asynchronous startup."""

    async def startup(self) -> None:
        self.events.append(f"{self.name}.startup")
        if self.fail_startup:
            raise RuntimeError(f"{self.name} startup failed")


class Clock:
    """Settable epoch-milliseconds clock."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def config(temp_dir):
    """Create a test configuration with temp directory and built-in phases."""
    return StudyConfig(runtime_dir=temp_dir, phases_file=None)


@pytest.fixture
def prefs(config):
    return FilePreferenceStore(config.prefs_file)


@pytest.fixture
def bus():
    return init_notification_bus()


@pytest.fixture
def events():
    """Shared call log for fakes."""
    return []


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def provider(events):
    return FakeProvider(events)


@pytest.fixture
def services(events):
    """The five subordinate services, keyed by name."""
    return {
        STORAGE: FakeStorage(STORAGE, events),
        HOSTS: FakeService(HOSTS, events),
        ACTIVE_URI: FakeService(ACTIVE_URI, events),
        DWELL_TIME: FakeService(DWELL_TIME, events),
        PHASES: FakeService(PHASES, events),
    }


@pytest.fixture
def resources():
    return ResourceRegistry()


@pytest.fixture
def controller(provider, services, config, prefs, resources, bus, clock):
    """Controller wired to fakes, a temp preference store and a fixed clock."""
    return create_controller(
        provider,
        services.values(),
        config=config,
        prefs=prefs,
        resources=resources,
        bus=bus,
        clock=clock,
    )
