"""Tests for the eligibility and expiration gate."""

import pytest

from conftest import NOW, Clock, FakeProvider
from study_lifecycle.lifecycle import END_EXPIRED, END_INELIGIBLE, EligibilityGate
from study_lifecycle.phases import DAY_MS, Phase

PHASES = (Phase("a", 10 * DAY_MS), Phase("b", 20 * DAY_MS), Phase("c"))


class SyncProvider:
    """Provider with plain (non-async) methods."""

    def __init__(self, opted_in: bool) -> None:
        self.opted_in = opted_in
        self.ended = []

    def is_user_opted_in(self) -> bool:
        return self.opted_in

    def end_study(self, reason: str) -> None:
        self.ended.append(reason)


class CountingPrefs:
    """Wraps a preference store and counts writes."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.writes = 0

    def __getattr__(self, name):
        return getattr(self.inner, name)

    def set_int(self, key, value):
        self.writes += 1
        self.inner.set_int(key, value)


@pytest.fixture
def gate(events, prefs, config):
    return EligibilityGate(
        FakeProvider(events), prefs, PHASES, config.expiration_pref, clock=Clock()
    )


class TestEligibility:
    """Consent checks."""

    @pytest.mark.asyncio
    async def test_opted_in(self, gate):
        """Async provider reporting consent."""
        assert await gate.check_eligibility() is True

    @pytest.mark.asyncio
    async def test_not_opted_in(self, gate):
        """Withdrawn consent is reported as ineligible."""
        gate.provider.opted_in = False

        assert await gate.check_eligibility() is False

    @pytest.mark.asyncio
    async def test_sync_provider(self, prefs, config):
        """Providers may answer synchronously."""
        gate = EligibilityGate(SyncProvider(False), prefs, PHASES, config.expiration_pref)

        assert await gate.check_eligibility() is False


class TestExpirationRecord:
    """Creation and stability of the expiration record."""

    def test_created_from_phase_durations(self, gate, prefs, config):
        """Missing record is now + sum of phase durations."""
        record = gate.ensure_expiration_record()

        assert record == NOW + 30 * DAY_MS
        assert prefs.get_int(config.expiration_pref) == record

    def test_idempotent_without_write(self, prefs, config):
        """An existing record is returned unchanged and not rewritten."""
        counting = CountingPrefs(prefs)
        gate = EligibilityGate(SyncProvider(True), counting, PHASES, config.expiration_pref,
                               clock=Clock())

        first = gate.ensure_expiration_record()
        second = gate.ensure_expiration_record()

        assert first == second
        assert counting.writes == 1

    def test_never_moves_earlier(self, gate, prefs, config):
        """A later clock doesn't recompute an existing record."""
        prefs.set_int(config.expiration_pref, NOW + 5)
        gate.clock.now = NOW + DAY_MS

        assert gate.ensure_expiration_record() == NOW + 5

    def test_float_value_kept(self, gate, prefs, config):
        """A float record is numeric and is never rewritten."""
        prefs.set(config.expiration_pref, float(NOW + 5 * DAY_MS) + 0.5)

        assert gate.ensure_expiration_record() == NOW + 5 * DAY_MS
        assert prefs.get(config.expiration_pref) == float(NOW + 5 * DAY_MS) + 0.5

    def test_non_numeric_value_recomputed(self, gate, prefs, config):
        """A corrupt value counts as absent, not as expired."""
        prefs.set(config.expiration_pref, "soon")

        record = gate.ensure_expiration_record()

        assert record == NOW + 30 * DAY_MS
        assert gate.is_expired(record) is False

    def test_no_phases_expires_now(self, prefs, config):
        """With no durations the study ends at now."""
        gate = EligibilityGate(SyncProvider(True), prefs, [Phase("open")],
                               config.expiration_pref, clock=Clock())

        assert gate.ensure_expiration_record() == NOW

    def test_is_expired_is_strict(self, gate):
        """Only a time strictly after the record is expired."""
        assert gate.is_expired(NOW - 1) is True
        assert gate.is_expired(NOW) is False
        assert gate.is_expired(NOW + 1) is False


class TestEvaluate:
    """Full gate policy."""

    @pytest.mark.asyncio
    async def test_passes(self, gate):
        """Eligible and not expired."""
        decision = await gate.evaluate()

        assert decision.passed
        assert decision.expiration == NOW + 30 * DAY_MS
        assert gate.provider.ended == []

    @pytest.mark.asyncio
    async def test_ineligible_skips_expiration(self, gate, prefs, config):
        """Ineligibility ends the study before any record is written."""
        gate.provider.opted_in = False

        decision = await gate.evaluate()

        assert decision.end_reason == END_INELIGIBLE
        assert decision.expiration is None
        assert gate.provider.ended == [END_INELIGIBLE]
        assert not prefs.has_user_value(config.expiration_pref)

    @pytest.mark.asyncio
    async def test_expired(self, gate, prefs, config):
        """A passed record ends the study as expired."""
        prefs.set_int(config.expiration_pref, NOW - DAY_MS)

        decision = await gate.evaluate()

        assert decision.end_reason == END_EXPIRED
        assert decision.eligible is True
        assert gate.provider.ended == [END_EXPIRED]

    @pytest.mark.asyncio
    async def test_expired_float_record(self, gate, prefs, config):
        """A float record in the past is honored, not recomputed."""
        prefs.set(config.expiration_pref, float(NOW - DAY_MS))

        decision = await gate.evaluate()

        assert decision.end_reason == END_EXPIRED
        assert prefs.get(config.expiration_pref) == float(NOW - DAY_MS)
