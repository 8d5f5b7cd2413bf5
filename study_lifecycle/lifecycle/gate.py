"""
Eligibility & Expiration Gate - Decides whether the study may run.

Runs at the top of every startup:
1. Ask the opt-in client for consent; if withdrawn, end the study
   ("ineligible").
2. Make sure the expiration record exists. It is written once, on the
   first startup that finds it missing, as now + total phase length. It
   is the backstop when consent-revocation signalling fails, so it is
   checked on every startup whatever the reason.
3. If now is past the record, end the study ("expired").
"""

import time
from dataclasses import dataclass
from typing import Callable, Iterable

import structlog

from ..contracts import EligibilityProvider, PreferenceStore
from ..phases import Phase, study_length_ms
from ..utils import maybe_await

__all__ = ["END_EXPIRED", "END_INELIGIBLE", "EligibilityGate", "GateDecision", "now_ms"]

logger = structlog.get_logger(__name__)

END_INELIGIBLE = "ineligible"
END_EXPIRED = "expired"

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(slots=True, frozen=True)
class GateDecision:
    """Result of one gate evaluation.

    Attributes:
        eligible: Consent as reported by the provider
        expiration: Expiration record (None when eligibility failed first)
        end_reason: "ineligible", "expired", or None if the study may run
    """
    eligible: bool
    expiration: int | None = None
    end_reason: str | None = None

    @property
    def passed(self) -> bool:
        return self.end_reason is None


class EligibilityGate:
    """Consent and expiration checks for the study.

    Example:
        gate = EligibilityGate(provider, prefs, phases, config.expiration_pref)
        decision = await gate.evaluate()
        if not decision.passed:
            return
    """

    def __init__(
        self,
        provider: EligibilityProvider,
        prefs: PreferenceStore,
        phases: Iterable[Phase],
        expiration_pref: str,
        clock: Clock = now_ms,
    ) -> None:
        self.provider = provider
        self.prefs = prefs
        self.phases = tuple(phases)
        self.expiration_pref = expiration_pref
        self.clock = clock

    async def check_eligibility(self) -> bool:
        """Whether the user is (still) opted in."""
        opted_in = await maybe_await(self.provider.is_user_opted_in())
        return bool(opted_in)

    def read_expiration_record(self) -> int | None:
        """Stored expiration, or None if absent or not an integer."""
        return self.prefs.get_int(self.expiration_pref)

    def ensure_expiration_record(self) -> int:
        """Return the expiration record, creating it if missing.

        An existing record is returned unchanged without a write, so it
        can never move. A non-integer value counts as missing.
        """
        record = self.read_expiration_record()
        if record is not None:
            return record

        record = self.clock() + study_length_ms(self.phases)
        self.prefs.set_int(self.expiration_pref, record)
        logger.info("expiration_record_created", pref=self.expiration_pref, expiration=record)
        return record

    def is_expired(self, record: int) -> bool:
        return self.clock() > record

    async def end_study(self, reason: str) -> None:
        """Hand termination to the opt-in client."""
        logger.info("study_ending", reason=reason)
        await maybe_await(self.provider.end_study(reason))

    async def evaluate(self) -> GateDecision:
        """Run the full gate, ending the study if a check fails."""
        if not await self.check_eligibility():
            await self.end_study(END_INELIGIBLE)
            return GateDecision(eligible=False, end_reason=END_INELIGIBLE)

        record = self.ensure_expiration_record()
        if self.is_expired(record):
            await self.end_study(END_EXPIRED)
            return GateDecision(eligible=True, expiration=record, end_reason=END_EXPIRED)

        return GateDecision(eligible=True, expiration=record)
