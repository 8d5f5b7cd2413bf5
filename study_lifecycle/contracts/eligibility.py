"""
Eligibility Provider Protocol - Contract for the opt-in client.

The opt-in/telemetry client owns consent state and the termination
primitive. The controller only asks and, when needed, ends the study.
"""

from typing import Any, Protocol, runtime_checkable

__all__ = ["EligibilityProvider"]


@runtime_checkable
class EligibilityProvider(Protocol):
    """Contract for the consent source.

    Example:
        class OptInClient:
            async def is_user_opted_in(self) -> bool:
                return await self._query_consent()

            def end_study(self, reason: str) -> None:
                self._submit_exit(reason)
                self._uninstall_self()

    The controller additionally calls an optional ``startup()`` method
    before the first consent query, if the provider defines one.
    """

    def is_user_opted_in(self) -> Any:
        """Current consent. May return bool or an awaitable of bool."""
        ...

    def end_study(self, reason: str) -> Any:
        """Terminate the study ("ineligible" or "expired").

        Fire-and-forget from the controller's point of view.
        """
        ...
