"""
Lifecycle Reasons - Why the host is invoking an entry point.

Values are the host's numeric reason codes.
"""

from enum import IntEnum

from ..errors import UnknownReasonError

__all__ = ["LifecycleReason"]


class LifecycleReason(IntEnum):
    """Host-supplied reason for a lifecycle transition."""

    APP_STARTUP = 1
    APP_SHUTDOWN = 2
    ADDON_ENABLE = 3
    ADDON_DISABLE = 4  # Also sent during uninstallation
    ADDON_INSTALL = 5
    ADDON_UNINSTALL = 6
    ADDON_UPGRADE = 7
    ADDON_DOWNGRADE = 8

    @classmethod
    def decode(cls, value: "LifecycleReason | int | str") -> "LifecycleReason":
        """Decode a reason from an enum member, host code or name.

        Names are case-insensitive ("ADDON_UNINSTALL", "addon_uninstall").

        Raises:
            UnknownReasonError: If value is not a known reason
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise UnknownReasonError(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise UnknownReasonError(value) from None
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise UnknownReasonError(value) from None
        raise UnknownReasonError(value)

    @property
    def is_cold_boot(self) -> bool:
        """True when the whole application is starting."""
        return self is LifecycleReason.APP_STARTUP

    @property
    def is_uninstall(self) -> bool:
        return self is LifecycleReason.ADDON_UNINSTALL
