"""
Contracts (Protocols) for the study lifecycle controller.

These protocols define the interfaces the controller needs from its
collaborators. Using Protocol enables structural subtyping - no
inheritance required.
"""

from .eligibility import EligibilityProvider
from .resource import ResourceRegistrar
from .service import SubordinateService
from .storage import PreferenceStore, StateStore

__all__ = [
    "EligibilityProvider",
    "PreferenceStore",
    "ResourceRegistrar",
    "StateStore",
    "SubordinateService",
]
