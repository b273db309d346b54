"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    ObligationStatus,
    OutcomeCategory,

    # Entities
    AllocationOutcome,
    AnyObligation,
    LedgerSummary,
    Obligation,
    OutstandingObligation,
    SettledObligation,
)

__all__ = [
    # Enums
    "ObligationStatus",
    "OutcomeCategory",

    # Entities
    "AllocationOutcome",
    "AnyObligation",
    "LedgerSummary",
    "Obligation",
    "OutstandingObligation",
    "SettledObligation",
]
