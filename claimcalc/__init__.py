"""claimcalc -- Research incentive and ARPS calculation for universities."""

from claimcalc.core import IncentiveEngine
from claimcalc.models import (
    ArpsResult,
    Author,
    AuthorRole,
    CalculationResult,
    ClaimAssessment,
    ClaimType,
    ConferenceCalculationResult,
    EmrProject,
    IncentiveClaim,
    PoolAuditEntry,
)

__all__ = [
    "ArpsResult",
    "Author",
    "AuthorRole",
    "CalculationResult",
    "ClaimAssessment",
    "ClaimType",
    "ConferenceCalculationResult",
    "EmrProject",
    "IncentiveClaim",
    "IncentiveEngine",
    "PoolAuditEntry",
]
