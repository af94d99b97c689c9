"""Router for per-claim incentive calculation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from claimcalc.api.deps import get_engine
from claimcalc.core import IncentiveEngine
from claimcalc.models import IncentiveClaim

router = APIRouter(prefix="/incentives", tags=["incentives"])


@router.post("/calculate")
def calculate_incentive(
    claim: IncentiveClaim,
    faculty: str | None = Query(None, description="Override claimant faculty"),
    designation: str | None = Query(
        None, description="Override claimant designation"
    ),
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Calculate the incentive for one claim.

    Args:
        claim: Claim document in the portal's format.
        faculty: Faculty to evaluate against instead of the claim's.
        designation: Designation to evaluate against instead of the claim's.
        engine: Injected IncentiveEngine.

    Returns:
        Calculation result. Validation and policy failures are reported
        with ``success: false`` rather than an HTTP error.
    """
    result = engine.calculate(claim, faculty=faculty, designation=designation)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/batch")
def assess_claims(
    claims: list[dict[str, Any]] = Body(...),
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Assess a batch of claims independently.

    Each claim is validated on its own, so one malformed document does
    not reject the request.

    Args:
        claims: Claim documents to evaluate.
        engine: Injected IncentiveEngine.

    Returns:
        Assessments for the valid claims in request order, and an
        ``errors`` list naming each rejected claim by index.
    """
    assessments, errors = engine.assess_payloads(claims)
    return {
        "assessments": [
            a.model_dump(mode="json", by_alias=True) for a in assessments
        ],
        "errors": errors,
    }


@router.post("/audit-pools")
def audit_pools(
    claims: list[IncentiveClaim],
    only_exceeding: bool = Query(True, description="Only over-allocated papers"),
    engine: IncentiveEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """Compare co-authors' shares against each paper's incentive pool.

    Args:
        claims: Research paper claims to audit.
        only_exceeding: Drop papers whose shares fit within the pool.
        engine: Injected IncentiveEngine.

    Returns:
        Pool audit entries.
    """
    entries = engine.audit_paper_pools(claims)
    if only_exceeding:
        entries = [e for e in entries if e.exceeds_pool]
    return [e.model_dump(mode="json", by_alias=True) for e in entries]
