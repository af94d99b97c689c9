"""Router for Annual Research Performance Score requests."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import Field

from claimcalc.api.deps import get_engine
from claimcalc.core import IncentiveEngine
from claimcalc.models import EmrProject, IncentiveClaim, PortalModel

router = APIRouter(tags=["arps"])


class ArpsRequest(PortalModel):
    """Snapshot of a user's records to score."""

    user_id: str
    year: int
    claims: list[IncentiveClaim] = Field(default_factory=list)
    projects: list[EmrProject] = Field(default_factory=list)


@router.post("/arps")
def compute_arps(
    request: ArpsRequest,
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Compute the ARPS record for a user and evaluation year.

    Args:
        request: User, year, and the claim and project snapshots.
        engine: Injected IncentiveEngine.

    Returns:
        ARPS record with category scores, total, and grade.
    """
    result = engine.arps(
        request.user_id, request.year, request.claims, request.projects
    )
    return result.model_dump(mode="json", by_alias=True)
