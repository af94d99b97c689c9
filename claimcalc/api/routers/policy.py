"""Router exposing the policy tables in effect."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from claimcalc.api.deps import get_engine
from claimcalc.core import IncentiveEngine

router = APIRouter(tags=["policy"])


@router.get("/policy")
def get_policy(engine: IncentiveEngine = Depends(get_engine)) -> dict[str, Any]:
    """Return the incentive and ARPS tables the engine is using.

    Args:
        engine: Injected IncentiveEngine.

    Returns:
        Institution metadata plus every policy table.
    """
    return engine.policy_tables()
