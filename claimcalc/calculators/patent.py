"""Patent incentive calculation."""

import logging

from claimcalc.calculators.base import calculator_boundary
from claimcalc.models import CalculationResult, IncentiveClaim, PatentDetails
from claimcalc.normalize import round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy

logger = logging.getLogger(__name__)


def applicant_multiplier(
    details: PatentDetails,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> float:
    """Share of the base kept by the university as applicant.

    Returns:
        1.0 for a sole university applicant, 0.8 for a joint one, and 0
        when the patent was not filed in the university's name.
    """
    if not details.filed_in_pu_name:
        return 0.0
    if details.is_pu_sole_applicant:
        return policy.patent_sole_multiplier
    return policy.patent_joint_multiplier


@calculator_boundary("patent")
def calculate_patent_incentive(
    claim: IncentiveClaim,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> CalculationResult:
    """Calculate the per-inventor incentive for a patent.

    Args:
        claim: Patent claim.
        policy: Incentive tables.

    Returns:
        Result with the rounded per-inventor amount.
    """
    details: PatentDetails = claim.details
    base = policy.patent_amounts.get(details.current_status or "", 0)
    total = base * applicant_multiplier(details, policy)
    inventors = len(details.inventors) or 1
    logger.debug(
        "Patent claim %s: base %d, %d inventor(s)", claim.claim_id, base, inventors
    )
    return CalculationResult(success=True, amount=round_amount(total / inventors))
