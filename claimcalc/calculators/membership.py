"""Professional body membership fee reimbursement."""

from claimcalc.calculators.base import calculator_boundary
from claimcalc.models import CalculationResult, IncentiveClaim, MembershipDetails
from claimcalc.normalize import round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy


@calculator_boundary("membership")
def calculate_membership_incentive(
    claim: IncentiveClaim,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> CalculationResult:
    """Reimburse half the membership fee up to the policy cap.

    Args:
        claim: Membership claim.
        policy: Incentive tables.

    Returns:
        Result with the rounded amount, 0 when no payment is recorded.
    """
    details: MembershipDetails = claim.details
    paid = details.amount_paid or 0.0
    if paid <= 0:
        return CalculationResult(success=True, amount=0)
    amount = min(paid * policy.membership_share, policy.membership_cap)
    return CalculationResult(success=True, amount=round_amount(amount))
