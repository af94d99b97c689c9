"""Article processing charge (APC) reimbursement calculation."""

import logging
import re

from claimcalc.calculators.base import calculator_boundary, failure
from claimcalc.models import ApcDetails, CalculationResult, IncentiveClaim
from claimcalc.normalize import normalize_label, round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy

logger = logging.getLogger(__name__)

NO_AUTHORS = "No authors listed on the APC claim."
NO_POLICY_LIMIT = "No applicable policy limit found for the selected indexing."


def _is_esci(label: str) -> bool:
    return "esci" in label


def _is_ugc_care(label: str) -> bool:
    return "ugc-care" in label or "ugc care" in label


def _is_scopus_or_wos(label: str) -> bool:
    if _is_esci(label) or _is_ugc_care(label):
        return False
    return (
        label.startswith("scopus")
        or label.startswith("web of science")
        or re.search(r"\bsci\b", label) is not None
    )


def apc_ceiling(
    details: ApcDetails,
    is_special_faculty: bool,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> tuple[int, bool]:
    """Determine the reimbursement ceiling for an APC claim.

    Alternative ceilings are not added together; the highest applicable
    one wins.

    Args:
        details: APC attributes.
        is_special_faculty: Whether the claimant's faculty follows the
            quartile-only policy (no ESCI or UGC-CARE ceilings).
        policy: Incentive tables.

    Returns:
        Tuple of (ceiling, whether a Scopus/WoS/SCI label was present).
    """
    labels = [normalize_label(s) for s in details.indexing_status]
    major = any(_is_scopus_or_wos(label) for label in labels)

    ceilings: list[int] = []
    if major and details.q_rating in policy.apc_quartile_ceilings:
        ceilings.append(policy.apc_quartile_ceilings[details.q_rating])
    if not is_special_faculty:
        if any(_is_esci(label) for label in labels):
            ceilings.append(policy.apc_esci_ceiling)
        if any(_is_ugc_care(label) for label in labels):
            ceilings.append(policy.apc_ugc_care_ceiling)
    return max(ceilings, default=0), major


@calculator_boundary("APC")
def calculate_apc_incentive(
    claim: IncentiveClaim,
    is_special_faculty: bool = False,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> CalculationResult:
    """Calculate the per-author APC reimbursement.

    Args:
        claim: APC claim.
        is_special_faculty: Whether the claimant's faculty is a
            special-policy faculty.
        policy: Incentive tables.

    Returns:
        Result with the rounded per-author amount, or a failure when the
        author list is empty or no policy ceiling applies.
    """
    if not claim.authors:
        return failure(NO_AUTHORS)

    details: ApcDetails = claim.details
    ceiling, major = apc_ceiling(details, is_special_faculty, policy)
    if ceiling == 0 and not major:
        logger.info("APC claim %s has no applicable ceiling", claim.claim_id)
        return failure(NO_POLICY_LIMIT)

    paid = details.total_amount or 0.0
    admissible = min(paid, ceiling) if ceiling > 0 else paid
    return CalculationResult(
        success=True, amount=round_amount(admissible / len(claim.authors))
    )
