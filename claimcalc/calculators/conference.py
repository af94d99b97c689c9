"""Conference presentation reimbursement calculation."""

import logging

from claimcalc.calculators.base import calculator_boundary
from claimcalc.models import (
    ConferenceCalculationResult,
    ConferenceDetails,
    ConferenceMode,
    ConferenceType,
    IncentiveClaim,
)
from claimcalc.normalize import normalize_label, round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy

logger = logging.getLogger(__name__)


def is_home_conference(
    details: ConferenceDetails,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> bool:
    """Whether the conference was organized by the university itself."""
    organizer = normalize_label(details.organizer_name)
    name = normalize_label(details.conference_name)
    return normalize_label(policy.home_organizer_marker) in organizer or (
        normalize_label(policy.home_conference_marker) in name
    )


def _by_presentation(caps: dict[str, float], presentation_type: str | None) -> float:
    return caps.get(presentation_type or "", caps.get("default", 0.0))


def _offline_cap(details: ConferenceDetails, policy: IncentivePolicy) -> float:
    conference_type = details.conference_type
    if conference_type == ConferenceType.INTERNATIONAL:
        if details.conference_venue == "India":
            return _by_presentation(policy.india_venue_caps, details.presentation_type)
        return policy.international_venue_caps.get(details.conference_venue or "", 0.0)
    if conference_type == ConferenceType.NATIONAL:
        return _by_presentation(policy.national_caps, details.presentation_type)
    if conference_type == ConferenceType.REGIONAL:
        return policy.regional_cap
    return 0.0


def conference_cap(
    details: ConferenceDetails,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> float:
    """Return the maximum reimbursement for a conference claim.

    Args:
        details: Conference attributes.
        policy: Incentive tables.

    Returns:
        Cap in INR, or 0 when no rule applies.
    """
    fee = details.registration_fee or 0.0
    if is_home_conference(details, policy):
        return fee * policy.home_fee_fraction

    if details.conference_mode == ConferenceMode.ONLINE:
        tier = policy.online_caps.get(details.online_presentation_order or "")
        if tier is None:
            tier = policy.online_caps[policy.online_default_order]
        return min(fee * tier.fraction, tier.ceiling)

    if details.conference_mode == ConferenceMode.OFFLINE:
        return _offline_cap(details, policy)
    return 0.0


def eligible_expenses(details: ConferenceDetails) -> float:
    """Registration plus travel when attended offline, else registration."""
    fee = details.registration_fee or 0.0
    if details.conference_mode == ConferenceMode.OFFLINE:
        return fee + (details.travel_fare or 0.0)
    return fee


@calculator_boundary("conference", result_cls=ConferenceCalculationResult)
def calculate_conference_incentive(
    claim: IncentiveClaim,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> ConferenceCalculationResult:
    """Calculate the reimbursement for a conference presentation.

    Args:
        claim: Conference claim.
        policy: Incentive tables.

    Returns:
        Result with the rounded amount plus the eligible-expense subtotal
        and cap it was derived from.
    """
    details: ConferenceDetails = claim.details
    expenses = eligible_expenses(details)
    cap = conference_cap(details, policy)
    amount = min(expenses, cap) if cap > 0 else expenses
    logger.debug(
        "Conference claim %s: expenses %.2f, cap %.2f", claim.claim_id, expenses, cap
    )
    return ConferenceCalculationResult(
        success=True,
        amount=round_amount(amount),
        eligible_expenses=expenses,
        max_reimbursement=cap,
    )
