"""Research paper incentive calculation.

The base amount comes from an ordered list of precedence rules. The
publication subtype then scales it into a pool, and the pool is split
among the paper's internal authors. Each co-author who submits a claim
receives their own share of the same pool.
"""

import logging
from collections.abc import Callable

from claimcalc.authors import AuthorPartition, find_claimant
from claimcalc.calculators.base import calculator_boundary, failure
from claimcalc.models import (
    Author,
    CalculationResult,
    IncentiveClaim,
    PublicationType,
    ResearchPaperDetails,
)
from claimcalc.normalize import round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy

logger = logging.getLogger(__name__)

CLAIMANT_NOT_FOUND = "Claimant not found in the author list."
PRESENTING_ONLY = (
    "Only presenting authors are eligible for an incentive on Scopus "
    "indexed conference proceedings."
)

BaseRule = Callable[
    [ResearchPaperDetails, str | None, str | None, IncentivePolicy], int | None
]


def _phd_scholar_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    if designation != policy.phd_scholar_designation:
        return None
    return policy.phd_scholar_amounts.get(details.journal_classification or "", 0)


def _proceedings_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    if details.publication_type == PublicationType.CONFERENCE_PROCEEDINGS:
        return policy.conference_proceedings_amount
    return None


def _quartile_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    return policy.quartile_amounts.get(details.journal_classification or "")


def _special_faculty_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    return 0 if policy.is_special_faculty(faculty) else None


def _wos_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    if details.wos_type and details.wos_type in policy.wos_fallback_types:
        return policy.wos_fallback_amount
    return None


def _ugc_care_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    if details.publication_type == PublicationType.UGC_CARE_GROUP_I:
        return policy.ugc_care_amount
    return None


def _no_match_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None,
    policy: IncentivePolicy,
) -> int | None:
    return 0


# Evaluated top to bottom; the first rule returning a value wins.
BASE_RULES: tuple[tuple[str, BaseRule], ...] = (
    ("phd_scholar", _phd_scholar_rule),
    ("conference_proceedings", _proceedings_rule),
    ("quartile", _quartile_rule),
    ("special_faculty", _special_faculty_rule),
    ("wos_indexed", _wos_rule),
    ("ugc_care", _ugc_care_rule),
    ("no_match", _no_match_rule),
)


def resolve_base_rule(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None = None,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> tuple[str, int]:
    """Find the first base-amount rule that applies to a paper.

    Args:
        details: Paper attributes.
        faculty: Faculty of the claimant.
        designation: Designation of the claimant, if known.
        policy: Incentive tables.

    Returns:
        Tuple of (rule name, base amount).
    """
    for name, rule in BASE_RULES:
        amount = rule(details, faculty, designation, policy)
        if amount is not None:
            return name, amount
    return "no_match", 0


def get_base_incentive_for_paper(
    details: ResearchPaperDetails,
    faculty: str | None,
    designation: str | None = None,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> int:
    """Return the base incentive for a paper before any adjustment."""
    return resolve_base_rule(details, faculty, designation, policy)[1]


def adjust_for_publication_type(
    base_amount: float,
    details: ResearchPaperDetails,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> float:
    """Scale a base amount by publication subtype.

    Letters to the editor and editorials replace the base with a flat
    pool shared by all authors. Review articles are discounted only in
    the lower quartiles.

    Args:
        base_amount: Base incentive for the paper.
        details: Paper attributes.
        policy: Incentive tables.

    Returns:
        Total pool to split among authors.
    """
    publication_type = details.publication_type or ""
    if publication_type == PublicationType.LETTER_TO_EDITOR:
        return float(policy.editorial_pool)

    factor = policy.publication_type_factors.get(publication_type)
    if factor is None:
        return float(base_amount)
    if (
        publication_type == PublicationType.REVIEW_ARTICLE
        and details.journal_classification not in policy.review_discount_quartiles
    ):
        return float(base_amount)
    return base_amount * factor


def paper_incentive_pool(
    claim: IncentiveClaim,
    faculty: str | None,
    designation: str | None = None,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> float:
    """Return the total incentive pool for the paper behind a claim.

    The Ph.D Scholar schedule only replaces the base amount. Subtype
    scaling and the editorial pool apply to it like any other base.
    """
    details: ResearchPaperDetails = claim.details
    rule, base = resolve_base_rule(details, faculty, designation, policy)
    logger.debug("Paper base %d from rule '%s'", base, rule)
    return adjust_for_publication_type(base, details, policy)


def _general_share(
    partition: AuthorPartition,
    claimant: Author,
    pool: float,
    policy: IncentivePolicy,
) -> float:
    n_main = len(partition.main)
    n_co = len(partition.co_authors)
    n_internal = len(partition.internal)
    is_main = partition.contains(partition.main, claimant)
    is_co = partition.contains(partition.co_authors, claimant)

    if n_internal == 0:
        return 0.0
    if n_main == 1 and n_co == 0 and n_internal == 1:
        return pool if is_main else 0.0
    if n_main > 0 and n_co > 0:
        if is_co:
            return pool * policy.co_author_share / n_co
        if is_main:
            return pool * policy.main_author_share / n_main
        return 0.0
    if n_co == 1 and n_main == 0 and n_internal == 1:
        return pool * policy.co_author_only_share if is_co else 0.0
    if n_co > 1 and n_main == 0:
        return pool * policy.co_author_only_share / n_co if is_co else 0.0
    if n_main > 0 and n_co == 0:
        return pool / n_main if is_main else 0.0
    return 0.0


def claimant_share(
    claim: IncentiveClaim,
    claimant: Author,
    pool: float,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> tuple[float, str | None]:
    """Split a paper's pool and return the claimant's part.

    Args:
        claim: Claim being evaluated.
        claimant: The claimant's entry in the author list.
        pool: Total incentive pool for the paper.
        policy: Incentive tables.

    Returns:
        Tuple of (unrounded share, advisory message or None).
    """
    publication_type = claim.details.publication_type
    if publication_type == PublicationType.LETTER_TO_EDITOR:
        return pool / len(claim.authors), None

    partition = AuthorPartition.from_authors(claim.authors)
    if publication_type == PublicationType.CONFERENCE_PROCEEDINGS:
        if not partition.contains(partition.presenting, claimant):
            return 0.0, PRESENTING_ONLY
        return pool / len(partition.presenting), None

    return _general_share(partition, claimant, pool, policy), None


@calculator_boundary("research paper")
def calculate_research_paper_incentive(
    claim: IncentiveClaim,
    faculty: str | None = None,
    designation: str | None = None,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> CalculationResult:
    """Calculate the claimant's incentive for a research paper.

    Args:
        claim: Research paper claim.
        faculty: Claimant's faculty. Defaults to the claim's faculty.
        designation: Claimant's designation. Defaults to the claim's.
        policy: Incentive tables.

    Returns:
        Result with the claimant's rounded share. A non-presenting
        claimant on conference proceedings gets a zero amount with an
        advisory error rather than a failure.
    """
    claimant = find_claimant(claim.authors, claim.user_email)
    if claimant is None:
        return failure(CLAIMANT_NOT_FOUND)

    faculty = faculty if faculty is not None else claim.faculty
    designation = designation if designation is not None else claim.designation
    details: ResearchPaperDetails = claim.details

    pool = paper_incentive_pool(claim, faculty, designation, policy)
    share, advisory = claimant_share(claim, claimant, pool, policy)

    if details.was_apc_paid_by_university:
        share /= 2
    if details.is_pu_name_in_publication is False:
        share /= 2

    amount = round_amount(share)
    logger.debug(
        "Research paper claim %s: pool %.2f, share %d", claim.claim_id, pool, amount
    )
    return CalculationResult(success=True, amount=amount, error=advisory)
