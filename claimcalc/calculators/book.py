"""Book and book-chapter incentive calculation."""

import logging

from claimcalc.calculators.base import calculator_boundary
from claimcalc.models import BookDetails, CalculationResult, IncentiveClaim
from claimcalc.normalize import round_amount
from claimcalc.policy import DEFAULT_INCENTIVE_POLICY, IncentivePolicy, PageTier

logger = logging.getLogger(__name__)


def _tier_amount(tiers: list[PageTier], pages: int) -> int:
    for tier in sorted(tiers, key=lambda t: t.min_pages, reverse=True):
        if pages >= tier.min_pages:
            return tier.amount
    return 0


def get_base_incentive_for_book(
    details: BookDetails,
    is_chapter: bool,
    pages: int | None = None,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> int:
    """Look up the base amount for a book or chapter.

    Args:
        details: Book attributes.
        is_chapter: Evaluate the chapter table instead of the book table.
        pages: Page count override. Defaults to the chapter or book
            page count on the claim.
        policy: Incentive tables.

    Returns:
        Base incentive, or 0 when no tier applies.
    """
    if pages is None:
        pages = (details.chapter_pages if is_chapter else details.total_pages) or 0

    if is_chapter:
        if details.is_scopus_indexed:
            return policy.chapter_scopus_amount
        tiers = policy.chapter_tiers.get(details.publisher_type or "")
    else:
        if details.is_scopus_indexed:
            return policy.book_scopus_amount
        tiers = policy.book_tiers.get(details.publisher_type or "")
    return _tier_amount(tiers, pages) if tiers else 0


def chapter_series_total(
    chapter_base: float, chapters: int, full_book_amount: float
) -> float:
    """Sum ``base/k`` over k chapters, capped at the full-book amount."""
    total = 0.0
    for k in range(1, chapters + 1):
        total += chapter_base / k
        if total >= full_book_amount:
            return float(full_book_amount)
    return total


def internal_author_count(claim: IncentiveClaim) -> int:
    """Count internal authors for splitting a book incentive.

    The listed internal authors and the separate ``total_pu_authors`` field
    are added together. Both are entered by the claimant and may overlap.
    """
    details: BookDetails = claim.details
    listed = sum(1 for a in claim.authors if a.is_internal)
    declared = details.total_pu_authors or 0
    if listed and declared:
        logger.warning(
            "Book claim %s counts %d listed and %d declared PU authors; "
            "these may overlap",
            claim.claim_id,
            listed,
            declared,
        )
    return listed + declared


@calculator_boundary("book")
def calculate_book_incentive(
    claim: IncentiveClaim,
    policy: IncentivePolicy = DEFAULT_INCENTIVE_POLICY,
) -> CalculationResult:
    """Calculate the incentive for a book or book-chapter claim.

    Args:
        claim: Book claim.
        policy: Incentive tables.

    Returns:
        Result with the rounded per-author amount.
    """
    details: BookDetails = claim.details
    is_chapter = details.is_chapter
    base = float(get_base_incentive_for_book(details, is_chapter, policy=policy))

    if details.author_role == "Editor":
        base /= 2

    total = base
    chapters = details.chapters_in_same_book or 0
    if is_chapter and chapters > 1:
        full_book = get_base_incentive_for_book(
            details,
            is_chapter=False,
            pages=policy.full_book_reference_pages,
            policy=policy,
        )
        total = chapter_series_total(base, chapters, full_book)

    authors = internal_author_count(claim)
    if authors > 1:
        total /= authors

    return CalculationResult(success=True, amount=round_amount(total))
