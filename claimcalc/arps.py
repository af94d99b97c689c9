"""Annual Research Performance Score (ARPS) aggregation.

Re-scores a user's approved claims and sanctioned EMR projects on the ARPS
point scale, which is separate from the monetary incentive tables. The
amount stored on a claim is never read or changed here.

Evaluation years run from June 1 of the given year through May 31 of the
next.
"""

import logging
from datetime import date, datetime, timedelta

from claimcalc.authors import (
    AuthorClass,
    claimant_position,
    classify_role,
    find_author_for_user,
)
from claimcalc.models import (
    APPROVED_STATUSES,
    ArpsCategory,
    ArpsContribution,
    ArpsResult,
    ClaimType,
    EmrProject,
    IncentiveClaim,
    PatentStatus,
    PublicationType,
)
from claimcalc.normalize import normalize_label, parse_sanctioned_amount
from claimcalc.policy import DEFAULT_ARPS_POLICY, ArpsPolicy

logger = logging.getLogger(__name__)

_CO_AUTHOR_CLASSES = (AuthorClass.CO_AUTHOR, AuthorClass.PRESENTING)


def evaluation_window(
    year: int, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> tuple[date, date]:
    """Return the inclusive first and last day of an evaluation year.

    Args:
        year: Calendar year in which the evaluation year starts.
        policy: ARPS tables.

    Returns:
        Tuple of (start, end) dates.
    """
    start = date(year, policy.window_start_month, policy.window_start_day)
    end = date(year + 1, policy.window_start_month, policy.window_start_day)
    return start, end - timedelta(days=1)


def _in_window(moment: datetime | None, start: date, end: date) -> bool:
    return moment is not None and start <= moment.date() <= end


def journal_role_multiplier(
    author_class: AuthorClass, position: int, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> float:
    """Role multiplier for journal papers.

    Co-authors beyond the position limit earn the reduced multiplier;
    everyone else who is not a lead author earns the co-author one.
    """
    if author_class.is_lead:
        return policy.lead_author_multiplier
    if (
        author_class is AuthorClass.CO_AUTHOR
        and position > policy.co_author_position_limit
    ):
        return policy.distant_co_author_multiplier
    return policy.co_author_multiplier


def book_conference_role_multiplier(
    author_class: AuthorClass, position: int, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> float:
    """Role multiplier for books, chapters, and proceedings.

    First & Presenting authors score as leads and Presenting authors as
    co-authors, since proceedings incentives go only to presenters.
    """
    if author_class.is_lead:
        return policy.lead_author_multiplier
    if (
        author_class in _CO_AUTHOR_CLASSES
        and 0 < position <= policy.co_author_position_limit
    ):
        return policy.co_author_multiplier
    return 0.0


def journal_points(
    publication_type: str | None,
    classification: str | None,
    policy: ArpsPolicy = DEFAULT_ARPS_POLICY,
) -> float:
    """Base points for a journal paper by publication type."""
    if publication_type in policy.review_types:
        if classification in policy.review_top_quartiles:
            return policy.review_points_top
        return policy.review_points_other
    return policy.journal_points.get(publication_type or "", 0.0)


def publication_item_score(
    claim: IncentiveClaim, user_id: str, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> float:
    """Score one approved claim toward the publications category.

    Args:
        claim: Approved paper, book, or conference claim.
        user_id: User being evaluated.
        policy: ARPS tables.

    Returns:
        Points contributed, 0 when the user is not an author or the
        claim type does not count toward publications.
    """
    author = find_author_for_user(claim, user_id)
    if author is None:
        return 0.0
    author_class = classify_role(author.role)
    position = claimant_position(claim)
    details = claim.details

    if claim.claim_type == ClaimType.BOOK:
        if not details.is_scopus_indexed:
            return 0.0
        points = (
            policy.scopus_chapter_points
            if details.is_chapter
            else policy.scopus_book_points
        )
        return points * book_conference_role_multiplier(author_class, position, policy)

    if claim.claim_type in (ClaimType.CONFERENCE, ClaimType.RESEARCH_PAPER):
        if details.publication_type == PublicationType.CONFERENCE_PROCEEDINGS:
            return policy.proceedings_points * book_conference_role_multiplier(
                author_class, position, policy
            )

    if claim.claim_type == ClaimType.RESEARCH_PAPER:
        points = journal_points(
            details.publication_type, details.journal_classification, policy
        )
        multiplier = policy.quartile_multipliers.get(
            details.journal_classification or "", 0.0
        )
        return points * multiplier * journal_role_multiplier(
            author_class, position, policy
        )
    return 0.0


def patent_item_score(
    claim: IncentiveClaim, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> float:
    """Score one approved patent claim."""
    details = claim.details
    if not details.filed_in_pu_name:
        return 0.0
    if details.current_status == PatentStatus.GRANTED:
        points = policy.granted_patent_points.get(
            details.patent_locale or "",
            policy.granted_patent_points.get("default", 0.0),
        )
    else:
        points = policy.patent_points.get(details.current_status or "", 0.0)

    multiplier = (
        policy.patent_sole_multiplier
        if details.is_pu_sole_applicant
        else policy.patent_joint_multiplier
    )
    return points * multiplier


def emr_item_score(
    project: EmrProject, user_id: str, policy: ArpsPolicy = DEFAULT_ARPS_POLICY
) -> float:
    """Score one sanctioned EMR project for a PI or co-PI."""
    amount = project.sanctioned_amount
    if amount is None:
        amount = parse_sanctioned_amount(project.duration_amount)
    if amount is None:
        return 0.0
    is_pi = project.user_id == user_id
    for band in policy.emr_bands:
        if band.contains(amount):
            return band.pi_points if is_pi else band.co_pi_points
    return 0.0


def _eligible_claims(
    claims: list[IncentiveClaim], user_id: str, start: date, end: date
) -> list[IncentiveClaim]:
    eligible = []
    for claim in claims:
        if claim.uid != user_id or claim.status not in APPROVED_STATUSES:
            continue
        if _in_window(claim.approval_date or claim.submission_date, start, end):
            eligible.append(claim)
    return eligible


def _eligible_projects(
    projects: list[EmrProject],
    user_id: str,
    start: date,
    end: date,
    policy: ArpsPolicy,
) -> list[EmrProject]:
    unique: dict[str, EmrProject] = {}
    for project in projects:
        if project.user_id != user_id and user_id not in project.co_pi_uids:
            continue
        if normalize_label(project.status) not in policy.sanctioned_statuses:
            continue
        if not _in_window(project.sanction_date, start, end):
            continue
        unique[project.project_id] = project
    return list(unique.values())


def _category(
    contributions: list[ArpsContribution], weight: float, cap: float
) -> ArpsCategory:
    raw = sum(c.score for c in contributions)
    weighted = raw * weight
    return ArpsCategory(
        raw=raw,
        weighted=weighted,
        final=min(weighted, cap),
        contributions=contributions,
    )


def calculate_arps(
    user_id: str,
    year: int,
    claims: list[IncentiveClaim],
    projects: list[EmrProject] | None = None,
    policy: ArpsPolicy = DEFAULT_ARPS_POLICY,
) -> ArpsResult:
    """Compute the ARPS record for a user and evaluation year.

    Args:
        user_id: uid of the user being evaluated.
        year: Calendar year in which the evaluation year starts.
        claims: Snapshot of claims to consider. Only the user's own
            approved claims inside the window count.
        projects: Snapshot of EMR projects. Only sanctioned projects where
            the user is PI or co-PI count.
        policy: ARPS tables.

    Returns:
        ARPS record with per-category raw, weighted, and capped scores,
        the total, and the grade.
    """
    start, end = evaluation_window(year, policy)
    approved = _eligible_claims(claims, user_id, start, end)

    publications: list[ArpsContribution] = []
    patents: list[ArpsContribution] = []
    for claim in approved:
        if claim.claim_type == ClaimType.PATENT:
            score = patent_item_score(claim, policy)
            bucket = patents
        else:
            score = publication_item_score(claim, user_id, policy)
            bucket = publications
        if score > 0:
            bucket.append(
                ArpsContribution(
                    item_id=claim.claim_id, title=claim.title, score=score
                )
            )

    emr: list[ArpsContribution] = []
    for project in _eligible_projects(projects or [], user_id, start, end, policy):
        score = emr_item_score(project, user_id, policy)
        if score > 0:
            emr.append(
                ArpsContribution(
                    item_id=project.project_id, title=project.title, score=score
                )
            )

    pub_category = _category(
        publications, policy.weights["publications"], policy.caps["publications"]
    )
    patent_category = _category(
        patents, policy.weights["patents"], policy.caps["patents"]
    )
    emr_category = _category(emr, policy.weights["emr"], policy.caps["emr"])
    total = pub_category.final + patent_category.final + emr_category.final
    grade = policy.grade_for(total)

    logger.info(
        "ARPS for %s (%d-%d): %.2f, grade %s",
        user_id,
        year,
        year + 1,
        total,
        grade,
    )
    return ArpsResult(
        user_id=user_id,
        year=year,
        window_start=start,
        window_end=end,
        publications=pub_category,
        patents=patent_category,
        emr=emr_category,
        total_arps=total,
        grade=grade,
    )
