"""Pydantic data models for claimcalc.

Defines the claim envelope, its type-specific attribute bags, calculation
results, EMR projects, and ARPS records. Field aliases are the camelCase
form of each field name and snake_case names are accepted too. Type-specific
attributes are read from a nested section (``paper``, ``book``, ``apc``,
``conference``, ``membership``, ``patent``) with unprefixed keys, so the
portal's flat prefixed fields (``apcQRating``, ``membershipAmountPaid``)
must be regrouped before validation.
"""

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ClaimType(StrEnum):
    """Incentive claim category."""

    RESEARCH_PAPER = "Research Papers"
    BOOK = "Books"
    APC = "Seed Money for APC"
    CONFERENCE = "Conference Presentations"
    MEMBERSHIP = "Membership of Professional Bodies"
    PATENT = "Patents"


class ClaimStatus(StrEnum):
    """Workflow status of a claim, as recorded by the portal."""

    DRAFT = "Draft"
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    SUBMITTED_TO_ACCOUNTS = "Submitted to Accounts"
    PAYMENT_COMPLETED = "Payment Completed"


APPROVED_STATUSES = frozenset(
    {
        ClaimStatus.ACCEPTED,
        ClaimStatus.SUBMITTED_TO_ACCOUNTS,
        ClaimStatus.PAYMENT_COMPLETED,
    }
)


class AuthorRole(StrEnum):
    """Author role labels used on paper, book, and APC claims."""

    FIRST = "First Author"
    CORRESPONDING = "Corresponding Author"
    FIRST_AND_CORRESPONDING = "First & Corresponding Author"
    CO_AUTHOR = "Co-Author"
    PRESENTING = "Presenting Author"
    FIRST_AND_PRESENTING = "First & Presenting Author"
    EDITOR = "Editor"


class JournalClassification(StrEnum):
    """Journal tier classification."""

    NATURE_SCIENCE_LANCET = "Nature/Science/Lancet"
    TOP_1_PERCENT = "Top 1% Journals"
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"


class PublicationType(StrEnum):
    """Research paper publication subtype."""

    RESEARCH_ARTICLE = "Research Articles/Short Communications"
    CASE_REPORT = "Case Reports/Short Surveys"
    REVIEW_ARTICLE = "Review Articles"
    LETTER_TO_EDITOR = "Letter to the Editor/Editorial"
    CONFERENCE_PROCEEDINGS = "Scopus Indexed Conference Proceedings"
    UGC_CARE_GROUP_I = (
        "UGC listed journals (Journals found qualified through "
        "UGC-CARE Protocol, Group-I)"
    )


class ConferenceMode(StrEnum):
    """Whether a conference was attended online or in person."""

    ONLINE = "Online"
    OFFLINE = "Offline"


class ConferenceType(StrEnum):
    """Conference scope."""

    INTERNATIONAL = "International"
    NATIONAL = "National"
    REGIONAL = "Regional/State"


class PresentationOrder(StrEnum):
    """Sequence of an online presentation within the academic year."""

    FIRST = "First"
    SECOND = "Second"
    THIRD = "Third"
    ADDITIONAL = "Additional"


class PatentStatus(StrEnum):
    """Patent lifecycle stage."""

    FILED = "Filed"
    PUBLISHED = "Published"
    GRANTED = "Granted"


class PortalModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Author(PortalModel):
    """An author or inventor listed on a claim."""

    uid: str | None = None
    email: str = ""
    name: str = ""
    role: str | None = None
    is_external: bool = False
    status: str | None = None

    @property
    def is_internal(self) -> bool:
        """Whether the author is affiliated with the institution."""
        return not self.is_external


class ResearchPaperDetails(PortalModel):
    """Attributes of a journal paper or proceedings claim."""

    paper_title: str | None = None
    doi: str | None = None
    journal_name: str | None = None
    publication_type: str | None = None
    journal_classification: str | None = None
    wos_type: str | None = None
    index_type: str | None = None
    was_apc_paid_by_university: bool = False
    is_pu_name_in_publication: bool | None = None


class BookDetails(PortalModel):
    """Attributes of a book or book-chapter claim."""

    application_type: str | None = None
    publication_title: str | None = None
    is_scopus_indexed: bool = False
    publisher_type: str | None = None
    chapter_pages: int | None = None
    total_pages: int | None = None
    chapters_in_same_book: int | None = None
    author_role: str | None = None
    total_pu_authors: int | None = None

    @property
    def is_chapter(self) -> bool:
        """Whether the claim is for a chapter rather than a full book."""
        return self.application_type == "Book Chapter"


class ApcDetails(PortalModel):
    """Attributes of an article-processing-charge reimbursement claim."""

    paper_title: str | None = None
    indexing_status: list[str] = Field(default_factory=list)
    q_rating: str | None = None
    total_amount: float | None = None
    amount_claimed: float | None = None


class ConferenceDetails(PortalModel):
    """Attributes of a conference presentation claim."""

    conference_name: str | None = None
    organizer_name: str | None = None
    conference_mode: str | None = None
    conference_type: str | None = None
    conference_venue: str | None = None
    presentation_type: str | None = None
    online_presentation_order: str | None = None
    registration_fee: float | None = None
    travel_fare: float | None = None
    publication_type: str | None = None


class MembershipDetails(PortalModel):
    """Attributes of a professional body membership claim."""

    professional_body_name: str | None = None
    amount_paid: float | None = None


class PatentDetails(PortalModel):
    """Attributes of a patent claim."""

    patent_title: str | None = None
    current_status: str | None = None
    filed_in_pu_name: bool = False
    is_pu_sole_applicant: bool = False
    patent_locale: str | None = None
    inventors: list[Author] = Field(default_factory=list)


_DETAIL_FIELDS: dict[ClaimType, tuple[str, type[PortalModel]]] = {
    ClaimType.RESEARCH_PAPER: ("paper", ResearchPaperDetails),
    ClaimType.BOOK: ("book", BookDetails),
    ClaimType.APC: ("apc", ApcDetails),
    ClaimType.CONFERENCE: ("conference", ConferenceDetails),
    ClaimType.MEMBERSHIP: ("membership", MembershipDetails),
    ClaimType.PATENT: ("patent", PatentDetails),
}


class IncentiveClaim(PortalModel):
    """A submitted incentive claim.

    Exactly one type-specific attribute bag may be populated, and it must
    match ``claim_type``. A claim with no bag behaves as if every field
    were absent.
    """

    claim_id: str | None = None
    uid: str | None = None
    user_name: str | None = None
    user_email: str | None = None
    faculty: str | None = None
    designation: str | None = None
    status: str = ClaimStatus.PENDING
    submission_date: datetime | None = None
    approval_date: datetime | None = None
    claim_type: ClaimType
    authors: list[Author] = Field(default_factory=list)
    author_type: str | None = None
    author_position: str | None = None
    calculated_incentive: int | None = None

    paper: ResearchPaperDetails | None = None
    book: BookDetails | None = None
    apc: ApcDetails | None = None
    conference: ConferenceDetails | None = None
    membership: MembershipDetails | None = None
    patent: PatentDetails | None = None

    @model_validator(mode="after")
    def _check_single_variant(self) -> "IncentiveClaim":
        populated = [
            name
            for name, _ in _DETAIL_FIELDS.values()
            if getattr(self, name) is not None
        ]
        expected, _ = _DETAIL_FIELDS[self.claim_type]
        if len(populated) > 1:
            raise ValueError(
                f"Only one claim detail section may be set, got {populated}"
            )
        if populated and populated[0] != expected:
            raise ValueError(
                f"Claim type '{self.claim_type}' expects '{expected}' "
                f"details, got '{populated[0]}'"
            )
        return self

    @property
    def details(self) -> Any:
        """Return the type-specific attribute bag, empty if unset."""
        name, model = _DETAIL_FIELDS[self.claim_type]
        value = getattr(self, name)
        return value if value is not None else model()

    @property
    def title(self) -> str | None:
        """Best-effort human-readable title of the claimed output."""
        details = self.details
        for attr in (
            "paper_title",
            "publication_title",
            "conference_name",
            "patent_title",
            "professional_body_name",
        ):
            value = getattr(details, attr, None)
            if value:
                return value
        return None


class CalculationResult(PortalModel):
    """Outcome of a single incentive calculation."""

    success: bool
    amount: int | None = None
    error: str | None = None


class ConferenceCalculationResult(CalculationResult):
    """Conference outcome with the cap and expense subtotal used."""

    eligible_expenses: float | None = None
    max_reimbursement: float | None = None


class ClaimAssessment(PortalModel):
    """A calculation result paired with its disbursement eligibility."""

    claim_id: str | None = None
    claim_type: ClaimType
    result: ConferenceCalculationResult | CalculationResult
    eligible_for_disbursement: bool = True


class PoolAuditEntry(PortalModel):
    """Sum of co-author shares claimed against one paper's pool."""

    paper_key: str
    pool: int
    claimed_total: int
    claim_ids: list[str | None] = Field(default_factory=list)
    exceeds_pool: bool = False


class EmrProject(PortalModel):
    """An extramural research project interest record."""

    project_id: str = Field(alias="id")
    title: str | None = Field(default=None, alias="callTitle")
    user_id: str
    co_pi_uids: list[str] = Field(default_factory=list)
    status: str
    sanction_date: datetime | None = None
    sanctioned_amount: float | None = None
    duration_amount: str | None = None


class ArpsContribution(PortalModel):
    """One item's contribution to an ARPS category."""

    item_id: str | None = None
    title: str | None = None
    score: float


class ArpsCategory(PortalModel):
    """Raw, weighted, and capped score for one ARPS category."""

    raw: float = 0.0
    weighted: float = 0.0
    final: float = 0.0
    contributions: list[ArpsContribution] = Field(default_factory=list)


class ArpsResult(PortalModel):
    """Annual Research Performance Score for one user and year."""

    user_id: str
    year: int
    window_start: date
    window_end: date
    publications: ArpsCategory
    patents: ArpsCategory
    emr: ArpsCategory
    total_arps: float
    grade: str
