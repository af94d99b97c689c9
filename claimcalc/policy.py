"""University incentive and ARPS policy tables.

The rule matrix lives here as data, separate from the calculators that
branch on it. Every table is a field default on a pydantic model so a
deployment can override any of them from the YAML config without touching
control flow.
"""

from pydantic import BaseModel, Field

from claimcalc.models import (
    JournalClassification,
    PatentStatus,
    PresentationOrder,
    PublicationType,
)


class PageTier(BaseModel):
    """Minimum page count (inclusive) and the amount it earns."""

    min_pages: int
    amount: int


class PercentCap(BaseModel):
    """A share of the registration fee bounded by an absolute ceiling."""

    fraction: float
    ceiling: float


class GradeThreshold(BaseModel):
    """Lowest total ARPS score that earns a grade."""

    grade: str
    min_score: float


class EmrBand(BaseModel):
    """Sanctioned-amount band (INR) with PI and co-PI points.

    The band covers ``min_amount <= amount <= max_amount``. A missing
    ``max_amount`` leaves the band open-ended. ``min_exclusive`` turns the
    lower bound into ``amount > min_amount``.
    """

    min_amount: float
    max_amount: float | None = None
    min_exclusive: bool = False
    pi_points: float
    co_pi_points: float

    def contains(self, amount: float) -> bool:
        """Return True if the amount falls inside this band."""
        if self.min_exclusive:
            if amount <= self.min_amount:
                return False
        elif amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount


def _quartile_amounts() -> dict[str, int]:
    return {
        JournalClassification.NATURE_SCIENCE_LANCET: 50000,
        JournalClassification.TOP_1_PERCENT: 25000,
        JournalClassification.Q1: 15000,
        JournalClassification.Q2: 10000,
        JournalClassification.Q3: 6000,
        JournalClassification.Q4: 4000,
    }


def _online_caps() -> dict[str, PercentCap]:
    return {
        PresentationOrder.FIRST: PercentCap(fraction=0.75, ceiling=15000),
        PresentationOrder.SECOND: PercentCap(fraction=0.60, ceiling=10000),
        PresentationOrder.THIRD: PercentCap(fraction=0.50, ceiling=7000),
        PresentationOrder.ADDITIONAL: PercentCap(fraction=0.30, ceiling=2000),
    }


def _international_venue_caps() -> dict[str, float]:
    return {
        "Indian Subcontinent": 30000,
        "South Korea, Japan, Australia and Middle East": 45000,
        "Europe": 60000,
        "African/South American/North American": 75000,
        "Other": 75000,
    }


class IncentivePolicy(BaseModel):
    """Monetary incentive tables (INR)."""

    special_policy_faculties: list[str] = Field(
        default_factory=lambda: [
            "Faculty of Applied Sciences",
            "Faculty of Medicine",
            "Faculty of Homoeopathy",
            "Faculty of Ayurved",
            "Faculty of Nursing",
            "Faculty of Pharmacy",
            "Faculty of Physiotherapy",
            "Faculty of Public Health",
            "Faculty of Engineering & Technology",
        ]
    )

    # Research papers
    quartile_amounts: dict[str, int] = Field(default_factory=_quartile_amounts)
    phd_scholar_designation: str = "Ph.D Scholar"
    phd_scholar_amounts: dict[str, int] = Field(
        default_factory=lambda: {"Q1": 6000, "Q2": 4000}
    )
    conference_proceedings_amount: int = 3000
    wos_fallback_types: list[str] = Field(
        default_factory=lambda: ["SCIE", "SSCI", "A&HCI"]
    )
    wos_fallback_amount: int = 3000
    ugc_care_amount: int = 1000
    publication_type_factors: dict[str, float] = Field(
        default_factory=lambda: {
            PublicationType.CASE_REPORT: 0.9,
            PublicationType.REVIEW_ARTICLE: 0.8,
        }
    )
    review_discount_quartiles: list[str] = Field(
        default_factory=lambda: ["Q3", "Q4"]
    )
    editorial_pool: int = 2500
    main_author_share: float = 0.7
    co_author_share: float = 0.3
    co_author_only_share: float = 0.8

    # Books and chapters
    chapter_scopus_amount: int = 6000
    chapter_tiers: dict[str, list[PageTier]] = Field(
        default_factory=lambda: {
            "National": [
                PageTier(min_pages=21, amount=2500),
                PageTier(min_pages=10, amount=1500),
                PageTier(min_pages=5, amount=500),
            ],
            "International": [
                PageTier(min_pages=21, amount=3000),
                PageTier(min_pages=10, amount=2000),
                PageTier(min_pages=5, amount=1000),
            ],
        }
    )
    book_scopus_amount: int = 18000
    book_tiers: dict[str, list[PageTier]] = Field(
        default_factory=lambda: {
            "National": [
                PageTier(min_pages=351, amount=3000),
                PageTier(min_pages=200, amount=2500),
                PageTier(min_pages=100, amount=2000),
                PageTier(min_pages=0, amount=1000),
            ],
            "International": [
                PageTier(min_pages=351, amount=6000),
                PageTier(min_pages=200, amount=3500),
                PageTier(min_pages=0, amount=2000),
            ],
        }
    )
    full_book_reference_pages: int = 999

    # Article processing charges
    apc_quartile_ceilings: dict[str, int] = Field(
        default_factory=lambda: {
            "Q1": 40000,
            "Q2": 30000,
            "Q3": 20000,
            "Q4": 15000,
        }
    )
    apc_esci_ceiling: int = 8000
    apc_ugc_care_ceiling: int = 5000

    # Conferences
    home_organizer_marker: str = "parul university"
    home_conference_marker: str = "picet"
    home_fee_fraction: float = 0.75
    online_caps: dict[str, PercentCap] = Field(default_factory=_online_caps)
    online_default_order: str = PresentationOrder.ADDITIONAL
    international_venue_caps: dict[str, float] = Field(
        default_factory=_international_venue_caps
    )
    india_venue_caps: dict[str, float] = Field(
        default_factory=lambda: {"Oral": 20000, "default": 15000}
    )
    national_caps: dict[str, float] = Field(
        default_factory=lambda: {"Oral": 12000, "default": 10000}
    )
    regional_cap: float = 7500

    # Memberships
    membership_share: float = 0.5
    membership_cap: float = 10000

    # Patents
    patent_amounts: dict[str, int] = Field(
        default_factory=lambda: {
            PatentStatus.PUBLISHED: 3000,
            PatentStatus.GRANTED: 15000,
        }
    )
    patent_sole_multiplier: float = 1.0
    patent_joint_multiplier: float = 0.8

    def is_special_faculty(self, faculty: str | None) -> bool:
        """Return True if the faculty follows the quartile-only table."""
        return faculty is not None and faculty in self.special_policy_faculties


class ArpsPolicy(BaseModel):
    """Point tables, weights, caps, and grades for ARPS."""

    journal_points: dict[str, float] = Field(
        default_factory=lambda: {
            PublicationType.RESEARCH_ARTICLE: 8,
            "Original Research Article": 8,
            "Short Communication": 6,
            PublicationType.CASE_REPORT: 7,
            "Case Report / Case Study": 7,
        }
    )
    review_types: list[str] = Field(
        default_factory=lambda: [PublicationType.REVIEW_ARTICLE, "Review Article"]
    )
    review_points_top: float = 8
    review_points_other: float = 6
    review_top_quartiles: list[str] = Field(
        default_factory=lambda: ["Q1", "Q2"]
    )
    quartile_multipliers: dict[str, float] = Field(
        default_factory=lambda: {"Q1": 1.0, "Q2": 0.7, "Q3": 0.4, "Q4": 0.3}
    )

    lead_author_multiplier: float = 0.7
    co_author_multiplier: float = 0.3
    distant_co_author_multiplier: float = 0.1
    co_author_position_limit: int = 5

    scopus_book_points: float = 10
    scopus_chapter_points: float = 5
    proceedings_points: float = 2

    patent_points: dict[str, float] = Field(
        default_factory=lambda: {PatentStatus.PUBLISHED: 10}
    )
    granted_patent_points: dict[str, float] = Field(
        default_factory=lambda: {"International": 75, "default": 50}
    )
    patent_sole_multiplier: float = 1.0
    patent_joint_multiplier: float = 0.8

    emr_bands: list[EmrBand] = Field(
        default_factory=lambda: [
            EmrBand(
                min_amount=2_000_000,
                max_amount=5_000_000,
                pi_points=50,
                co_pi_points=15,
            ),
            EmrBand(
                min_amount=5_000_000,
                max_amount=10_000_000,
                min_exclusive=True,
                pi_points=70,
                co_pi_points=20,
            ),
            EmrBand(
                min_amount=10_000_000,
                min_exclusive=True,
                pi_points=100,
                co_pi_points=25,
            ),
        ]
    )
    sanctioned_statuses: list[str] = Field(
        default_factory=lambda: ["sanctioned"]
    )

    weights: dict[str, float] = Field(
        default_factory=lambda: {
            "publications": 0.50,
            "patents": 0.15,
            "emr": 0.15,
        }
    )
    caps: dict[str, float] = Field(
        default_factory=lambda: {
            "publications": 50,
            "patents": 15,
            "emr": 15,
        }
    )
    grade_thresholds: list[GradeThreshold] = Field(
        default_factory=lambda: [
            GradeThreshold(grade="SEE", min_score=80),
            GradeThreshold(grade="EE", min_score=50),
            GradeThreshold(grade="ME", min_score=30),
        ]
    )
    default_grade: str = "DME"
    window_start_month: int = 6
    window_start_day: int = 1

    def grade_for(self, total: float) -> str:
        """Map a total ARPS score onto the grade threshold table."""
        for threshold in sorted(
            self.grade_thresholds, key=lambda t: t.min_score, reverse=True
        ):
            if total >= threshold.min_score:
                return threshold.grade
        return self.default_grade


DEFAULT_INCENTIVE_POLICY = IncentivePolicy()
DEFAULT_ARPS_POLICY = ArpsPolicy()
