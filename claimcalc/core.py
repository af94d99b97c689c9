"""Core orchestration engine for claimcalc.

Ties together configuration, the per-type calculators, the disbursement
eligibility rules, and the ARPS aggregator. This is the single entry point
used by all consumer interfaces (CLI, HTTP API, library).
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from claimcalc.arps import calculate_arps
from claimcalc.authors import is_eligible_for_disbursement
from claimcalc.calculators import (
    calculate_apc_incentive,
    calculate_book_incentive,
    calculate_conference_incentive,
    calculate_membership_incentive,
    calculate_patent_incentive,
    calculate_research_paper_incentive,
)
from claimcalc.calculators.base import failure
from claimcalc.calculators.paper import paper_incentive_pool
from claimcalc.config import ClaimCalcConfig, load_config
from claimcalc.models import (
    ArpsResult,
    CalculationResult,
    ClaimAssessment,
    ClaimType,
    EmrProject,
    IncentiveClaim,
    PoolAuditEntry,
)
from claimcalc.normalize import (
    normalize_doi,
    normalize_email,
    normalize_title,
    round_amount,
)
from claimcalc.policy import ArpsPolicy, IncentivePolicy

logger = logging.getLogger(__name__)


def summarize_validation_error(exc: ValidationError) -> str:
    """Collapse a pydantic ValidationError into one readable line.

    Args:
        exc: Validation error raised while parsing a claim.

    Returns:
        Semicolon-separated ``field: message`` pairs.
    """
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "claim"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def paper_key(claim: IncentiveClaim) -> str | None:
    """Identify the paper behind a research-paper claim.

    Uses the DOI when present, otherwise the normalized paper title.

    Returns:
        Grouping key, or None if the paper cannot be identified.
    """
    details = claim.details
    doi = normalize_doi(details.doi)
    if doi:
        return f"doi:{doi}"
    if details.paper_title:
        return f"title:{normalize_title(details.paper_title)}"
    return None


class IncentiveEngine:
    """Main orchestrator for incentive and ARPS calculation.

    Used by the CLI, the HTTP API, and library consumers.
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        """Initialize the engine with an optional configuration file.

        Args:
            config_path: Path to a claimcalc YAML config file. None uses
                the built-in policy tables.
        """
        self.config: ClaimCalcConfig = load_config(config_path)

    @property
    def incentive_policy(self) -> IncentivePolicy:
        """Monetary incentive tables in effect."""
        return self.config.incentives

    @property
    def arps_policy(self) -> ArpsPolicy:
        """ARPS tables in effect."""
        return self.config.arps

    def is_special_faculty(self, faculty: str | None) -> bool:
        """Whether a faculty follows the quartile-only paper policy."""
        return self.incentive_policy.is_special_faculty(faculty)

    def calculate(
        self,
        claim: IncentiveClaim,
        faculty: str | None = None,
        designation: str | None = None,
    ) -> CalculationResult:
        """Calculate the incentive for a claim.

        Args:
            claim: Validated claim.
            faculty: Claimant's faculty. Defaults to the claim's.
            designation: Claimant's designation. Defaults to the claim's.

        Returns:
            Calculation result. Never raises.
        """
        policy = self.incentive_policy
        faculty = faculty if faculty is not None else claim.faculty
        designation = designation if designation is not None else claim.designation

        claim_type = claim.claim_type
        if claim_type == ClaimType.RESEARCH_PAPER:
            return calculate_research_paper_incentive(
                claim, faculty, designation, policy=policy
            )
        if claim_type == ClaimType.BOOK:
            return calculate_book_incentive(claim, policy=policy)
        if claim_type == ClaimType.APC:
            return calculate_apc_incentive(
                claim, self.is_special_faculty(faculty), policy=policy
            )
        if claim_type == ClaimType.CONFERENCE:
            return calculate_conference_incentive(claim, policy=policy)
        if claim_type == ClaimType.MEMBERSHIP:
            return calculate_membership_incentive(claim, policy=policy)
        if claim_type == ClaimType.PATENT:
            return calculate_patent_incentive(claim, policy=policy)
        return failure(f"Unsupported claim type: {claim_type}")

    def calculate_raw(
        self,
        payload: dict[str, Any],
        faculty: str | None = None,
        designation: str | None = None,
    ) -> CalculationResult:
        """Validate a plain claim dict and calculate its incentive.

        Malformed payloads come back as a failed result instead of raising.

        Args:
            payload: Claim document as written by the portal.
            faculty: Claimant's faculty override.
            designation: Claimant's designation override.

        Returns:
            Calculation result.
        """
        try:
            claim = IncentiveClaim.model_validate(payload)
        except ValidationError as exc:
            message = summarize_validation_error(exc)
            logger.warning("Rejected malformed claim: %s", message)
            return failure(f"Invalid claim: {message}")
        return self.calculate(claim, faculty, designation)

    def assess(self, claim: IncentiveClaim) -> ClaimAssessment:
        """Calculate a claim and check whether it may be disbursed."""
        return ClaimAssessment(
            claim_id=claim.claim_id,
            claim_type=claim.claim_type,
            result=self.calculate(claim),
            eligible_for_disbursement=is_eligible_for_disbursement(claim),
        )

    def assess_batch(self, claims: list[IncentiveClaim]) -> list[ClaimAssessment]:
        """Assess claims independently of one another.

        Args:
            claims: Claims to evaluate, e.g. from a bulk upload.

        Returns:
            One assessment per claim, in input order.
        """
        assessments = [self.assess(claim) for claim in claims]
        failed = sum(1 for a in assessments if not a.result.success)
        logger.info("Assessed %d claims (%d failed)", len(assessments), failed)
        return assessments

    def assess_payloads(
        self, payloads: list[Any]
    ) -> tuple[list[ClaimAssessment], list[dict[str, Any]]]:
        """Validate and assess plain claim dicts one at a time.

        A payload that fails validation is reported by its index and does
        not stop the rest of the batch.

        Args:
            payloads: Claim documents as written by the portal.

        Returns:
            Tuple of (assessments for the valid claims, error entries with
            ``index`` and ``error`` keys for the rejected ones).
        """
        claims: list[IncentiveClaim] = []
        errors: list[dict[str, Any]] = []
        for index, payload in enumerate(payloads):
            try:
                claims.append(IncentiveClaim.model_validate(payload))
            except ValidationError as exc:
                message = summarize_validation_error(exc)
                logger.warning("Rejected malformed claim %d: %s", index, message)
                errors.append({"index": index, "error": message})
        return self.assess_batch(claims), errors

    def audit_paper_pools(
        self, claims: list[IncentiveClaim]
    ) -> list[PoolAuditEntry]:
        """Compare co-authors' claimed shares against each paper's pool.

        Claims on the same paper are computed in isolation, so nothing at
        submission time stops the shares from adding up to more than the
        pool. This audit reports each paper's total without changing any
        claim.

        Args:
            claims: Claims to audit. Non-paper claims are ignored.

        Returns:
            One entry per identifiable paper.
        """
        groups: dict[str, dict[str, IncentiveClaim]] = {}
        for claim in claims:
            if claim.claim_type != ClaimType.RESEARCH_PAPER:
                continue
            key = paper_key(claim)
            if key is None:
                logger.debug("Skipping unidentifiable paper claim %s", claim.claim_id)
                continue
            claimant = normalize_email(claim.user_email) or claim.claim_id or ""
            groups.setdefault(key, {})[claimant] = claim

        entries = []
        for key, by_claimant in groups.items():
            group = list(by_claimant.values())
            pool = max(
                round_amount(
                    paper_incentive_pool(
                        claim,
                        claim.faculty,
                        claim.designation,
                        self.incentive_policy,
                    )
                )
                for claim in group
            )
            claimed = sum(
                result.amount or 0
                for result in (self.calculate(claim) for claim in group)
                if result.success
            )
            entry = PoolAuditEntry(
                paper_key=key,
                pool=pool,
                claimed_total=claimed,
                claim_ids=[claim.claim_id for claim in group],
                exceeds_pool=claimed > pool,
            )
            if entry.exceeds_pool:
                logger.warning(
                    "Paper %s: claimed %d exceeds pool %d", key, claimed, pool
                )
            entries.append(entry)
        return entries

    def arps(
        self,
        user_id: str,
        year: int,
        claims: list[IncentiveClaim],
        projects: list[EmrProject] | None = None,
    ) -> ArpsResult:
        """Compute the ARPS record for a user and evaluation year."""
        return calculate_arps(user_id, year, claims, projects, self.arps_policy)

    def policy_tables(self) -> dict[str, Any]:
        """Return the effective policy tables as JSON-ready data."""
        return self.config.model_dump(mode="json")
