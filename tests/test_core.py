"""Tests for the core engine, configuration, and claim models."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from claimcalc.config import load_config
from claimcalc.core import IncentiveEngine, paper_key, summarize_validation_error
from claimcalc.models import (
    ApcDetails,
    Author,
    ClaimType,
    ConferenceCalculationResult,
    ConferenceDetails,
    EmrProject,
    IncentiveClaim,
    MembershipDetails,
    PatentDetails,
)

EMAIL = "jane.doe@paruluniversity.ac.in"
CO_EMAIL = "raj.patel@paruluniversity.ac.in"


class TestConfig:
    """Tests for YAML configuration loading."""

    def test_defaults_without_file(self) -> None:
        """No path gives the built-in tables."""
        config = load_config(None)
        assert config.institution.name == "Parul University"
        assert config.incentives.quartile_amounts["Q1"] == 15000
        assert "Faculty of Medicine" in config.incentives.special_policy_faculties

    def test_load_overrides(self, tmp_config: Path) -> None:
        """Tables in the YAML file replace the defaults."""
        config = load_config(tmp_config)
        assert config.institution.name == "Test University"
        assert config.incentives.special_policy_faculties == [
            "Faculty of Test Sciences"
        ]
        assert config.incentives.quartile_amounts == {"Q1": 20000, "Q2": 10000}
        assert config.incentives.editorial_pool == 2500
        assert config.arps.default_grade == "B"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_table(self, tmp_path: Path) -> None:
        """Wrongly typed tables fail validation."""
        path = tmp_path / "bad.yaml"
        path.write_text("incentives:\n  editorial_pool: lots\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).incentives.ugc_care_amount == 1000


class TestClaimModel:
    """Tests for the IncentiveClaim envelope."""

    def test_camel_case_payload(self, sole_author_payload: dict) -> None:
        """Portal documents with camelCase keys are accepted."""
        claim = IncentiveClaim.model_validate(sole_author_payload)
        assert claim.claim_id == "claim-42"
        assert claim.user_email == EMAIL
        assert claim.paper.journal_classification == "Q1"
        assert claim.authors[0].is_internal

    def test_details_read_from_nested_section(self) -> None:
        """Type-specific keys are read from the nested section only."""
        claim = IncentiveClaim.model_validate(
            {
                "claimType": "Membership of Professional Bodies",
                "membershipAmountPaid": 8000,
                "membership": {"amountPaid": 6000},
            }
        )
        assert claim.details.amount_paid == 6000

        flat = IncentiveClaim.model_validate(
            {
                "claimType": "Membership of Professional Bodies",
                "membershipAmountPaid": 8000,
            }
        )
        assert flat.details.amount_paid is None

    def test_mismatched_details_rejected(self) -> None:
        """Details must match the claim type."""
        with pytest.raises(ValidationError, match="expects 'paper'"):
            IncentiveClaim(
                claim_type=ClaimType.RESEARCH_PAPER,
                conference=ConferenceDetails(),
            )

    def test_multiple_details_rejected(self) -> None:
        """Only one detail section may be set."""
        with pytest.raises(ValidationError, match="Only one"):
            IncentiveClaim(
                claim_type=ClaimType.APC,
                apc=ApcDetails(),
                membership=MembershipDetails(),
            )

    def test_missing_details_are_empty(self) -> None:
        """A claim without details reads as an empty attribute bag."""
        claim = IncentiveClaim(claim_type=ClaimType.PATENT)
        assert isinstance(claim.details, PatentDetails)
        assert claim.details.inventors == []
        assert claim.title is None

    def test_title(self) -> None:
        """The title comes from whichever detail section is set."""
        claim = IncentiveClaim(
            claim_type=ClaimType.CONFERENCE,
            conference=ConferenceDetails(conference_name="ICML 2024"),
        )
        assert claim.title == "ICML 2024"

    def test_emr_project_aliases(self) -> None:
        """EMR projects accept the portal's id and callTitle keys."""
        project = EmrProject.model_validate(
            {
                "id": "emr-9",
                "callTitle": "DST SERB Core Research Grant",
                "userId": "u-jane",
                "coPiUids": ["u-raj"],
                "status": "Sanctioned",
            }
        )
        assert project.project_id == "emr-9"
        assert project.title == "DST SERB Core Research Grant"
        assert project.co_pi_uids == ["u-raj"]


class TestEngineCalculate:
    """Tests for IncentiveEngine.calculate dispatch."""

    def test_research_paper(self, sole_author_paper: IncentiveClaim) -> None:
        """Research papers go to the paper calculator."""
        result = IncentiveEngine().calculate(sole_author_paper)
        assert result.success
        assert result.amount == 15000

    def test_designation_override(self, sole_author_paper: IncentiveClaim) -> None:
        """A designation argument is used instead of the claim's."""
        result = IncentiveEngine().calculate(
            sole_author_paper, designation="Ph.D Scholar"
        )
        assert result.amount == 6000

    def test_conference(self) -> None:
        """Conference results carry the cap and expenses."""
        claim = IncentiveClaim(
            claim_type=ClaimType.CONFERENCE,
            conference=ConferenceDetails(
                conference_mode="Online",
                online_presentation_order="First",
                registration_fee=4000,
            ),
        )
        result = IncentiveEngine().calculate(claim)
        assert isinstance(result, ConferenceCalculationResult)
        assert result.amount == 3000

    def test_apc_uses_claim_faculty(self) -> None:
        """Special-policy faculties lose the ESCI ceiling."""
        claim = IncentiveClaim(
            claim_type=ClaimType.APC,
            faculty="Faculty of Pharmacy",
            authors=[Author(email=EMAIL)],
            apc=ApcDetails(indexing_status=["ESCI"], total_amount=6000),
        )
        engine = IncentiveEngine()
        assert not engine.calculate(claim).success
        assert engine.calculate(claim, faculty="Faculty of Law").amount == 6000

    def test_membership_and_patent(self) -> None:
        """Membership and patent claims are dispatched too."""
        engine = IncentiveEngine()
        membership = IncentiveClaim(
            claim_type=ClaimType.MEMBERSHIP,
            membership=MembershipDetails(amount_paid=30000),
        )
        patent = IncentiveClaim(
            claim_type=ClaimType.PATENT,
            patent=PatentDetails(
                current_status="Granted",
                filed_in_pu_name=True,
                is_pu_sole_applicant=True,
                inventors=[Author(email=EMAIL)],
            ),
        )
        assert engine.calculate(membership).amount == 10000
        assert engine.calculate(patent).amount == 15000

    def test_configured_policy(
        self, tmp_config: Path, sole_author_paper: IncentiveClaim
    ) -> None:
        """The engine uses tables from its config file."""
        engine = IncentiveEngine(tmp_config)
        assert engine.calculate(sole_author_paper).amount == 20000
        assert engine.is_special_faculty("Faculty of Test Sciences")
        assert not engine.is_special_faculty("Faculty of Medicine")


class TestEngineCalculateRaw:
    """Tests for IncentiveEngine.calculate_raw."""

    def test_valid_payload(self, sole_author_payload: dict) -> None:
        """Plain dict payloads are validated then calculated."""
        result = IncentiveEngine().calculate_raw(sole_author_payload)
        assert result.success
        assert result.amount == 15000

    def test_malformed_payload(
        self, sole_author_payload: dict, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Malformed payloads produce a failed result, not an exception."""
        payload = dict(sole_author_payload, authors="nobody")
        with caplog.at_level(logging.WARNING, logger="claimcalc.core"):
            result = IncentiveEngine().calculate_raw(payload)
        assert not result.success
        assert result.error.startswith("Invalid claim: authors")
        assert "Rejected malformed claim" in caplog.text

    def test_unknown_claim_type(self) -> None:
        """Unknown claim types are rejected during validation."""
        result = IncentiveEngine().calculate_raw({"claimType": "Travel Grants"})
        assert not result.success
        assert "claimType" in result.error

    def test_summarize_validation_error(self) -> None:
        """Validation errors collapse to one line per field."""
        with pytest.raises(ValidationError) as excinfo:
            IncentiveClaim.model_validate({"claimType": "Books", "authors": 3})
        assert summarize_validation_error(excinfo.value).startswith("authors: ")


class TestEngineBatch:
    """Tests for batch assessment."""

    def test_claims_are_independent(
        self, make_author, make_paper_claim, sole_author_paper: IncentiveClaim
    ) -> None:
        """One failing claim does not affect the others."""
        orphan = make_paper_claim(
            [make_author("someone@paruluniversity.ac.in", "First Author")],
            claim_id="claim-2",
            journal_classification="Q1",
        )
        assessments = IncentiveEngine().assess_batch([sole_author_paper, orphan])
        assert [a.claim_id for a in assessments] == ["claim-1", "claim-2"]
        assert assessments[0].result.amount == 15000
        assert not assessments[1].result.success

    def test_malformed_payload_reported_by_index(
        self, sole_author_payload: dict, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A payload that fails validation is skipped and listed as an error."""
        bad = {"claimType": "Patents", "patent": {"filedInPuName": "maybe"}}
        with caplog.at_level(logging.WARNING, logger="claimcalc.core"):
            assessments, errors = IncentiveEngine().assess_payloads(
                [bad, sole_author_payload]
            )
        assert [a.claim_id for a in assessments] == ["claim-42"]
        assert assessments[0].result.amount == 15000
        assert errors[0]["index"] == 0
        assert errors[0]["error"].startswith("patent.filedInPuName: ")
        assert "Rejected malformed claim 0" in caplog.text

    def test_disbursement_flag(self, make_author, make_paper_claim) -> None:
        """Co-authors beyond the fifth position are computed but not paid."""
        authors = [
            make_author(f"o{i}@paruluniversity.ac.in", "First Author")
            for i in range(6)
        ]
        authors.append(make_author(EMAIL, "Co-Author"))
        claim = make_paper_claim(authors, journal_classification="Q1")
        assessment = IncentiveEngine().assess(claim)
        assert assessment.result.success
        assert assessment.result.amount == 4500
        assert not assessment.eligible_for_disbursement

    def test_conference_fields_survive_serialization(self) -> None:
        """Assessments keep conference-specific fields when dumped."""
        claim = IncentiveClaim(
            claim_type=ClaimType.CONFERENCE,
            conference=ConferenceDetails(registration_fee=1000),
        )
        dumped = IncentiveEngine().assess(claim).model_dump(by_alias=True)
        assert dumped["result"]["eligibleExpenses"] == 1000


class TestPoolAudit:
    """Tests for the paper pool audit."""

    def _paper(self, make_author, make_paper_claim, authors, email, **details):
        details.setdefault("journal_classification", "Q2")
        details.setdefault("doi", "https://doi.org/10.1234/Shared")
        return make_paper_claim(
            [make_author(a, r) for a, r in authors],
            user_email=email,
            claim_id=f"claim-{email.split('@')[0]}",
            **details,
        )

    def test_consistent_shares_fit_pool(self, make_author, make_paper_claim) -> None:
        """Shares from a consistent author list add up to the pool."""
        authors = [(EMAIL, "First Author"), (CO_EMAIL, "Co-Author")]
        claims = [
            self._paper(make_author, make_paper_claim, authors, EMAIL),
            self._paper(make_author, make_paper_claim, authors, CO_EMAIL),
        ]
        entries = IncentiveEngine().audit_paper_pools(claims)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.paper_key == "doi:10.1234/shared"
        assert entry.pool == 10000
        assert entry.claimed_total == 10000
        assert not entry.exceeds_pool

    def test_inconsistent_author_lists_exceed_pool(
        self, make_author, make_paper_claim, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Claimants each listing themselves as sole author are flagged."""
        claims = [
            self._paper(
                make_author, make_paper_claim, [(EMAIL, "First Author")], EMAIL
            ),
            self._paper(
                make_author, make_paper_claim, [(CO_EMAIL, "First Author")], CO_EMAIL
            ),
        ]
        with caplog.at_level(logging.WARNING, logger="claimcalc.core"):
            entries = IncentiveEngine().audit_paper_pools(claims)
        assert entries[0].claimed_total == 20000
        assert entries[0].exceeds_pool
        assert "exceeds pool" in caplog.text

    def test_resubmission_counted_once(self, make_author, make_paper_claim) -> None:
        """Several claims by the same claimant on one paper count once."""
        authors = [(EMAIL, "First Author")]
        claims = [
            self._paper(make_author, make_paper_claim, authors, EMAIL),
            self._paper(make_author, make_paper_claim, authors, EMAIL.upper()),
        ]
        entries = IncentiveEngine().audit_paper_pools(claims)
        assert entries[0].claimed_total == 10000
        assert len(entries[0].claim_ids) == 1

    def test_title_grouping_and_skips(self, make_author, make_paper_claim) -> None:
        """Papers without a DOI are grouped by normalized title."""
        first = self._paper(
            make_author,
            make_paper_claim,
            [(EMAIL, "First Author")],
            EMAIL,
            doi=None,
            paper_title="Soil Microbiome: Diversity",
        )
        second = self._paper(
            make_author,
            make_paper_claim,
            [(CO_EMAIL, "First Author")],
            CO_EMAIL,
            doi=None,
            paper_title="soil microbiome diversity",
        )
        anonymous = self._paper(
            make_author, make_paper_claim, [(EMAIL, "First Author")], EMAIL, doi=None
        )
        membership = IncentiveClaim(claim_type=ClaimType.MEMBERSHIP)
        assert paper_key(first) == "title:soil microbiome diversity"
        assert paper_key(second) == paper_key(first)
        assert paper_key(anonymous) is None

        entries = IncentiveEngine().audit_paper_pools(
            [first, second, anonymous, membership]
        )
        assert len(entries) == 1
        assert entries[0].claim_ids == [first.claim_id, second.claim_id]


class TestEngineArps:
    """Tests for ARPS and policy access through the engine."""

    def test_arps(self, approved_paper: IncentiveClaim) -> None:
        """The engine scores ARPS with its configured tables."""
        result = IncentiveEngine().arps("u-jane", 2024, [approved_paper])
        assert result.total_arps == pytest.approx(2.8)
        assert result.grade == "DME"

    def test_arps_configured_grades(
        self, tmp_config: Path, approved_paper: IncentiveClaim
    ) -> None:
        """Grade tables from the config file are used."""
        result = IncentiveEngine(tmp_config).arps("u-jane", 2024, [approved_paper])
        assert result.grade == "B"

    def test_policy_tables(self) -> None:
        """Policy tables are JSON-ready."""
        tables = IncentiveEngine().policy_tables()
        assert tables["incentives"]["quartile_amounts"]["Q1"] == 15000
        assert tables["arps"]["caps"] == {
            "publications": 50.0,
            "patents": 15.0,
            "emr": 15.0,
        }
