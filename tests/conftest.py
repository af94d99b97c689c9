"""Shared pytest fixtures for claimcalc tests."""

from datetime import datetime
from pathlib import Path

import pytest

from claimcalc.models import (
    Author,
    ClaimStatus,
    ClaimType,
    IncentiveClaim,
    ResearchPaperDetails,
)

CLAIMANT_EMAIL = "jane.doe@paruluniversity.ac.in"
GENERAL_FACULTY = "Faculty of Management Studies"
SPECIAL_FACULTY = "Faculty of Medicine"


def _make_author(
    email: str,
    role: str | None,
    is_external: bool = False,
    uid: str | None = None,
    name: str = "",
) -> Author:
    """Build an author entry for a claim."""
    return Author(
        uid=uid, email=email, name=name, role=role, is_external=is_external
    )


def _make_paper_claim(
    authors: list[Author],
    *,
    user_email: str = CLAIMANT_EMAIL,
    faculty: str | None = GENERAL_FACULTY,
    designation: str | None = None,
    claim_id: str | None = "claim-1",
    **details,
) -> IncentiveClaim:
    """Build a research paper claim with the given paper attributes."""
    details.setdefault("publication_type", "Research Articles/Short Communications")
    return IncentiveClaim(
        claim_id=claim_id,
        uid="u-jane",
        user_name="Jane Doe",
        user_email=user_email,
        faculty=faculty,
        designation=designation,
        claim_type=ClaimType.RESEARCH_PAPER,
        authors=authors,
        paper=ResearchPaperDetails(**details),
    )


@pytest.fixture
def make_author():
    """Factory for author entries."""
    return _make_author


@pytest.fixture
def make_paper_claim():
    """Factory for research paper claims."""
    return _make_paper_claim


@pytest.fixture
def sole_author_paper() -> IncentiveClaim:
    """A Q1 research article with the claimant as the only author."""
    return _make_paper_claim(
        [_make_author(CLAIMANT_EMAIL, "First & Corresponding Author", uid="u-jane")],
        journal_classification="Q1",
        paper_title="Deep Learning for Crop Yield Prediction",
        doi="10.1234/crops.2024",
    )


@pytest.fixture
def approved_paper() -> IncentiveClaim:
    """An accepted Q1 research article inside the 2024-25 ARPS window."""
    claim = _make_paper_claim(
        [
            _make_author(CLAIMANT_EMAIL, "First Author", uid="u-jane"),
            _make_author("ext@example.org", "Co-Author", is_external=True),
        ],
        journal_classification="Q1",
        paper_title="Soil Microbiome Diversity",
    )
    return claim.model_copy(
        update={
            "status": ClaimStatus.ACCEPTED,
            "submission_date": datetime(2024, 9, 1, 10, 0),
            "approval_date": datetime(2024, 10, 15, 9, 30),
        }
    )


@pytest.fixture
def sole_author_payload() -> dict:
    """A camelCase claim document as written by the portal."""
    return {
        "id": "ignored",
        "claimId": "claim-42",
        "uid": "u-jane",
        "userEmail": CLAIMANT_EMAIL,
        "faculty": GENERAL_FACULTY,
        "claimType": "Research Papers",
        "authors": [
            {
                "uid": "u-jane",
                "email": CLAIMANT_EMAIL,
                "name": "Jane Doe",
                "role": "First Author",
                "isExternal": False,
            }
        ],
        "paper": {
            "paperTitle": "Deep Learning for Crop Yield Prediction",
            "publicationType": "Research Articles/Short Communications",
            "journalClassification": "Q1",
        },
    }


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Create a temporary claimcalc.yaml config file."""
    config_content = """
institution:
  name: "Test University"

incentives:
  special_policy_faculties:
    - "Faculty of Test Sciences"
  quartile_amounts:
    Q1: 20000
    Q2: 10000

arps:
  grade_thresholds:
    - grade: "A"
      min_score: 10
  default_grade: "B"
"""
    config_path = tmp_path / "claimcalc.yaml"
    config_path.write_text(config_content)
    return config_path
