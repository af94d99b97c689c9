"""Per-claim-type incentive calculators."""

from claimcalc.calculators.apc import calculate_apc_incentive
from claimcalc.calculators.book import calculate_book_incentive
from claimcalc.calculators.conference import calculate_conference_incentive
from claimcalc.calculators.membership import calculate_membership_incentive
from claimcalc.calculators.paper import calculate_research_paper_incentive
from claimcalc.calculators.patent import calculate_patent_incentive

__all__ = [
    "calculate_apc_incentive",
    "calculate_book_incentive",
    "calculate_conference_incentive",
    "calculate_membership_incentive",
    "calculate_patent_incentive",
    "calculate_research_paper_incentive",
]
