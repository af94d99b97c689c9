"""Author role classification shared by every calculator.

Each splitting step (main/co-author shares, presenting-author pools, ARPS
role multipliers) consumes the same classification rather than comparing
role strings ad hoc.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from claimcalc.models import Author, AuthorRole, ClaimType, IncentiveClaim
from claimcalc.normalize import normalize_email, parse_position


class AuthorClass(StrEnum):
    """Role family an author belongs to for share calculations."""

    MAIN = "main"
    CO_AUTHOR = "co_author"
    PRESENTING = "presenting"
    FIRST_PRESENTING = "first_presenting"
    EDITOR = "editor"
    OTHER = "other"

    @property
    def is_presenting(self) -> bool:
        """Whether the author presented the work."""
        return self in (AuthorClass.PRESENTING, AuthorClass.FIRST_PRESENTING)

    @property
    def is_lead(self) -> bool:
        """Whether the author led the work (first or corresponding)."""
        return self in (AuthorClass.MAIN, AuthorClass.FIRST_PRESENTING)


_ROLE_CLASSES: dict[str, AuthorClass] = {
    AuthorRole.FIRST: AuthorClass.MAIN,
    AuthorRole.CORRESPONDING: AuthorClass.MAIN,
    AuthorRole.FIRST_AND_CORRESPONDING: AuthorClass.MAIN,
    AuthorRole.CO_AUTHOR: AuthorClass.CO_AUTHOR,
    AuthorRole.PRESENTING: AuthorClass.PRESENTING,
    AuthorRole.FIRST_AND_PRESENTING: AuthorClass.FIRST_PRESENTING,
    AuthorRole.EDITOR: AuthorClass.EDITOR,
}


def classify_role(role: str | None) -> AuthorClass:
    """Map a role label onto its author class.

    Args:
        role: Role label as entered on the claim form.

    Returns:
        The matching AuthorClass, or OTHER for unknown or missing roles.
    """
    if role is None:
        return AuthorClass.OTHER
    return _ROLE_CLASSES.get(role.strip(), AuthorClass.OTHER)


def find_claimant(authors: list[Author], email: str | None) -> Author | None:
    """Find the claimant in an author list by case-insensitive email.

    Args:
        authors: Authors listed on the claim.
        email: The claimant's email address.

    Returns:
        The matching author, or None.
    """
    target = normalize_email(email)
    if not target:
        return None
    for author in authors:
        if normalize_email(author.email) == target:
            return author
    return None


def find_author_for_user(claim: IncentiveClaim, user_id: str) -> Author | None:
    """Find a user's author entry by uid, falling back to the claim email."""
    for author in claim.authors:
        if author.uid and author.uid == user_id:
            return author
    if claim.uid == user_id:
        return find_claimant(claim.authors, claim.user_email)
    return None


@dataclass(frozen=True)
class AuthorPartition:
    """Internal authors of a claim, grouped by author class."""

    internal: list[Author] = field(default_factory=list)
    main: list[Author] = field(default_factory=list)
    co_authors: list[Author] = field(default_factory=list)
    presenting: list[Author] = field(default_factory=list)

    @classmethod
    def from_authors(cls, authors: list[Author]) -> AuthorPartition:
        """Partition the internal authors of a list by role."""
        internal = [a for a in authors if a.is_internal]
        classes = [(a, classify_role(a.role)) for a in internal]
        return cls(
            internal=internal,
            main=[a for a, c in classes if c is AuthorClass.MAIN],
            co_authors=[a for a, c in classes if c is AuthorClass.CO_AUTHOR],
            presenting=[a for a, c in classes if c.is_presenting],
        )

    def contains(self, group: list[Author], author: Author) -> bool:
        """Whether an author is a member of one of this partition's groups."""
        return any(a is author for a in group)


def claimant_position(claim: IncentiveClaim) -> int:
    """Return the claimant's 1-based author position.

    An explicit ``author_position`` wins. Otherwise the claimant is located
    in the author list by email, then by uid.

    Returns:
        Position, or 0 if it cannot be determined.
    """
    explicit = parse_position(claim.author_position)
    if explicit > 0:
        return explicit

    target = normalize_email(claim.user_email)
    if target:
        for index, author in enumerate(claim.authors, start=1):
            if normalize_email(author.email) == target:
                return index
    if claim.uid:
        for index, author in enumerate(claim.authors, start=1):
            if author.uid and author.uid == claim.uid:
                return index
    return 0


def claimant_class(claim: IncentiveClaim) -> AuthorClass:
    """Classify the claimant of a claim.

    The claim's own ``author_type`` wins. Otherwise the claimant's role is
    read from the author list, matched by email and then by uid.
    """
    if claim.author_type:
        return classify_role(claim.author_type)
    claimant = find_claimant(claim.authors, claim.user_email)
    if claimant is None and claim.uid:
        claimant = next(
            (a for a in claim.authors if a.uid and a.uid == claim.uid), None
        )
    return classify_role(claimant.role if claimant else None)


def is_co_author_beyond_fifth(claim: IncentiveClaim, limit: int = 5) -> bool:
    """Whether a research-paper claimant is a co-author past position five."""
    if claim.claim_type != ClaimType.RESEARCH_PAPER:
        return False
    if claimant_class(claim) is not AuthorClass.CO_AUTHOR:
        return False
    return claimant_position(claim) > limit


def is_eligible_for_disbursement(claim: IncentiveClaim) -> bool:
    """Whether a computed incentive may be paid out to the claimant.

    Co-authors listed beyond the fifth position on a research paper have
    their incentive computed for the record but are not paid.
    """
    return not is_co_author_beyond_fifth(claim)
