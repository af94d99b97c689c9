"""Shared normalization utilities for claimcalc.

Used by the calculators, the ARPS aggregator, and the pool audit for
consistent matching of emails, labels, and amounts.
"""

import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal


def normalize_email(email: str | None) -> str:
    """Normalize an email address for case-insensitive comparison.

    Args:
        email: Raw email string.

    Returns:
        Lowercased, stripped email, or an empty string for None.
    """
    if email is None:
        return ""
    return email.strip().lower()


def normalize_label(label: str | None) -> str:
    """Lowercase a categorical label and collapse its whitespace."""
    if label is None:
        return ""
    return re.sub(r"\s+", " ", label).strip().lower()


def normalize_doi(doi: str | None) -> str | None:
    """Normalize a DOI to lowercase without URL prefix.

    Args:
        doi: Raw DOI string, possibly with URL prefix.

    Returns:
        Normalized DOI or None.
    """
    if doi is None:
        return None
    doi = doi.lower().strip()
    doi = re.sub(r"^https?://(dx\.)?doi\.org/", "", doi)
    return doi or None


def normalize_title(title: str) -> str:
    """Normalize a title for comparison and matching.

    Lowercases, strips accents, removes punctuation, and collapses
    whitespace.

    Args:
        title: Raw title string.

    Returns:
        Normalized title.
    """
    text = title.lower().strip()
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = re.sub(r"[^\w\s]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def round_amount(value: float) -> int:
    """Round a monetary amount half-up to a non-negative integer.

    Python's built-in ``round`` rounds halves to even, which would pay
    1250 for 1250.5. Incentives round halves up.

    Args:
        value: Unrounded amount.

    Returns:
        Rounded amount, never below zero.
    """
    rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, int(rounded))


def parse_position(position: str | int | None) -> int:
    """Parse an author position such as ``"3"`` or ``"10+"``.

    Returns:
        Leading integer of the position, or 0 when unparseable.
    """
    if position is None:
        return 0
    match = re.match(r"\s*(\d+)", str(position))
    return int(match.group(1)) if match else 0


def parse_sanctioned_amount(text: str | None) -> float | None:
    """Extract the sanctioned amount from an EMR duration/amount string.

    The portal stores text like ``"Duration: 3 years, Amount: 2,500,000"``.

    Args:
        text: Free-text duration and amount string.

    Returns:
        Amount in INR, or None if no amount is present.
    """
    if not text:
        return None
    match = re.search(r"Amount:\s*([\d,]+)", text, flags=re.IGNORECASE)
    if not match:
        return None
    return float(match.group(1).replace(",", ""))
