"""Canonical comparable form of an address string."""

import re
from typing import Optional

# Anything that is not a letter or digit (underscore counts as punctuation)
_NON_ALNUM_RE = re.compile(r"[\W_]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_address(address: Optional[str]) -> str:
    """Normalize an address for comparison.

    Normalization steps:
    - Convert to lowercase
    - Replace every character that is not a letter, digit or whitespace with a space
    - Collapse runs of whitespace to a single space
    - Strip leading/trailing whitespace

    Total and idempotent: normalize_address(normalize_address(s)) == normalize_address(s).

    Args:
        address: Address text (None is treated as empty)

    Returns:
        Normalized text

    Example:
        >>> normalize_address("1600 Amphitheatre Pkwy., Mountain View!!")
        '1600 amphitheatre pkwy mountain view'
    """
    if not address:
        return ""

    normalized = address.lower()
    normalized = _NON_ALNUM_RE.sub(" ", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)

    return normalized.strip()


def addresses_match(first: Optional[str], second: Optional[str]) -> bool:
    """Return True when two addresses are equal after normalization."""
    return normalize_address(first) == normalize_address(second)


def build_full_address(delivery_line_1: str, delivery_line_2: Optional[str], last_line: str) -> str:
    """Compose a single-line address from provider delivery lines.

    Example:
        >>> build_full_address("1600 Amphitheatre Pkwy", None, "Mountain View CA 94043-1351")
        '1600 Amphitheatre Pkwy, Mountain View CA 94043-1351'
    """
    street_part = delivery_line_1.strip()
    if delivery_line_2 and delivery_line_2.strip():
        street_part = f"{street_part} {delivery_line_2.strip()}"

    last_line = last_line.strip() if last_line else ""
    if not last_line:
        return street_part
    return f"{street_part}, {last_line}"
