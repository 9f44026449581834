"""Address normalization for equality comparison.

Normalized strings are never shown to callers; they only decide whether a
standardized address differs materially from what the caller typed.
"""

from .normalizer import addresses_match, build_full_address, normalize_address

__all__ = [
    "normalize_address",
    "addresses_match",
    "build_full_address",
]
