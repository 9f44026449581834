"""Utility functions for time handling."""

from .timestamps import elapsed_ms, ensure_utc, format_timestamp, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "elapsed_ms",
]
