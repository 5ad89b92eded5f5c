"""Utility functions for time handling."""

from .timestamps import (
    current_year,
    ensure_utc,
    format_for_display,
    format_timestamp,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "utc_now",
    "current_year",
    "ensure_utc",
    "format_timestamp",
    "parse_timestamp",
    "format_for_display",
]
