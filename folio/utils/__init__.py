"""
Shared utilities for FOLIO.

Common functionality used across contexts:
- Logger setup
- Timestamp and date handling
"""

from folio.utils.timestamp import now_exact, parse_post_date, today

__all__ = ["now_exact", "parse_post_date", "today"]
