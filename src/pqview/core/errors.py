"""
Core exception types raised by zero-IO helpers.

Provides typed exceptions for core-domain failures:
- PatternError for unusable display patterns passed to the date formatter.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - The cell normalizer catches PatternError and falls back to the raw value, so
      it never escapes a decode call. Decode-level failures live in pqview.io.errors.

Examples:
    >>> from pqview.core.datefmt import format_datetime
    >>> from datetime import datetime, UTC
    >>> try:
    ...     format_datetime(datetime(2023, 1, 1, tzinfo=UTC), None)  # type: ignore[arg-type]
    ... except PatternError as e:
    ...     msg = str(e)
    >>> "pattern" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "PatternError",
]


class PatternError(ValueError):
    """Display pattern is not a usable date pattern (e.g., not a string)."""
