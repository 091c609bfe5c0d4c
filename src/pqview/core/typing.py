"""
Lightweight typing aliases used across pqview.

This module contains no runtime logic and is zero-IO.

Notes:
    - Record is the display row shape handed to viewer collaborators.
    - JsonDict is kept intentionally broad for payload boundaries.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "Record",
    "JsonDict",
]

# Column name -> display string ("" for null).
Record = dict[str, str]

JsonDict = dict[str, Any]
