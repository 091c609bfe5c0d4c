"""
Record export helpers (CSV / JSON) for the viewer host.

Notes
- CSV is produced with polars: the header comes from the first record's keys,
  values containing a comma, a quote, or a newline are quoted (quotes doubled),
  rows end with "\\n" and there is no trailing newline.
- Missing keys and None values export as empty fields.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import polars as pl

from pqview.core.normalize import plain_string

__all__ = [
    "records_to_frame",
    "records_to_csv",
    "records_to_json",
]


def records_to_frame(records: Sequence[dict[str, Any]]) -> pl.DataFrame:
    """
    Build an all-string DataFrame from records.

    Args:
        records (Sequence[dict[str, Any]]): Rows; the first row's keys define columns.

    Returns:
        pl.DataFrame: One Utf8 column per header key; empty values are null.
    """
    if not records:
        return pl.DataFrame()
    headers = list(records[0].keys())
    columns: dict[str, list[str | None]] = {h: [] for h in headers}
    for row in records:
        for h in headers:
            text = plain_string(row.get(h))
            columns[h].append(text or None)
    return pl.DataFrame(columns, schema={h: pl.String for h in headers})


def records_to_csv(records: Sequence[dict[str, Any]]) -> str:
    """
    Serialize records as CSV.

    Returns:
        str: CSV text; "" for no records.

    Examples:
        >>> records_to_csv([{"a": "1", "b": "x,y"}])
        'a,b\\n1,"x,y"'
    """
    if not records:
        return ""
    out = records_to_frame(records).write_csv(quote_style="necessary", null_value="")
    return out[:-1] if out.endswith("\n") else out


def records_to_json(records: Sequence[dict[str, Any]]) -> str:
    """Serialize records as a 2-space indented JSON array (non-ASCII preserved)."""
    return json.dumps(list(records), indent=2, ensure_ascii=False, default=plain_string)
