"""
Shared UI helper utilities for the Parquet viewer Streamlit application.

This module centralizes the record-grid operations (global and per-column filters,
sort, pagination) and small formatting helpers used by the viewer. Keeping them
here, free of Streamlit state, makes them easy to test.

Notes:
    - Records are display strings, so grids are all-String polars DataFrames.
    - Sorting is numeric when every non-empty value in the column parses as a number,
      lexicographic otherwise.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import polars as pl

from pqview.core.schema import SchemaNode
from pqview.core.typing import Record

_SORT_KEY = "__pqview_sort_key"


def records_frame(records: Sequence[Record], columns: Sequence[str]) -> pl.DataFrame:
    """Build an all-String DataFrame from display records.

    Args:
        records (Sequence[dict[str, str]]): Display records.
        columns (Sequence[str]): Column names in display order (duplicates collapse).

    Returns:
        pl.DataFrame: One String column per distinct name; missing keys become "".
    """
    names = list(dict.fromkeys(columns))
    data = {name: [r.get(name, "") for r in records] for name in names}
    return pl.DataFrame(data, schema={name: pl.String for name in names})


def filter_records(df: pl.DataFrame, query: str) -> pl.DataFrame:
    """Keep rows where any column contains `query` (case-insensitive, literal).

    Args:
        df (pl.DataFrame): Record grid.
        query (str): Search text; blank keeps every row.

    Returns:
        pl.DataFrame: Matching rows in their original order.
    """
    needle = (query or "").strip().lower()
    if not needle or not df.columns:
        return df
    matches = [
        pl.col(c).fill_null("").str.to_lowercase().str.contains(needle, literal=True)
        for c in df.columns
    ]
    return df.filter(pl.any_horizontal(matches))


def filter_columns(df: pl.DataFrame, filters: Mapping[str, str]) -> pl.DataFrame:
    """Keep rows where every filtered column contains its text (case-insensitive, literal).

    Args:
        df (pl.DataFrame): Record grid.
        filters (Mapping[str, str]): Column name to search text. Blank texts and
            unknown columns are ignored.

    Returns:
        pl.DataFrame: Matching rows in their original order.
    """
    matches = [
        pl.col(c).fill_null("").str.to_lowercase().str.contains(text.lower(), literal=True)
        for c, text in filters.items()
        if c in df.columns and text and text.strip()
    ]
    if not matches:
        return df
    return df.filter(pl.all_horizontal(matches))


def sort_records(df: pl.DataFrame, column: str | None, descending: bool = False) -> pl.DataFrame:
    """Sort a record grid by one column.

    Args:
        df (pl.DataFrame): Record grid.
        column (str | None): Column to sort by; None or unknown names leave order as is.
        descending (bool): Reverse the order.

    Returns:
        pl.DataFrame: Sorted grid (stable; empty values last).
    """
    if not column or column not in df.columns or df.is_empty():
        return df
    values = df.get_column(column).fill_null("")
    numeric = values.cast(pl.Float64, strict=False)
    non_empty = values.str.len_chars() > 0
    if bool((numeric.is_not_null() == non_empty).all()):
        key = pl.col(column).cast(pl.Float64, strict=False)
    else:
        key = pl.when(pl.col(column).fill_null("") == "").then(None).otherwise(pl.col(column))
    return (
        df.with_columns(key.alias(_SORT_KEY))
        .sort(_SORT_KEY, descending=descending, nulls_last=True, maintain_order=True)
        .drop(_SORT_KEY)
    )


def page_count(total: int, page_size: int) -> int:
    """Number of pages for `total` rows (at least 1).

    Args:
        total (int): Row count.
        page_size (int): Rows per page (>= 1).

    Returns:
        int: ceil(total / page_size), minimum 1.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(total / page_size))


def page_slice(df: pl.DataFrame, page: int, page_size: int) -> pl.DataFrame:
    """Return one page of rows; `page` is 1-based and clamped to the valid range."""
    pages = page_count(df.height, page_size)
    page = min(max(1, page), pages)
    return df.slice((page - 1) * page_size, page_size)


def format_count(n: int) -> str:
    """Format a count with thousands separators (e.g., 20000 -> "20,000")."""
    return f"{n:,}"


def schema_rows(schema: SchemaNode | dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten a schema tree into display rows (root excluded), indented by depth.

    Args:
        schema (SchemaNode | dict[str, Any]): Root node or its serialized payload.

    Returns:
        list[dict[str, Any]]: Rows with name, physical_type, logical_type, nullable,
        type_class.
    """
    root = schema if isinstance(schema, SchemaNode) else SchemaNode.model_validate(schema)
    rows: list[dict[str, Any]] = []
    for depth, node in root.walk():
        if depth == 0:
            continue
        rows.append(
            {
                "name": "  " * (depth - 1) + node.name,
                "physical_type": node.physical_type,
                "logical_type": node.logical_type or "",
                "nullable": node.nullable,
                "type_class": node.type_class.value,
            }
        )
    return rows
