"""
Row materialization: decoded columns -> display records.

Overview
- materialize(): build up to row_cap records, one dict[str, str] per row, keys in
  column declaration order.

Raw value delivery
- timestamp columns: native datetime values (ns is truncated to us; zoned columns
  are delivered in UTC).
- date32/date64 columns: native date values.
- everything else: Python values from pyarrow (to_pylist), falling back to per-cell
  conversion when a column cannot be converted in bulk.
- A cell that still cannot be converted is shown as its raw bytes (strings with
  invalid UTF-8), its str(scalar) form, or empty.

Notes
- Rows are produced in storage order; nothing is re-sorted.
- A column accessor that is missing is skipped (no key written for it).
- Duplicate column names share one key; the later column's value wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import pyarrow as pa

from pqview.core.constants import DEFAULT_DATE_FORMAT, DEFAULT_TIMESTAMP_FORMAT, ROW_CAP
from pqview.core.normalize import normalize_cell
from pqview.core.schema import ColumnDescriptor
from pqview.core.typing import Record

from .decode import DecodedTable

logger = logging.getLogger(__name__)

__all__ = [
    "effective_rows",
    "column_values",
    "materialize",
]

_CONVERT_ERRORS = (pa.ArrowException, ValueError, OverflowError, TypeError)


def effective_rows(num_rows: int, row_cap: int = ROW_CAP) -> int:
    """
    Number of records to build for a file.

    Examples:
        >>> effective_rows(25_000)
        20000
        >>> effective_rows(5, 20_000)
        5
    """
    return max(0, min(num_rows, row_cap))


def _column(table: DecodedTable | pa.Table, position: int) -> pa.ChunkedArray | None:
    if isinstance(table, DecodedTable):
        return table.column(position)
    if 0 <= position < table.num_columns:
        return table.column(position)
    return None


def _raw_type(t: pa.DataType) -> pa.DataType | None:
    # physical storage of a cell whose Python conversion failed
    if pa.types.is_string(t):
        return pa.binary()
    if pa.types.is_large_string(t):
        return pa.large_binary()
    if pa.types.is_timestamp(t) or pa.types.is_date64(t):
        return pa.int64()
    if pa.types.is_date32(t):
        return pa.int32()
    return None


def _scalar_value(scalar: pa.Scalar) -> Any:
    try:
        return scalar.as_py()
    except _CONVERT_ERRORS:
        pass
    raw_type = _raw_type(scalar.type)
    try:
        if raw_type is not None:
            return scalar.cast(raw_type).as_py()
        return str(scalar)
    except _CONVERT_ERRORS as exc:
        logger.debug("unconvertible %s cell shown as empty (%s)", scalar.type, exc)
        return None


def _prepare(col: pa.ChunkedArray) -> pa.ChunkedArray:
    t = col.type
    if pa.types.is_timestamp(t) and (t.unit == "ns" or t.tz is not None):
        return col.cast(pa.timestamp("us", tz="UTC" if t.tz is not None else None), safe=False)
    return col


def column_values(col: pa.ChunkedArray, length: int) -> list[Any]:
    """
    Convert the first `length` cells of a column into raw Python values.

    Args:
        col (pa.ChunkedArray): Column vector.
        length (int): Number of leading cells to convert.

    Returns:
        list[Any]: One raw value per cell (None for nulls).
    """
    head = col.slice(0, length)
    try:
        return _prepare(head).to_pylist()
    except _CONVERT_ERRORS as exc:
        logger.debug("bulk conversion of %s column failed (%s); converting per cell", head.type, exc)
    return [_scalar_value(s) for s in head]


def materialize(
    table: DecodedTable | pa.Table,
    columns: Sequence[ColumnDescriptor],
    row_cap: int = ROW_CAP,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[Record]:
    """
    Materialize display records from a decoded table.

    Args:
        table (DecodedTable | pa.Table): Decoded table (not yet released).
        columns (Sequence[ColumnDescriptor]): Descriptors from describe_columns().
        row_cap (int): Maximum number of records.
        timestamp_format (str): Pattern for timestamp-like columns.
        date_format (str): Pattern for date-like columns.

    Returns:
        list[dict[str, str]]: min(num_rows, row_cap) records.
    """
    n = effective_rows(table.num_rows, row_cap)
    records: list[Record] = [{} for _ in range(n)]
    if n == 0:
        return records

    for desc in columns:
        col = _column(table, desc.position)
        if col is None:
            logger.debug("no column at position %d (%s); skipping", desc.position, desc.name)
            continue
        values = column_values(col, n)
        for rec, value in zip(records, values):
            rec[desc.name] = normalize_cell(value, desc.type_class, timestamp_format, date_format)
    return records
