"""
Cell normalizer: raw decoded values to display strings.

Converts one decoded cell into the string shown by the viewer. The conversion is
type-aware (timestamps, dates, nested values, big integers) and total: every branch
ends in some string, and no exception escapes ``normalize_cell``.

Temporal resolution
- Native ``datetime``/``date`` values are used as-is.
- Numeric values under a timestamp tag are interpreted by magnitude, because the
  value carries no unit:

  | Magnitude (v)        | Read as             | To epoch millis   |
  |----------------------|---------------------|-------------------|
  | v > 1e15             | nanoseconds         | floor(v / 1e6)    |
  | 1e14 < v <= 1e15     | microseconds        | floor(v / 1e3)    |
  | 1e11 < v <= 1e14     | milliseconds        | v                 |
  | 1e9 < v <= 1e11      | seconds             | v * 1000          |
  | v <= 1e9             | days since epoch    | v * 86_400_000    |

- Numeric values under a date tag are days since epoch when 0 <= v < 100000;
  anything else is shown verbatim.
- Strings that are not numbers go through pqview.core.datefmt.parse_date_string.

Notes:
    - The magnitude table is a heuristic with known ambiguity near its boundaries;
      it is kept stable so the same file always renders the same way.
    - Resolved instants are formatted in UTC.
    - Zero-IO, stdlib only.
"""

from __future__ import annotations

import json
import math
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

from .constants import (
    DATE_DAYS_LIMIT,
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIMESTAMP_FORMAT,
    MICROS_THRESHOLD,
    MILLIS_PER_DAY,
    MILLIS_THRESHOLD,
    NANOS_THRESHOLD,
    SECONDS_THRESHOLD,
)
from .datefmt import format_datetime, parse_date_string
from .grammar import TypeClass, is_temporal, type_class_from_value

__all__ = [
    "normalize_cell",
    "epoch_millis_from_magnitude",
    "resolve_temporal",
    "plain_string",
]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def epoch_millis_from_magnitude(value: int | float) -> int:
    """
    Map a unit-less timestamp number to epoch milliseconds by magnitude.

    Args:
        value (int | float): Raw timestamp number.

    Returns:
        int: Epoch milliseconds.

    Examples:
        >>> epoch_millis_from_magnitude(1_700_000_000_000_000_000)
        1700000000000
        >>> epoch_millis_from_magnitude(1_700_000_000)
        1700000000000
    """
    if isinstance(value, int):
        if value > NANOS_THRESHOLD:
            return value // 1_000_000
        if value > MICROS_THRESHOLD:
            return value // 1_000
        if value > MILLIS_THRESHOLD:
            return value
        if value > SECONDS_THRESHOLD:
            return value * 1000
        return value * MILLIS_PER_DAY
    if value > NANOS_THRESHOLD:
        return math.floor(value / 1e6)
    if value > MICROS_THRESHOLD:
        return math.floor(value / 1e3)
    if value > MILLIS_THRESHOLD:
        return int(value)
    if value > SECONDS_THRESHOLD:
        return int(value * 1000)
    return int(value * MILLIS_PER_DAY)


def _from_epoch_millis(ms: int) -> datetime | None:
    try:
        return _EPOCH + timedelta(milliseconds=ms)
    except OverflowError:
        return None


def _as_number(value: Any) -> int | float | None:
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


def resolve_temporal(value: Any, type_class: TypeClass) -> datetime | None:
    """
    Resolve a cell to an instant for timestamp-like or date-like columns.

    Args:
        value (Any): Raw decoded value.
        type_class (TypeClass): ``TypeClass.TIMESTAMP`` or ``TypeClass.DATE``.

    Returns:
        datetime | None: Resolved instant, or None when no conversion applies.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)

    number = _as_number(value)
    if number is not None:
        if type_class is TypeClass.TIMESTAMP:
            return _from_epoch_millis(epoch_millis_from_magnitude(number))
        if 0 <= number < DATE_DAYS_LIMIT:
            return _from_epoch_millis(int(number * MILLIS_PER_DAY))
        return None

    if isinstance(value, str):
        return parse_date_string(value)
    return None


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return plain_string(bytes(obj))
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def plain_string(value: Any) -> str:
    """
    Stringify a non-temporal value for display.

    Notes:
        - Integers are rendered exactly; floats drop a trailing ``.0``.
        - Empty dicts/lists render as ``""``; other containers as compact JSON.
        - Bytes render as UTF-8 text when decodable, else as ``0x``-prefixed hex.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return "0x" + raw.hex()
    if isinstance(value, (dict, list, tuple)):
        if len(value) == 0:
            return ""
        try:
            return json.dumps(
                value, ensure_ascii=False, separators=(",", ":"), default=_json_default
            )
        except (TypeError, ValueError, RecursionError):
            return str(value)
    return str(value)


def normalize_cell(
    value: Any,
    type_class: TypeClass | str,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Convert one decoded cell into its display string.

    Args:
        value (Any): Raw decoded value (None for nulls).
        type_class (TypeClass | str): Column tag, or a decoder type descriptor string
            which is classified with pqview.core.grammar rules.
        timestamp_format (str): Pattern applied to timestamp-like instants.
        date_format (str): Pattern applied to date-like instants.

    Returns:
        str: Display string; ``""`` for None.

    Notes:
        Never raises. A pattern that cannot be applied yields the raw value's string form.

    Examples:
        >>> normalize_cell(None, TypeClass.INTEGER)
        ''
        >>> normalize_cell(1_700_000_000_000, "timestamp[ms]")
        '2023-11-14 22:13:20.000'
        >>> normalize_cell(19675, TypeClass.DATE)
        '2023-11-14'
    """
    if value is None:
        return ""
    try:
        tc = type_class_from_value(type_class)
        if is_temporal(tc):
            instant = resolve_temporal(value, tc)
            if instant is not None:
                pattern = timestamp_format if tc is TypeClass.TIMESTAMP else date_format
                try:
                    return format_datetime(instant, pattern)
                except Exception:
                    return str(value)
        return plain_string(value)
    except Exception:
        try:
            return str(value)
        except Exception:
            return ""
