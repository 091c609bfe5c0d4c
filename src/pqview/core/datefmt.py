"""
Date pattern formatting and lenient date parsing for display.

Implements the conventional date-pattern mini-language used by the viewer's display
settings (``"YYYY-MM-DD HH:mm:ss.SSS"`` and friends) on top of stdlib datetime, plus
a lenient parser for date-like strings found in string columns.

Tokens
------
| Token  | Output                         | Token  | Output                      |
|--------|--------------------------------|--------|-----------------------------|
| YYYY   | 4-digit year (zero padded)     | HH / H | hour 00-23 / 0-23           |
| YY     | 2-digit year                   | hh / h | hour 01-12 / 1-12           |
| Y      | year, unpadded                 | A / a  | AM/PM / am/pm               |
| MMMM   | January                        | mm / m | minute 00-59 / 0-59         |
| MMM    | Jan                            | ss / s | second 00-59 / 0-59         |
| MM / M | month 01-12 / 1-12             | SSS    | milliseconds 000-999        |
| DD / D | day 01-31 / 1-31               | SS / S | centiseconds / deciseconds  |
| dddd   | Monday                         | ZZ     | offset as +00:00            |
| ddd    | Mon                            | Z      | offset as +0000             |
| dd     | Mo                             |        |                             |

Text enclosed in square brackets is emitted literally (``[T]``); any other
character passes through unchanged.

Notes:
    - Zero-IO, stdlib only. Month and weekday names are English regardless of the
      process locale so output is stable across machines.
    - Naive datetimes are treated as UTC.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime

from .errors import PatternError

__all__ = [
    "format_datetime",
    "parse_date_string",
]

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Longer tokens precede their prefixes so the alternation picks the longest match.
_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|YYYY|YY|Y|MMMM|MMM|MM|M|DD|D|dddd|ddd|dd|HH|H|hh|h|A|a|mm|m|ss|s|SSS|SS|S|ZZ|Z"
)


def _offset(dt: datetime, colon: bool) -> str:
    delta = dt.utcoffset() or timedelta(0)
    minutes = int(delta.total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hh, mm = divmod(abs(minutes), 60)
    return f"{sign}{hh:02d}:{mm:02d}" if colon else f"{sign}{hh:02d}{mm:02d}"


def _render(token: str, dt: datetime) -> str:
    hour12 = dt.hour % 12 or 12
    millis = dt.microsecond // 1000
    if token.startswith("["):
        return token[1:-1]
    if token == "YYYY":
        return f"{dt.year:04d}"
    if token == "YY":
        return f"{dt.year % 100:02d}"
    if token == "Y":
        return str(dt.year)
    if token == "MMMM":
        return _MONTHS[dt.month - 1]
    if token == "MMM":
        return _MONTHS[dt.month - 1][:3]
    if token == "MM":
        return f"{dt.month:02d}"
    if token == "M":
        return str(dt.month)
    if token == "DD":
        return f"{dt.day:02d}"
    if token == "D":
        return str(dt.day)
    if token == "dddd":
        return _WEEKDAYS[dt.weekday()]
    if token == "ddd":
        return _WEEKDAYS[dt.weekday()][:3]
    if token == "dd":
        return _WEEKDAYS[dt.weekday()][:2]
    if token == "HH":
        return f"{dt.hour:02d}"
    if token == "H":
        return str(dt.hour)
    if token == "hh":
        return f"{hour12:02d}"
    if token == "h":
        return str(hour12)
    if token == "A":
        return "AM" if dt.hour < 12 else "PM"
    if token == "a":
        return "am" if dt.hour < 12 else "pm"
    if token == "mm":
        return f"{dt.minute:02d}"
    if token == "m":
        return str(dt.minute)
    if token == "ss":
        return f"{dt.second:02d}"
    if token == "s":
        return str(dt.second)
    if token == "SSS":
        return f"{millis:03d}"
    if token == "SS":
        return f"{millis // 10:02d}"
    if token == "S":
        return str(millis // 100)
    if token == "ZZ":
        return _offset(dt, colon=True)
    if token == "Z":
        return _offset(dt, colon=False)
    raise PatternError(f"unknown pattern token {token!r}")  # pragma: no cover - regex bound


def format_datetime(dt: datetime, pattern: str) -> str:
    """
    Format a datetime with a display pattern.

    Args:
        dt (datetime): Instant to format. Naive values are interpreted as UTC;
            aware values are converted to UTC.
        pattern (str): Pattern in the token language described in the module docstring.

    Returns:
        str: Formatted text.

    Raises:
        PatternError: If ``pattern`` is not a string.

    Examples:
        >>> from datetime import datetime, UTC
        >>> format_datetime(datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC), "YYYY-MM-DD HH:mm:ss.SSS")
        '2023-11-14 22:13:20.000'
        >>> format_datetime(datetime(2024, 2, 5, 7, 0, tzinfo=UTC), "ddd, MMM D [at] h:mm A")
        'Mon, Feb 5 at 7:00 AM'
    """
    if not isinstance(pattern, str):
        raise PatternError(f"date pattern must be a string, got {type(pattern).__name__}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return _TOKEN_RE.sub(lambda m: _render(m.group(0), dt), pattern)


def parse_date_string(text: str) -> datetime | None:
    """
    Leniently parse a date-like string.

    Tries ISO 8601 first (``2023-11-14``, ``2023-11-14T22:13:20Z``,
    ``2023-11-14 22:13:20.123+02:00``), then RFC 2822 (``Tue, 14 Nov 2023 22:13:20 GMT``).

    Args:
        text (str): Candidate string.

    Returns:
        datetime | None: Parsed datetime, or None when the text is not a date.
    """
    s = text.strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(s)
    except (TypeError, ValueError, IndexError):
        return None
