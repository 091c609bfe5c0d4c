"""
pqview core defaults.

Defines the row cap, the supported codec set, default display patterns, and the
timestamp magnitude boundaries consumed by the decoding pipeline. This module is
zero-IO and uses only the Python standard library.

Notes:
    - The supported codec set is exact; any other codec reported by a column chunk
      is rejected before page decompression.
    - The magnitude boundaries are part of the display contract and must not be
      tuned per file; see pqview.core.normalize.
"""

from __future__ import annotations

__all__ = [
    "ROW_CAP",
    "ROOT_SCHEMA_NAME",
    "SUPPORTED_CODECS",
    "CODEC_ALIASES",
    "DEFAULT_TIMESTAMP_FORMAT",
    "DEFAULT_DATE_FORMAT",
    "NANOS_THRESHOLD",
    "MICROS_THRESHOLD",
    "MILLIS_THRESHOLD",
    "SECONDS_THRESHOLD",
    "DATE_DAYS_LIMIT",
    "MILLIS_PER_DAY",
]

# Maximum number of rows materialized per decode call.
ROW_CAP: int = 20000

# Sentinel name of the schema tree root.
ROOT_SCHEMA_NAME: str = "schema"

# Canonical codec names accepted by the decoder, in display order.
SUPPORTED_CODECS: tuple[str, ...] = (
    "UNCOMPRESSED",
    "SNAPPY",
    "GZIP",
    "BROTLI",
    "ZSTD",
    "LZ4_RAW",
)

# pyarrow reports LZ4_RAW column chunks as "LZ4".
CODEC_ALIASES: dict[str, str] = {
    "LZ4": "LZ4_RAW",
}

DEFAULT_TIMESTAMP_FORMAT: str = "YYYY-MM-DD HH:mm:ss.SSS"
DEFAULT_DATE_FORMAT: str = "YYYY-MM-DD"

# Timestamp unit boundaries (strictly greater than).
NANOS_THRESHOLD: float = 1e15
MICROS_THRESHOLD: float = 1e14
MILLIS_THRESHOLD: float = 1e11
SECONDS_THRESHOLD: float = 1e9

# Date-like numbers in [0, DATE_DAYS_LIMIT) are days since epoch.
DATE_DAYS_LIMIT: int = 100000

MILLIS_PER_DAY: int = 24 * 60 * 60 * 1000
