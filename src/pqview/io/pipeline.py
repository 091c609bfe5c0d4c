"""
Decoding pipeline entry points.

Flow
1) fs.read_bytes(path)                  (process_file only)
2) decode.decoded(data)                 -> DecodedTable, released exactly once
3) project.project / describe_columns   -> SchemaNode, ColumnDescriptors
4) materialize.materialize              -> records (<= row_cap)
5) NormalizedResult

Error surface
- ByteSourceError, MalformedError, UnsupportedCodecError propagate unchanged.
- Anything else is wrapped in ProcessingError ("Parquet processing error: ...").

Notes
- Stateless: every call recomputes from bytes. Caching lives in pqview.io.cache.
"""

from __future__ import annotations

import logging

from pqview.core.schema import NormalizedResult

from .config import ViewerSettings
from .decode import decoded
from .errors import ProcessingError, ViewerError
from .fs import read_bytes
from .materialize import materialize
from .project import describe_columns, project

logger = logging.getLogger(__name__)

__all__ = [
    "process_bytes",
    "process_file",
]


def _process(data: bytes, settings: ViewerSettings) -> NormalizedResult:
    with decoded(data) as table:
        schema = project(table)
        columns = describe_columns(table)
        records = materialize(
            table,
            columns,
            row_cap=settings.row_cap,
            timestamp_format=settings.timestamp_format,
            date_format=settings.date_format,
        )
        result = NormalizedResult(
            schema=schema,
            records=records,
            columns=[c.name for c in columns],
            num_rows=table.num_rows,
            row_groups=table.num_row_groups,
            compression=table.compression,
        )
    if result.truncated:
        logger.info("materialized %d of %d rows", len(result.records), result.num_rows)
    return result


def process_bytes(data: bytes, settings: ViewerSettings | None = None) -> NormalizedResult:
    """
    Decode one Parquet file held in memory and normalize it for display.

    Args:
        data (bytes): Complete file content.
        settings (ViewerSettings | None): Display patterns and row cap; defaults when None.

    Returns:
        NormalizedResult: Schema tree, records, and file-level counts.

    Raises:
        MalformedError: Input is not a readable Parquet container.
        UnsupportedCodecError: A column chunk uses an unsupported codec.
        ProcessingError: Any other failure, with the original exception chained.
    """
    s = settings or ViewerSettings()
    try:
        return _process(data, s)
    except ViewerError:
        raise
    except Exception as exc:
        logger.exception("unexpected failure while processing parquet bytes")
        raise ProcessingError(str(exc) or type(exc).__name__) from exc


def process_file(path: str, settings: ViewerSettings | None = None) -> NormalizedResult:
    """
    Read a Parquet file from disk and normalize it for display.

    Args:
        path (str): File path.
        settings (ViewerSettings | None): See process_bytes(); max_file_bytes is applied
            before reading.

    Returns:
        NormalizedResult

    Raises:
        ByteSourceError: The file is missing, unreadable, or above max_file_bytes.
        MalformedError | UnsupportedCodecError | ProcessingError: See process_bytes().
    """
    s = settings or ViewerSettings()
    data = read_bytes(path, max_bytes=s.max_file_bytes)
    logger.debug("read %d bytes from %s", len(data), path)
    return process_bytes(data, s)
