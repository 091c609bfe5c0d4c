"""
Parquet container decoder.

Overview
- decode(): validates and decodes one Parquet file held in memory into a DecodedTable.
- decoded(): context manager that yields a DecodedTable and releases it exactly once.
- detect_codecs() / check_codecs(): per column chunk codec discovery and validation.

Source of truth
- Supported codecs and aliases: pqview.core.constants.SUPPORTED_CODECS / CODEC_ALIASES.
- Error taxonomy: pqview.io.errors (MalformedError, UnsupportedCodecError).

Classification
- Structural problems (empty input, missing PAR1 magic, unreadable footer) are
  detected before any page is touched and are always MalformedError.
- Codecs are read from the footer and validated before decompression; any codec
  outside the supported set raises UnsupportedCodecError.
- A page read failure is UnsupportedCodecError only when the decoder reports a
  missing or unsupported codec; every other read failure is MalformedError.

Resource lifetime
- DecodedTable holds the decoded Arrow table, the footer metadata and the buffer
  reader. release() drops all three and returns unused pool memory. It is called
  exactly once by decoded(); release failures are logged and swallowed.

Notes
- pyarrow is the single decoder. No state is kept across calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import pyarrow as pa
import pyarrow.parquet as pq

from pqview.core.constants import CODEC_ALIASES, SUPPORTED_CODECS

from .errors import MalformedError, ProcessingError, UnsupportedCodecError

logger = logging.getLogger(__name__)

__all__ = [
    "PARQUET_MAGIC",
    "DecodedTable",
    "canonical_codec",
    "detect_codecs",
    "check_codecs",
    "decode",
    "decoded",
]

PARQUET_MAGIC = b"PAR1"
ENCRYPTED_MAGIC = b"PARE"

# magic + 4-byte footer length + magic
_MIN_FILE_BYTES = 12

_READ_ERRORS = (pa.ArrowException, OSError, ValueError, EOFError)


class DecodedTable:
    """
    Decoded columnar table owned by one decode call.

    Attributes:
        codecs (tuple[str, ...]): Canonical codec names in order of first appearance.

    Notes:
        - Accessors raise ProcessingError after release().
        - Instances are not shared across calls and need no locking.
    """

    def __init__(
        self,
        table: pa.Table,
        metadata: pq.FileMetaData,
        reader: pa.BufferReader,
        codecs: tuple[str, ...],
    ) -> None:
        self._table: pa.Table | None = table
        self._metadata: pq.FileMetaData | None = metadata
        self._reader: pa.BufferReader | None = reader
        self.codecs = codecs
        self._num_rows = int(metadata.num_rows)
        self._num_row_groups = int(metadata.num_row_groups)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def _live_table(self) -> pa.Table:
        if self._table is None:
            raise ProcessingError("decoded table used after release")
        return self._table

    @property
    def released(self) -> bool:
        return self._table is None

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_row_groups(self) -> int:
        return self._num_row_groups

    @property
    def num_columns(self) -> int:
        return self._live_table().num_columns

    @property
    def compression(self) -> str | None:
        """Codec summary: a single name, comma-joined names, or None without chunks."""
        return ",".join(self.codecs) if self.codecs else None

    @property
    def arrow_schema(self) -> pa.Schema:
        return self._live_table().schema

    @property
    def parquet_schema(self) -> pq.ParquetSchema:
        if self._metadata is None:
            raise ProcessingError("decoded table used after release")
        return self._metadata.schema

    def column(self, position: int) -> pa.ChunkedArray | None:
        """
        Return the column vector at a position, or None when there is none.

        Args:
            position (int): Column index in declaration order.

        Returns:
            pa.ChunkedArray | None: The vector; None for out-of-range positions.
        """
        table = self._live_table()
        if position < 0 or position >= table.num_columns:
            return None
        return table.column(position)

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------
    def release(self) -> None:
        """
        Drop the decoded buffers and return unused memory to the Arrow pool.

        Notes:
            A second call is a no-op. The pipeline calls this exactly once.
        """
        if self._table is None:
            logger.debug("decoded table already released")
            return
        reader = self._reader
        self._table = None
        self._metadata = None
        self._reader = None
        if reader is not None:
            reader.close()
        pa.default_memory_pool().release_unused()


def canonical_codec(name: str) -> str:
    """
    Canonicalize a codec name reported by pyarrow.

    Examples:
        >>> canonical_codec("lz4")
        'LZ4_RAW'
        >>> canonical_codec("snappy")
        'SNAPPY'
    """
    upper = str(name).strip().upper()
    return CODEC_ALIASES.get(upper, upper)


def detect_codecs(metadata: pq.FileMetaData) -> tuple[str, ...]:
    """
    Collect the canonical codec of every column chunk.

    Args:
        metadata (pq.FileMetaData): Parsed footer metadata.

    Returns:
        tuple[str, ...]: Distinct codec names in order of first appearance.
    """
    seen: list[str] = []
    for i in range(metadata.num_row_groups):
        rg = metadata.row_group(i)
        for j in range(rg.num_columns):
            codec = canonical_codec(rg.column(j).compression)
            if codec not in seen:
                seen.append(codec)
    return tuple(seen)


def check_codecs(codecs: tuple[str, ...]) -> None:
    """
    Validate codecs against the supported set.

    Raises:
        UnsupportedCodecError: If any codec is outside SUPPORTED_CODECS.
    """
    unsupported = [c for c in codecs if c not in SUPPORTED_CODECS]
    if unsupported:
        raise UnsupportedCodecError(unsupported)


def _is_codec_failure(message: str) -> bool:
    lowered = message.lower()
    if "parquet unsupported" in lowered:
        return True
    if "codec" not in lowered and "compression" not in lowered:
        return False
    return "support" in lowered or "not built" in lowered or "not implemented" in lowered


def _check_container(data: bytes) -> None:
    if not data:
        raise MalformedError("input is empty (0 bytes)")
    if len(data) < _MIN_FILE_BYTES:
        raise MalformedError(f"input is {len(data)} bytes, too short for a Parquet file")
    if data[:4] != PARQUET_MAGIC:
        raise MalformedError("missing PAR1 magic at start of file")
    if data[-4:] == ENCRYPTED_MAGIC:
        raise MalformedError("encrypted Parquet footers are not supported")
    if data[-4:] != PARQUET_MAGIC:
        raise MalformedError("missing PAR1 magic at end of file (truncated footer?)")


def decode(data: bytes | bytearray | memoryview) -> DecodedTable:
    """
    Decode a complete Parquet file held in memory.

    Args:
        data (bytes | bytearray | memoryview): File content.

    Returns:
        DecodedTable: Decoded table; the caller must release() it (see decoded()).

    Raises:
        MalformedError: Input is not a readable Parquet container.
        UnsupportedCodecError: A column chunk uses an unsupported codec.
    """
    raw = bytes(data)
    _check_container(raw)

    reader = pa.BufferReader(pa.py_buffer(raw))
    try:
        pf = pq.ParquetFile(reader)
        metadata = pf.metadata
    except _READ_ERRORS as exc:
        reader.close()
        raise MalformedError(f"unreadable footer: {exc}") from exc

    try:
        codecs = detect_codecs(metadata)
        check_codecs(codecs)
        table = pf.read()
    except UnsupportedCodecError:
        reader.close()
        raise
    except _READ_ERRORS as exc:
        reader.close()
        if _is_codec_failure(str(exc)):
            raise UnsupportedCodecError(detail=str(exc)) from exc
        raise MalformedError(str(exc)) from exc

    logger.debug(
        "decoded parquet: rows=%d row_groups=%d columns=%d codecs=%s",
        metadata.num_rows,
        metadata.num_row_groups,
        table.num_columns,
        ",".join(codecs) or "-",
    )
    return DecodedTable(table, metadata, reader, codecs)


@contextmanager
def decoded(data: bytes | bytearray | memoryview) -> Iterator[DecodedTable]:
    """
    Decode bytes and guarantee a single release of the result.

    Args:
        data (bytes | bytearray | memoryview): File content.

    Yields:
        DecodedTable: Live table for the duration of the block.

    Raises:
        MalformedError: See decode().
        UnsupportedCodecError: See decode().

    Notes:
        - If decode() fails, nothing was produced and release() is never called.
        - Release failures are logged at warning level and never replace the outcome
          of the block.
    """
    table = decode(data)
    try:
        yield table
    finally:
        try:
            table.release()
        except Exception:
            logger.warning("failed to release decoded parquet table", exc_info=True)
