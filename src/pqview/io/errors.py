"""
Custom exceptions for the pqview.io module.

Purpose
- Provide IO-layer error types that map cleanly to responsibilities in pqview.io.
- Keep the decode-level taxonomy small: callers distinguish exactly two classified
  decode failures plus a generic wrapped fallback.

Source of truth and boundaries
- pqview.core.errors.PatternError is raised by the date formatter and never escapes
  the cell normalizer.
- pqview.io raises:
  - ByteSourceError: the file could not be read (missing, unreadable, too large).
  - MalformedError: the bytes are not a readable Parquet container.
  - UnsupportedCodecError: a column chunk uses a codec outside the supported set.
  - ProcessingError: anything else, wrapped with a generic message.
  - ConfigError: invalid viewer settings.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from collections.abc import Iterable

from pqview.core.constants import SUPPORTED_CODECS

__all__ = [
    "ViewerError",
    "ConfigError",
    "ByteSourceError",
    "DecodeError",
    "MalformedError",
    "UnsupportedCodecError",
    "ProcessingError",
]


class ViewerError(Exception):
    """
    Base class for pqview IO-layer errors.

    Notes:
        Use this as a catch-all for pipeline failures presented to the user.
    """


class ConfigError(ViewerError):
    """
    Raised when viewer configuration is invalid.

    Examples:
        - row_cap < 1
        - max_file_bytes < 1
    """


class ByteSourceError(ViewerError):
    """
    Raised when a file's bytes cannot be obtained.

    Examples:
        - Path does not exist or is a directory
        - File is larger than ViewerSettings.max_file_bytes
    """


class DecodeError(ViewerError):
    """
    Base class for classified decode failures.

    Attributes:
        detail (str): Underlying decoder message or a short structural description.
    """

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail


class MalformedError(DecodeError):
    """
    Raised when input is not a readable Parquet container.

    Examples:
        - Zero bytes, missing PAR1 magic, truncated footer
        - Corrupt or undecodable data pages
    """

    def __init__(self, detail: str) -> None:
        super().__init__(f"Parquet processing error: {detail}", detail)


class UnsupportedCodecError(DecodeError):
    """
    Raised when a column chunk is compressed with a codec outside SUPPORTED_CODECS.

    Attributes:
        codecs (tuple[str, ...]): Offending codec names as reported by the decoder
            (may be empty when the failure surfaced while reading pages).

    Notes:
        The message enumerates every supported codec and recommends re-encoding, so it
        can be shown to the user verbatim.
    """

    def __init__(self, codecs: Iterable[str] = (), detail: str = "") -> None:
        self.codecs = tuple(codecs)
        supported = ", ".join(SUPPORTED_CODECS)
        found = f" (found: {', '.join(self.codecs)})" if self.codecs else ""
        message = (
            f"Unsupported compression codec{found}. "
            f"This viewer supports {supported}. "
            "Please re-encode the file using a supported codec (e.g. ZSTD or SNAPPY)."
        )
        super().__init__(message, detail or ", ".join(self.codecs))


class ProcessingError(ViewerError):
    """
    Raised for any other pipeline failure, wrapping the original exception.

    Notes:
        The message is prefixed with "Parquet processing error:" like MalformedError so
        the viewer can present both the same way.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(f"Parquet processing error: {detail}")
        self.detail = detail
