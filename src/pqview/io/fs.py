"""
Filesystem helpers for pqview.io (file protocol baseline).

Responsibilities
- Obtain the complete content of one Parquet file as a contiguous byte buffer.
- Provide the (mtime_ns, size) signature used by the caller-side result cache.
- Apply the optional file size pre-check from ViewerSettings before any bytes are read.

Import DAG discipline
- stdlib-only apart from pqview.io.errors; remote backends (e.g., fsspec) can be
  layered later behind the same interface.

Notes
- All helpers are synchronous; reading the file is the only IO the pipeline performs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ByteSourceError

__all__ = [
    "FileSignature",
    "file_signature",
    "read_bytes",
]


@dataclass(frozen=True)
class FileSignature:
    """
    Cheap identity of a file's current content.

    Attributes:
        mtime_ns (int): Modification time in nanoseconds.
        size (int): Size in bytes.
    """

    mtime_ns: int
    size: int


def file_signature(path: str) -> FileSignature:
    """
    Stat a file and return its signature.

    Args:
        path (str): Path to an existing regular file.

    Returns:
        FileSignature: Current (mtime_ns, size).

    Raises:
        ByteSourceError: If the path cannot be stat'ed or is not a regular file.
    """
    try:
        st = os.stat(path)
    except OSError as exc:
        raise ByteSourceError(f"cannot access {path!r}: {exc.strerror or exc}") from exc
    if not os.path.isfile(path):
        raise ByteSourceError(f"not a regular file: {path!r}")
    return FileSignature(mtime_ns=st.st_mtime_ns, size=st.st_size)


def read_bytes(path: str, max_bytes: int | None = None) -> bytes:
    """
    Read a whole file into memory.

    Args:
        path (str): File to read.
        max_bytes (int | None): Refuse files larger than this many bytes. None
            disables the check.

    Returns:
        bytes: Complete file content.

    Raises:
        ByteSourceError: If the file is missing, unreadable, or larger than max_bytes.
    """
    sig = file_signature(path)
    if max_bytes is not None and sig.size > max_bytes:
        raise ByteSourceError(
            f"file {path!r} is {sig.size} bytes, above the configured limit of {max_bytes} bytes"
        )
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        raise ByteSourceError(f"cannot read {path!r}: {exc.strerror or exc}") from exc
