"""
IO package for pqview: reading, decoding, and normalizing Parquet files.

Surface
- process_file / process_bytes: the decoding pipeline (pqview.io.pipeline).
- ResultCache: caller-side cache with mtime/size invalidation (pqview.io.cache).
- ViewerSettings: runtime configuration with env/TOML loaders (pqview.io.config).
- Errors: ViewerError and its subclasses (pqview.io.errors).

Import DAG discipline
- Depends on pyarrow and pqview.core; never imports pqview.host or app.
"""

from __future__ import annotations

from .cache import ResultCache
from .config import ViewerSettings
from .errors import (
    ByteSourceError,
    ConfigError,
    DecodeError,
    MalformedError,
    ProcessingError,
    UnsupportedCodecError,
    ViewerError,
)
from .pipeline import process_bytes, process_file

__all__ = [
    "ViewerSettings",
    "ResultCache",
    "process_file",
    "process_bytes",
    "ViewerError",
    "ConfigError",
    "ByteSourceError",
    "DecodeError",
    "MalformedError",
    "UnsupportedCodecError",
    "ProcessingError",
]
