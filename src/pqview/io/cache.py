"""
Caller-side result cache.

ResultCache keeps NormalizedResult values keyed by resolved file path and validated
by the file's (mtime_ns, size) signature. A changed signature invalidates the entry;
beyond max_entries the least recently used entry is evicted.

Notes
- The decoding pipeline itself is stateless; this cache is an explicit collaborator
  owned by the viewer host.
- Not thread-safe. The viewer host runs one request at a time.
"""

from __future__ import annotations

import logging
import os
from collections import OrderedDict

from pqview.core.schema import NormalizedResult

from .config import ViewerSettings
from .fs import FileSignature, file_signature
from .pipeline import process_file

logger = logging.getLogger(__name__)

__all__ = [
    "ResultCache",
]


class ResultCache:
    """
    LRU cache of normalized results.

    Args:
        max_entries (int): Maximum cached files; 0 disables caching.

    Examples:
        >>> cache = ResultCache(max_entries=2)
        >>> len(cache)
        0
    """

    def __init__(self, max_entries: int = 8) -> None:
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, tuple[FileSignature, ViewerSettings, NormalizedResult]] = (
            OrderedDict()
        )

    @staticmethod
    def _key(path: str) -> str:
        return os.path.realpath(path)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._key(path) in self._entries

    def get(
        self, path: str, signature: FileSignature, settings: ViewerSettings | None = None
    ) -> NormalizedResult | None:
        """
        Return the cached result when the signature (and settings, if given) still match.

        A stale entry is dropped.
        """
        key = self._key(path)
        entry = self._entries.get(key)
        if entry is None:
            return None
        cached_sig, cached_settings, result = entry
        if cached_sig != signature or (settings is not None and cached_settings != settings):
            logger.debug("cache entry for %s is stale", key)
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return result

    def put(
        self,
        path: str,
        signature: FileSignature,
        result: NormalizedResult,
        settings: ViewerSettings | None = None,
    ) -> None:
        if self.max_entries == 0:
            return
        key = self._key(path)
        self._entries[key] = (signature, settings or ViewerSettings(), result)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted %s from result cache", evicted)

    def invalidate(self, path: str) -> bool:
        """Drop the entry for a path; returns True if one existed."""
        return self._entries.pop(self._key(path), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def load(self, path: str, settings: ViewerSettings | None = None) -> NormalizedResult:
        """
        Return a cached result for `path`, or run the pipeline and cache its output.

        Args:
            path (str): Parquet file path.
            settings (ViewerSettings | None): Settings for a fresh decode; a cached
                result produced under different settings is not reused.

        Returns:
            NormalizedResult

        Raises:
            ByteSourceError | DecodeError | ProcessingError: From the pipeline. Failures
                are never cached.
        """
        s = settings or ViewerSettings()
        signature = file_signature(path)
        cached = self.get(path, signature, s)
        if cached is not None:
            logger.debug("cache hit for %s", path)
            return cached
        logger.debug("cache miss for %s", path)
        result = process_file(path, s)
        self.put(path, signature, result, s)
        return result
