"""
Configuration for the pqview.io module.

Defines ViewerSettings, a frozen dataclass carrying runtime configuration for the
decoding pipeline and its caller-side cache. Defaults are sourced from
pqview.core.constants (the single source of truth).

Source of truth
- pqview.core.constants.ROW_CAP, DEFAULT_TIMESTAMP_FORMAT, DEFAULT_DATE_FORMAT

Import DAG discipline
- Depends only on stdlib, pqview.core.constants and pqview.io.errors.
- Does not import the host or app layers.

Notes
- Precedence for ViewerSettings.load(): env > TOML > defaults.
- max_file_bytes is a caller-side pre-check applied by pqview.io.fs.read_bytes; the
  decoder itself does not cap memory beyond row_cap.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pqview.core.constants import DEFAULT_DATE_FORMAT, DEFAULT_TIMESTAMP_FORMAT, ROW_CAP

from .errors import ConfigError

logger = logging.getLogger(__name__)

__all__ = [
    "ViewerSettings",
]


@dataclass(frozen=True)
class ViewerSettings:
    """
    Runtime settings for the decoding pipeline.

    Attributes:
        timestamp_format (str): Display pattern for timestamp-like columns.
        date_format (str): Display pattern for date-like columns.
        row_cap (int): Maximum records materialized per decode (>= 1).
        max_file_bytes (int | None): Refuse files larger than this before decoding;
            None disables the check.
        cache_entries (int): Maximum files kept by pqview.io.cache.ResultCache (>= 0;
            0 disables caching).

    Raises:
        ConfigError: If row_cap < 1, max_file_bytes < 1, or cache_entries < 0.

    Examples:
        >>> from pqview.io import ViewerSettings
        >>> ViewerSettings(row_cap=100)  # doctest: +ELLIPSIS
        ViewerSettings(...)
    """

    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    date_format: str = DEFAULT_DATE_FORMAT
    row_cap: int = ROW_CAP
    max_file_bytes: int | None = None
    cache_entries: int = 8

    def __post_init__(self) -> None:
        if self.row_cap < 1:
            raise ConfigError(f"row_cap must be >= 1, got {self.row_cap}")
        if self.max_file_bytes is not None and self.max_file_bytes < 1:
            raise ConfigError(f"max_file_bytes must be >= 1 or None, got {self.max_file_bytes}")
        if self.cache_entries < 0:
            raise ConfigError(f"cache_entries must be >= 0, got {self.cache_entries}")

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ViewerSettings, cfg: dict[str, Any] | None) -> ViewerSettings:
        """Apply a loose config mapping onto ViewerSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        for key in ("timestamp_format", "date_format"):
            if key in cfg and isinstance(cfg[key], str) and cfg[key]:
                s = replace(s, **{key: cfg[key]})

        if "row_cap" in cfg:
            try:
                s = replace(s, row_cap=int(cfg["row_cap"]))
            except (TypeError, ValueError):
                logger.warning("ignoring invalid row_cap %r", cfg["row_cap"])

        if "max_file_bytes" in cfg:
            raw = cfg["max_file_bytes"]
            try:
                if raw is None or (isinstance(raw, str) and raw.strip().lower() in ("", "none")):
                    s = replace(s, max_file_bytes=None)
                else:
                    s = replace(s, max_file_bytes=int(raw))
            except (TypeError, ValueError):
                logger.warning("ignoring invalid max_file_bytes %r", raw)

        if "cache_entries" in cfg:
            try:
                s = replace(s, cache_entries=int(cfg["cache_entries"]))
            except (TypeError, ValueError):
                logger.warning("ignoring invalid cache_entries %r", cfg["cache_entries"])

        return s

    @classmethod
    def from_env(
        cls, base: ViewerSettings | None = None, prefix: str = "PQVIEW_"
    ) -> ViewerSettings:
        """
        Build ViewerSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - PQVIEW_TIMESTAMP_FORMAT
            - PQVIEW_DATE_FORMAT
            - PQVIEW_ROW_CAP
            - PQVIEW_MAX_FILE_BYTES ("none" disables)
            - PQVIEW_CACHE_ENTRIES
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("timestamp_format", "date_format", "row_cap", "max_file_bytes", "cache_entries"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ViewerSettings:
        """
        Build ViewerSettings from a TOML file.

        Search order when `path` is None:
            1) ./pqview.toml (with either a [viewer] table or top-level keys)
            2) ./pyproject.toml under [tool.pqview]

        Returns defaults if no file is present or it cannot be parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("could not read settings from %s: %s", p, exc)
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "pqview.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("pqview") if isinstance(tool, dict) else None
            elif isinstance(data.get("viewer"), dict):
                cfg = data["viewer"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ViewerSettings:
        """
        Load ViewerSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (pqview.toml, pyproject.toml).

        Returns:
            ViewerSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
