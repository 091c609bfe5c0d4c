from __future__ import annotations

from pathlib import Path

import pytest

from pqview.io.errors import ByteSourceError
from pqview.io.fs import file_signature, read_bytes


def test_read_bytes_returns_whole_file(tmp_path: Path) -> None:
    p = tmp_path / "x.parquet"
    p.write_bytes(b"PAR1....PAR1")
    assert read_bytes(str(p)) == b"PAR1....PAR1"
    assert read_bytes(str(p), max_bytes=12) == b"PAR1....PAR1"


def test_read_bytes_size_limit(tmp_path: Path) -> None:
    p = tmp_path / "x.parquet"
    p.write_bytes(b"0123456789")
    with pytest.raises(ByteSourceError, match="limit"):
        read_bytes(str(p), max_bytes=9)


def test_missing_path_and_directory(tmp_path: Path) -> None:
    with pytest.raises(ByteSourceError):
        read_bytes(str(tmp_path / "missing.parquet"))
    with pytest.raises(ByteSourceError, match="not a regular file"):
        file_signature(str(tmp_path))


def test_signature_is_stable_for_unchanged_file(tmp_path: Path) -> None:
    p = tmp_path / "data.parquet"
    p.write_bytes(b"abc")
    sig = file_signature(str(p))
    assert sig.size == 3
    assert sig == file_signature(str(p))
