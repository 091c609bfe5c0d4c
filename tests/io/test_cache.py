from __future__ import annotations

import os
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from pqview.io import cache as cache_mod
from pqview.io.cache import ResultCache
from pqview.io.config import ViewerSettings
from pqview.io.errors import MalformedError


def write_ints(path: Path, values: list[int]) -> Path:
    pq.write_table(pa.table({"v": pa.array(values, pa.int64())}), str(path))
    return path


def _count_pipeline_runs(monkeypatch) -> dict[str, int]:
    calls = {"n": 0}
    original = cache_mod.process_file

    def counting(path, settings=None):
        calls["n"] += 1
        return original(path, settings)

    monkeypatch.setattr(cache_mod, "process_file", counting)
    return calls


def test_load_caches_until_file_changes(tmp_path: Path, monkeypatch) -> None:
    calls = _count_pipeline_runs(monkeypatch)
    path = write_ints(tmp_path / "a.parquet", [1, 2])
    cache = ResultCache(max_entries=4)

    first = cache.load(str(path))
    second = cache.load(str(path))
    assert first is second
    assert calls["n"] == 1

    write_ints(path, [1, 2, 3])
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
    third = cache.load(str(path))
    assert calls["n"] == 2
    assert third.num_rows == 3


def test_different_settings_are_not_reused(tmp_path: Path, monkeypatch) -> None:
    calls = _count_pipeline_runs(monkeypatch)
    path = write_ints(tmp_path / "a.parquet", [1])
    cache = ResultCache()

    cache.load(str(path), ViewerSettings(row_cap=10))
    cache.load(str(path), ViewerSettings(row_cap=5))
    assert calls["n"] == 2


def test_lru_eviction(tmp_path: Path) -> None:
    paths = [write_ints(tmp_path / f"f{i}.parquet", [i]) for i in range(3)]
    cache = ResultCache(max_entries=2)
    for p in paths:
        cache.load(str(p))

    assert len(cache) == 2
    assert str(paths[0]) not in cache
    assert str(paths[1]) in cache and str(paths[2]) in cache


def test_invalidate_and_clear(tmp_path: Path) -> None:
    path = write_ints(tmp_path / "a.parquet", [1])
    cache = ResultCache()
    cache.load(str(path))

    assert cache.invalidate(str(path)) is True
    assert cache.invalidate(str(path)) is False
    cache.load(str(path))
    cache.clear()
    assert len(cache) == 0


def test_zero_entries_disables_caching(tmp_path: Path, monkeypatch) -> None:
    calls = _count_pipeline_runs(monkeypatch)
    path = write_ints(tmp_path / "a.parquet", [1])
    cache = ResultCache(max_entries=0)
    cache.load(str(path))
    cache.load(str(path))
    assert calls["n"] == 2
    assert len(cache) == 0


def test_failures_are_not_cached(tmp_path: Path) -> None:
    path = tmp_path / "bad.parquet"
    path.write_bytes(b"garbage")
    cache = ResultCache()
    with pytest.raises(MalformedError):
        cache.load(str(path))
    assert len(cache) == 0


def test_negative_max_entries_rejected() -> None:
    with pytest.raises(ValueError):
        ResultCache(max_entries=-1)
