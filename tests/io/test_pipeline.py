from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from pqview.core.constants import ROW_CAP
from pqview.io import pipeline as pipeline_mod
from pqview.io.config import ViewerSettings
from pqview.io.decode import DecodedTable
from pqview.io.errors import ByteSourceError, MalformedError, ProcessingError, UnsupportedCodecError
from pqview.io.pipeline import process_bytes, process_file

TS0 = 1_700_000_000_000


def make_three_column_table(n: int = 5) -> pa.Table:
    return pa.table(
        {
            "id": pa.array(list(range(1, n + 1)), pa.int64()),
            "label": [f"row-{i}" for i in range(n)],
            "created": pa.array([TS0 + i * 1_000 for i in range(n)], pa.timestamp("ms")),
        }
    )


def write_parquet(tmp: Path, table: pa.Table, name: str = "data.parquet", **kwargs) -> Path:
    path = tmp / name
    pq.write_table(table, str(path), **kwargs)
    return path


def test_three_column_snappy_file(tmp_path: Path) -> None:
    path = write_parquet(tmp_path, make_three_column_table(), compression="snappy")
    result = process_file(str(path))

    assert result.num_rows == 5
    assert len(result.records) == 5
    assert result.columns == ["id", "label", "created"]
    assert len(result.columns) == len(result.schema_tree.children)
    assert result.compression == "SNAPPY"
    assert result.row_groups == 1
    assert not result.truncated
    assert result.records[0] == {
        "id": "1",
        "label": "row-0",
        "created": "2023-11-14 22:13:20.000",
    }
    assert result.records[4]["created"] == "2023-11-14 22:13:24.000"


def test_row_cap_truncates_records_but_not_num_rows() -> None:
    n = ROW_CAP + 1
    sink = pa.BufferOutputStream()
    pq.write_table(pa.table({"n": pa.array(list(range(n)), pa.int64())}), sink, compression="zstd")

    result = process_bytes(sink.getvalue().to_pybytes())
    assert result.num_rows == n
    assert len(result.records) == ROW_CAP
    assert result.truncated
    assert result.records[-1] == {"n": str(ROW_CAP - 1)}


def test_row_groups_and_settings(tmp_path: Path) -> None:
    path = write_parquet(tmp_path, make_three_column_table(), row_group_size=2, compression="gzip")
    settings = ViewerSettings(timestamp_format="HH:mm:ss", row_cap=3)
    result = process_file(str(path), settings)

    assert result.row_groups == 3
    assert result.num_rows == 5
    assert [r["created"] for r in result.records] == ["22:13:20", "22:13:21", "22:13:22"]


def test_lz4_is_reported_as_lz4_raw(tmp_path: Path) -> None:
    path = write_parquet(tmp_path, make_three_column_table(), compression="lz4")
    assert process_file(str(path)).compression == "LZ4_RAW"


def test_processing_is_idempotent(tmp_path: Path) -> None:
    path = write_parquet(tmp_path, make_three_column_table(), compression="brotli")
    data = path.read_bytes()
    assert process_bytes(data) == process_bytes(data)
    assert process_bytes(data).model_dump() == process_file(str(path)).model_dump()


def test_empty_file_on_disk_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "empty.parquet"
    path.write_bytes(b"")
    with pytest.raises(MalformedError) as ei:
        process_file(str(path))
    assert not isinstance(ei.value, UnsupportedCodecError)


def test_missing_and_oversized_files(tmp_path: Path) -> None:
    with pytest.raises(ByteSourceError):
        process_file(str(tmp_path / "nope.parquet"))

    path = write_parquet(tmp_path, make_three_column_table())
    with pytest.raises(ByteSourceError, match="limit"):
        process_file(str(path), ViewerSettings(max_file_bytes=16))


def test_unexpected_failures_are_wrapped_and_table_released(monkeypatch, tmp_path: Path) -> None:
    calls = {"n": 0}
    original = DecodedTable.release

    def counting_release(self):
        calls["n"] += 1
        original(self)

    def exploding_materialize(*args, **kwargs):
        raise KeyError("cell accessor")

    monkeypatch.setattr(DecodedTable, "release", counting_release)
    monkeypatch.setattr(pipeline_mod, "materialize", exploding_materialize)
    path = write_parquet(tmp_path, make_three_column_table())

    with pytest.raises(ProcessingError) as ei:
        process_file(str(path))
    assert str(ei.value).startswith("Parquet processing error:")
    assert isinstance(ei.value.__cause__, KeyError)
    assert calls["n"] == 1


def test_release_happens_once_on_success(monkeypatch, tmp_path: Path) -> None:
    calls = {"n": 0}
    original = DecodedTable.release

    def counting_release(self):
        calls["n"] += 1
        original(self)

    monkeypatch.setattr(DecodedTable, "release", counting_release)
    process_file(str(write_parquet(tmp_path, make_three_column_table())))
    assert calls["n"] == 1


def test_empty_table_round_trip(tmp_path: Path) -> None:
    table = pa.table({"a": pa.array([], pa.int64()), "b": pa.array([], pa.string())})
    result = process_file(str(write_parquet(tmp_path, table)))
    assert result.num_rows == 0
    assert result.records == []
    assert result.columns == ["a", "b"]
    assert result.to_payload()["total"] == 0


def test_invalid_utf8_cell_does_not_fail_the_file() -> None:
    s = pa.array([b"ok", b"\xff\xfe"], pa.binary()).view(pa.string())
    sink = pa.BufferOutputStream()
    pq.write_table(pa.table({"s": s}), sink)

    result = process_bytes(sink.getvalue().to_pybytes())
    assert result.records == [{"s": "ok"}, {"s": "0xfffe"}]


def test_temporals_before_1973_keep_their_declared_unit() -> None:
    table = pa.table(
        {
            "old": pa.array([datetime(1960, 1, 1), datetime(1972, 6, 1)], pa.timestamp("ms")),
            "d_old": pa.array([date(1960, 1, 1), None], pa.date32()),
        }
    )
    sink = pa.BufferOutputStream()
    pq.write_table(table, sink)

    result = process_bytes(sink.getvalue().to_pybytes())
    assert result.records == [
        {"old": "1960-01-01 00:00:00.000", "d_old": "1960-01-01"},
        {"old": "1972-06-01 00:00:00.000", "d_old": ""},
    ]
