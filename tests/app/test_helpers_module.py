from __future__ import annotations

import polars as pl
import pytest

from app.ui.helpers import (
    filter_columns,
    filter_records,
    format_count,
    page_count,
    page_slice,
    records_frame,
    schema_rows,
    sort_records,
)
from pqview.core.grammar import TypeClass
from pqview.core.schema import SchemaNode

RECORDS = [
    {"id": "10", "name": "Banana", "note": ""},
    {"id": "9", "name": "apple", "note": "ripe"},
    {"id": "100", "name": "cherry", "note": "Apple pie"},
]


def _grid() -> pl.DataFrame:
    return records_frame(RECORDS, ["id", "name", "note"])


def test_records_frame_is_all_string_and_ordered() -> None:
    df = records_frame([{"b": "1"}], ["a", "b", "a"])
    assert df.columns == ["a", "b"]
    assert df.schema == {"a": pl.String, "b": pl.String}
    assert df.row(0) == ("", "1")


def test_filter_records_is_case_insensitive_across_columns() -> None:
    out = filter_records(_grid(), "APPLE")
    assert out.get_column("id").to_list() == ["9", "100"]
    assert filter_records(_grid(), "  ").height == 3
    assert filter_records(_grid(), "(").height == 0


def test_filter_columns_requires_every_column_to_match() -> None:
    out = filter_columns(_grid(), {"name": "CH", "note": "pie"})
    assert out.get_column("id").to_list() == ["100"]
    only_name = filter_columns(_grid(), {"name": "an", "note": "  ", "ghost": "x"})
    assert only_name.get_column("name").to_list() == ["Banana"]
    assert filter_columns(_grid(), {}).equals(_grid())


def test_sort_records_numeric_when_possible() -> None:
    out = sort_records(_grid(), "id")
    assert out.get_column("id").to_list() == ["9", "10", "100"]
    out_desc = sort_records(_grid(), "id", descending=True)
    assert out_desc.get_column("id").to_list() == ["100", "10", "9"]


def test_sort_records_lexicographic_with_empty_last() -> None:
    out = sort_records(_grid(), "note")
    assert out.get_column("note").to_list() == ["Apple pie", "ripe", ""]
    assert sort_records(_grid(), None).equals(_grid())
    assert sort_records(_grid(), "missing").equals(_grid())


def test_pagination() -> None:
    df = pl.DataFrame({"n": [str(i) for i in range(25)]})
    assert page_count(25, 10) == 3
    assert page_count(0, 10) == 1
    assert page_slice(df, 3, 10).get_column("n").to_list() == [str(i) for i in range(20, 25)]
    assert page_slice(df, 99, 10).height == 5
    assert page_slice(df, 0, 10).get_column("n").to_list()[0] == "0"
    with pytest.raises(ValueError):
        page_count(10, 0)


def test_format_count() -> None:
    assert format_count(20000) == "20,000"
    assert format_count(7) == "7"


def test_schema_rows_flatten_with_indentation() -> None:
    root = SchemaNode(
        name="schema",
        physical_type="group",
        nullable=False,
        type_class=TypeClass.STRUCT,
        children=[
            SchemaNode(
                name="s",
                physical_type="struct<a: int64>",
                type_class=TypeClass.STRUCT,
                children=[SchemaNode(name="a", physical_type="int64", type_class=TypeClass.INTEGER)],
            )
        ],
    )
    rows = schema_rows(root.model_dump(mode="json", by_alias=True))
    assert [r["name"] for r in rows] == ["s", "  a"]
    assert rows[1]["type_class"] == "integer"
    assert rows[0]["logical_type"] == ""
