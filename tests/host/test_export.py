from __future__ import annotations

import json

from pqview.host.export import records_to_csv, records_to_frame, records_to_json


def test_csv_empty_input_is_empty_string() -> None:
    assert records_to_csv([]) == ""


def test_csv_header_from_first_record_and_quoting() -> None:
    records = [
        {"a": "plain", "b": 'say "hi"', "c": "line1\nline2"},
        {"a": "x,y", "b": "", "c": "z"},
    ]
    assert records_to_csv(records) == (
        'a,b,c\n'
        'plain,"say ""hi""","line1\nline2"\n'
        '"x,y",,z'
    )


def test_csv_missing_keys_and_extra_keys() -> None:
    records = [{"a": "1", "b": "2"}, {"a": "3", "zzz": "ignored"}]
    assert records_to_csv(records) == "a,b\n1,2\n3,"


def test_frame_is_all_strings() -> None:
    df = records_to_frame([{"n": 1, "ok": True}])
    assert df.columns == ["n", "ok"]
    assert df.row(0) == ("1", "true")


def test_json_is_indented_and_keeps_unicode() -> None:
    records = [{"name": "Zoë", "n": "1"}]
    text = records_to_json(records)
    assert "Zoë" in text
    assert text.startswith("[\n  {\n    ")
    assert json.loads(text) == records
    assert records_to_json([]) == "[]"
