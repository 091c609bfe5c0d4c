from __future__ import annotations

import pytest
from pydantic import ValidationError

from pqview.core.grammar import TypeClass
from pqview.core.schema import NormalizedResult, SchemaNode


def _tree() -> SchemaNode:
    return SchemaNode(
        name="schema",
        physical_type="group",
        nullable=False,
        type_class=TypeClass.STRUCT,
        children=[
            SchemaNode(name="id", physical_type="int64", type_class=TypeClass.INTEGER, nullable=False),
            SchemaNode(
                name="s",
                physical_type="struct<a: int64>",
                type_class=TypeClass.STRUCT,
                children=[SchemaNode(name="a", physical_type="int64", type_class="integer")],
            ),
        ],
    )


def test_schema_node_serializes_with_camel_case_aliases() -> None:
    dumped = _tree().model_dump(mode="json", by_alias=True)
    assert dumped["name"] == "schema"
    child = dumped["children"][0]
    assert set(child) == {"name", "physicalType", "logicalType", "nullable", "typeClass", "children"}
    assert child["typeClass"] == "integer"
    assert child["nullable"] is False


def test_schema_node_round_trips_from_payload() -> None:
    tree = _tree()
    again = SchemaNode.model_validate(tree.model_dump(mode="json", by_alias=True))
    assert again == tree


def test_schema_node_walk_and_flags() -> None:
    tree = _tree()
    assert tree.is_root and not tree.is_leaf
    assert [(d, n.name) for d, n in tree.walk()] == [(0, "schema"), (1, "id"), (1, "s"), (2, "a")]


def test_schema_node_rejects_unknown_fields_and_is_frozen() -> None:
    with pytest.raises(ValidationError):
        SchemaNode(name="x", physical_type="int64", bogus=1)  # type: ignore[call-arg]
    node = SchemaNode(name="x", physical_type="int64")
    with pytest.raises(ValidationError):
        node.name = "y"  # type: ignore[misc]


def test_normalized_result_payload_and_truncation() -> None:
    result = NormalizedResult(
        schema=_tree(),
        records=[{"id": "1", "s": '{"a":1}'}],
        columns=["id", "s"],
        num_rows=3,
        row_groups=1,
        compression="SNAPPY",
    )
    assert result.truncated
    payload = result.to_payload()
    assert set(payload) == {"schema", "records", "header", "total", "rowGroups", "compression"}
    assert payload["rowGroups"] == 1 and payload["compression"] == "SNAPPY"
    assert payload["header"] == ["id", "s"]
    assert payload["total"] == 3
    assert payload["schema"]["children"][1]["physicalType"] == "struct<a: int64>"


def test_normalized_result_rejects_more_records_than_rows() -> None:
    with pytest.raises(ValidationError):
        NormalizedResult(schema=_tree(), records=[{}, {}], columns=[], num_rows=1)
