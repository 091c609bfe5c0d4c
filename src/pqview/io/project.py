"""
Schema projection for decoded Parquet tables.

Overview
- project(): mirror the decoded type tree into a SchemaNode rooted at "schema".
- describe_columns(): one ColumnDescriptor per top-level column, tagged once.

Conventions
- physical_type is str(arrow_type), e.g. "timestamp[ms]" or "struct<a: int64>".
- logical_type comes from the Parquet leaf annotation (logical type, then converted
  type); nested list/map groups fall back to "LIST"/"MAP".
- nullable follows the declared repetition (required columns are not nullable).

Notes
- Never fails on an empty table: the root simply has no children.
- Accepts a DecodedTable or a bare pyarrow Table (the latter has no Parquet
  annotations, so logical_type is only filled for list/map groups).
"""

from __future__ import annotations

import pyarrow as pa
import pyarrow.parquet as pq

from pqview.core.constants import ROOT_SCHEMA_NAME
from pqview.core.grammar import TypeClass, type_class_from_string
from pqview.core.schema import ColumnDescriptor, SchemaNode

from .decode import DecodedTable

__all__ = [
    "project",
    "describe_columns",
    "leaf_annotations",
]


def _schemas(table: DecodedTable | pa.Table) -> tuple[pa.Schema, pq.ParquetSchema | None]:
    if isinstance(table, pa.Table):
        return table.schema, None
    return table.arrow_schema, table.parquet_schema


def leaf_annotations(parquet_schema: pq.ParquetSchema | None) -> dict[str, str]:
    """
    Map dotted leaf paths to their Parquet annotation name.

    Args:
        parquet_schema (pq.ParquetSchema | None): Footer schema; None yields {}.

    Returns:
        dict[str, str]: e.g. {"name": "STRING", "ts": "TIMESTAMP"}; unannotated leaves
        are omitted.
    """
    out: dict[str, str] = {}
    if parquet_schema is None:
        return out
    for i in range(len(parquet_schema)):
        col = parquet_schema.column(i)
        logical = col.logical_type.type
        if logical and logical != "NONE":
            out[col.path] = logical
            continue
        converted = col.converted_type
        if converted and converted != "NONE":
            out[col.path] = converted
    return out


def _is_list_like(t: pa.DataType) -> bool:
    return pa.types.is_list(t) or pa.types.is_large_list(t) or pa.types.is_fixed_size_list(t)


def _node(field: pa.Field, path: str, annotations: dict[str, str]) -> SchemaNode:
    t = field.type
    logical = annotations.get(path)
    children: list[SchemaNode] = []

    if pa.types.is_map(t):
        children = [
            _node(t.key_field, f"{path}.key_value.key", annotations),
            _node(t.item_field, f"{path}.key_value.value", annotations),
        ]
        logical = logical or "MAP"
    elif _is_list_like(t):
        vf = t.value_field
        children = [_node(vf, f"{path}.list.{vf.name}", annotations)]
        logical = logical or "LIST"
    elif pa.types.is_struct(t):
        for i in range(t.num_fields):
            child = t.field(i)
            children.append(_node(child, f"{path}.{child.name}", annotations))

    physical = str(t)
    return SchemaNode(
        name=field.name,
        physical_type=physical,
        logical_type=logical,
        nullable=field.nullable,
        type_class=type_class_from_string(physical),
        children=children,
    )


def project(table: DecodedTable | pa.Table) -> SchemaNode:
    """
    Project a decoded table's schema into a SchemaNode tree.

    Args:
        table (DecodedTable | pa.Table): Decoded table (not yet released).

    Returns:
        SchemaNode: Root named "schema" whose children are the top-level columns in
        declaration order.
    """
    arrow_schema, parquet_schema = _schemas(table)
    annotations = leaf_annotations(parquet_schema)
    children = [_node(field, field.name, annotations) for field in arrow_schema]
    return SchemaNode(
        name=ROOT_SCHEMA_NAME,
        physical_type="group",
        logical_type=None,
        nullable=False,
        type_class=TypeClass.STRUCT,
        children=children,
    )


def describe_columns(table: DecodedTable | pa.Table) -> list[ColumnDescriptor]:
    """
    Describe top-level columns for the row materializer.

    Returns:
        list[ColumnDescriptor]: One per column; the type class is computed here once.
    """
    arrow_schema, _ = _schemas(table)
    out: list[ColumnDescriptor] = []
    for position, field in enumerate(arrow_schema):
        physical = str(field.type)
        out.append(
            ColumnDescriptor(
                name=field.name,
                position=position,
                physical_type=physical,
                type_class=type_class_from_string(physical),
            )
        )
    return out
