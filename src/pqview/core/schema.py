"""
Pydantic v2 models and frozen descriptors for the decoding pipeline's outputs.

Responsibilities
- Define SchemaNode, the stable, serializable mirror of a decoded file's type tree.
- Define ColumnDescriptor, the per-column handle used by the row materializer.
- Define NormalizedResult, the single value handed to viewer collaborators.

Style
- Zero-IO (stdlib + pydantic only).
- Serialized field names are camelCase (``physicalType``, ``numRows``) to match the
  viewer payload; Python attribute names stay lower_snake.

References
- grammar: src/pqview/core/grammar.py (TypeClass tags)
- projector: src/pqview/io/project.py (builds SchemaNode / ColumnDescriptor)
- pipeline: src/pqview/io/pipeline.py (builds NormalizedResult)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .constants import ROOT_SCHEMA_NAME
from .grammar import TypeClass
from .typing import JsonDict, Record

__all__ = [
    "SchemaNode",
    "ColumnDescriptor",
    "NormalizedResult",
]


class SchemaNode(BaseModel):
    """
    One node of the projected schema tree.

    Attributes:
        name (str): Field name; ``"schema"`` for the root.
        physical_type (str): Decoder type descriptor rendered as a string
            (e.g., ``"timestamp[ms]"``, ``"struct<a: int64>"``).
        logical_type (str | None): Parquet logical/converted type annotation, if any.
        nullable (bool): False only when the column is declared required.
        type_class (TypeClass): Display type class derived from ``physical_type``.
        children (list[SchemaNode]): Nested fields in declaration order; empty for leaves.

    Notes:
        A node with children is a struct, list, or map; a leaf has none.

    Examples:
        >>> from pqview.core.schema import SchemaNode
        >>> SchemaNode(name="id", physical_type="int64", type_class="integer").is_leaf
        True
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    name: str
    physical_type: str
    logical_type: str | None = None
    nullable: bool = True
    type_class: TypeClass = TypeClass.OTHER
    children: list[SchemaNode] = Field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_SCHEMA_NAME

    def walk(self, depth: int = 0) -> list[tuple[int, SchemaNode]]:
        """
        Flatten the subtree depth-first.

        Returns:
            list[tuple[int, SchemaNode]]: ``(depth, node)`` pairs, this node first.
        """
        out: list[tuple[int, SchemaNode]] = [(depth, self)]
        for child in self.children:
            out.extend(child.walk(depth + 1))
        return out


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Frozen handle for one top-level decoded column.

    Attributes:
        name (str): Column name (not guaranteed unique across columns).
        position (int): Index of the column vector in the decoded table.
        physical_type (str): Decoder type descriptor string.
        type_class (TypeClass): Tag computed once by the projector.

    Notes:
        Consumers index by position and display by name.
    """

    name: str
    position: int
    physical_type: str
    type_class: TypeClass


class NormalizedResult(BaseModel):
    """
    Output of one decode call.

    Attributes:
        schema_tree (SchemaNode): Projected schema; serialized as ``schema``.
        records (list[dict[str, str]]): Display records, at most the row cap.
        columns (list[str]): Top-level column names in declaration order.
        num_rows (int): True row count of the file (may exceed ``len(records)``).
        row_groups (int): Number of row groups in the file.
        compression (str | None): Codec name, a comma-joined list when chunks differ,
            or None for a file without column chunks.

    Raises:
        pydantic.ValidationError: If ``len(records)`` exceeds ``num_rows``.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    schema_tree: SchemaNode = Field(alias="schema")
    records: list[Record] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    num_rows: int = Field(0, ge=0)
    row_groups: int = Field(0, ge=0)
    compression: str | None = None

    @model_validator(mode="after")
    def _check_record_count(self) -> NormalizedResult:
        if len(self.records) > self.num_rows:
            raise ValueError(
                f"records ({len(self.records)}) cannot exceed num_rows ({self.num_rows})"
            )
        return self

    @property
    def truncated(self) -> bool:
        return self.num_rows > len(self.records)

    def to_payload(self) -> JsonDict:
        """
        Build the viewer data payload.

        Returns:
            dict[str, Any]: ``{"schema", "records", "header", "total", "rowGroups",
            "compression"}``.
        """
        schema: Any = self.schema_tree.model_dump(mode="json", by_alias=True)
        return {
            "schema": schema,
            "records": [dict(r) for r in self.records],
            "header": list(self.columns),
            "total": self.num_rows,
            "rowGroups": self.row_groups,
            "compression": self.compression,
        }
