"""
Type-class grammar for decoded Parquet columns.

Defines the closed set of type-class tags attached to every column and schema node,
and the classifier that derives a tag from a decoder type descriptor string. The
tag is computed once per column by the schema projector; the cell normalizer then
dispatches on the tag instead of re-reading the descriptor per cell.

Responsibilities
- Define TypeClass (PascalCase class, UPPER_SNAKE members, lower_snake values).
- Classify descriptor strings with case-insensitive substring rules.
- Provide small predicates used by the normalizer and the viewer.

Classification rules (applied in order, on the lowercased descriptor)
---------------------------------------------------------------------
| Rule                                                   | Tag        |
|--------------------------------------------------------|------------|
| ``dictionary<values=X, ...>``                          | tag of X   |
| starts with ``struct<``                                | struct     |
| starts with ``list<``/``large_list<``/``fixed_size_list<`` | list   |
| starts with ``map<``                                   | map        |
| contains ``timestamp``, ``timeinstant`` or ``datetime``| timestamp  |
| contains ``date``                                      | date       |
| contains ``bool``                                      | boolean    |
| contains ``decimal``                                   | decimal    |
| contains ``interval``, ``duration`` or ``time``        | other      |
| contains ``float``, ``double`` or ``halffloat``        | float      |
| contains ``int``                                       | integer    |
| contains ``string`` or ``utf8``                        | string     |
| contains ``binary``                                    | binary     |
| anything else                                          | other      |

Notes:
    - Nested descriptors are tested first so that ``struct<ts: timestamp[ms]>``
      is a struct, not a timestamp.
    - Zero-IO, stdlib only.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "TypeClass",
    "type_class_from_string",
    "type_class_from_value",
    "is_temporal",
]


class TypeClass(Enum):
    """
    Closed set of display type classes.

    Serialized values are lower_snake and appear in the schema payload as
    ``typeClass``.
    """

    TIMESTAMP = "timestamp"
    DATE = "date"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    BINARY = "binary"
    STRUCT = "struct"
    LIST = "list"
    MAP = "map"
    OTHER = "other"


_LIST_PREFIXES = (
    "list<",
    "large_list<",
    "fixed_size_list<",
    "list_view<",
    "large_list_view<",
)

_DICTIONARY_PREFIX = "dictionary<values="


def _dictionary_values(descriptor: str) -> str:
    # dictionary<values=string, indices=int32, ordered=0>
    inner = descriptor[len(_DICTIONARY_PREFIX) :]
    return inner.split(",", 1)[0]


def type_class_from_string(descriptor: str | None) -> TypeClass:
    """
    Classify a decoder type descriptor string.

    Args:
        descriptor (str | None): Type descriptor as rendered by the decoder
            (e.g., ``"timestamp[ms]"``, ``"date32[day]"``, ``"struct<a: int64>"``).

    Returns:
        TypeClass: The matching tag; ``TypeClass.OTHER`` for unknown or missing input.

    Examples:
        >>> type_class_from_string("timestamp[us, tz=UTC]")
        <TypeClass.TIMESTAMP: 'timestamp'>
        >>> type_class_from_string("DATE32[DAY]")
        <TypeClass.DATE: 'date'>
        >>> type_class_from_string("struct<ts: timestamp[ms]>")
        <TypeClass.STRUCT: 'struct'>
    """
    if not descriptor:
        return TypeClass.OTHER
    s = str(descriptor).strip().lower()
    if s.startswith(_DICTIONARY_PREFIX):
        s = _dictionary_values(s)

    if s.startswith("struct<"):
        return TypeClass.STRUCT
    if s.startswith(_LIST_PREFIXES):
        return TypeClass.LIST
    if s.startswith("map<"):
        return TypeClass.MAP

    if "timestamp" in s or "timeinstant" in s or "datetime" in s:
        return TypeClass.TIMESTAMP
    if "date" in s:
        return TypeClass.DATE
    if "bool" in s:
        return TypeClass.BOOLEAN
    if "decimal" in s:
        return TypeClass.DECIMAL
    # time32/time64, durations and intervals carry "int"/"time" but are not instants
    if "interval" in s or "duration" in s or "time" in s:
        return TypeClass.OTHER
    if "float" in s or "double" in s:
        return TypeClass.FLOAT
    if "int" in s:
        return TypeClass.INTEGER
    if "string" in s or "utf8" in s:
        return TypeClass.STRING
    if "binary" in s:
        return TypeClass.BINARY
    return TypeClass.OTHER


def type_class_from_value(value: TypeClass | str | None) -> TypeClass:
    """
    Coerce a tag, a serialized tag value, or a descriptor string into a TypeClass.

    Serialized tag values (e.g., ``"timestamp"``) round-trip to their member; any
    other string is classified as a descriptor.
    """
    if isinstance(value, TypeClass):
        return value
    if isinstance(value, str):
        try:
            return TypeClass(value)
        except ValueError:
            return type_class_from_string(value)
    return TypeClass.OTHER


def is_temporal(tc: TypeClass) -> bool:
    """Return True for timestamp-like and date-like tags."""
    return tc in (TypeClass.TIMESTAMP, TypeClass.DATE)
