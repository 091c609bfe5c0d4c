"""
Core package aggregator for pqview contracts (constants, type classes, display
normalization, schema models).

## Contracts (single source of truth)
- Constants: row cap, supported codecs, default display patterns, magnitude boundaries.
- Grammar: TypeClass tags and the descriptor classifier.
- Datefmt: display pattern mini-language and lenient date parsing.
- Normalize: the total cell-to-string conversion.
- Schema: SchemaNode, ColumnDescriptor, NormalizedResult.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO and no pyarrow.
- pqview.io owns decoding and resource lifetime; it depends on core, never the reverse.

## Examples
```python
from pqview.core import TypeClass, normalize_cell
normalize_cell(1_700_000_000, TypeClass.TIMESTAMP)  # '2023-11-14 22:13:20.000'
normalize_cell({"a": 1}, TypeClass.STRUCT)  # '{"a":1}'
```
"""

from __future__ import annotations

from .constants import DEFAULT_DATE_FORMAT, DEFAULT_TIMESTAMP_FORMAT, ROW_CAP, SUPPORTED_CODECS
from .grammar import TypeClass, type_class_from_string
from .normalize import normalize_cell
from .schema import ColumnDescriptor, NormalizedResult, SchemaNode

__all__ = [
    "ROW_CAP",
    "SUPPORTED_CODECS",
    "DEFAULT_TIMESTAMP_FORMAT",
    "DEFAULT_DATE_FORMAT",
    "TypeClass",
    "type_class_from_string",
    "normalize_cell",
    "SchemaNode",
    "ColumnDescriptor",
    "NormalizedResult",
]
