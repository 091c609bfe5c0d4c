"""
Viewer host layer: message protocol between the viewer UI and the decoding pipeline,
plus export helpers.

Modules
- messages: outbound event models, HandlerContext, MessageHandler.
- export: CSV / JSON serialization of records.
"""

from __future__ import annotations

from .export import records_to_csv, records_to_json
from .messages import HandlerContext, MessageHandler, Panel

__all__ = [
    "HandlerContext",
    "MessageHandler",
    "Panel",
    "records_to_csv",
    "records_to_json",
]
