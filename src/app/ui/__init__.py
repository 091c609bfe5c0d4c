"""
Parquet viewer UI package.

This package contains the Streamlit UI for the Parquet viewer. It exposes the
page orchestrator and focused modules for separate concerns.

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - panel: Session-state panel receiving host protocol events.
    - helpers: Record grid operations (filters, sort, pagination) and formatting.

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_file="data/example.parquet", default_page_size=100)
"""

from __future__ import annotations

from .app import streamlit_app
from .panel import SessionPanel

__all__ = [
    "streamlit_app",
    "SessionPanel",
]
