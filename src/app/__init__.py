from __future__ import annotations

"""
Top-level Streamlit app package.

This package hosts the interactive Parquet viewer (Streamlit) decoupled from the
pqview.* library modules. Decoding and the host protocol live under pqview.*;
the Streamlit UI shell and app-specific helpers live here.

CLI entrypoint (configured in pyproject.toml):
    pqview-app = app.main:main
"""
