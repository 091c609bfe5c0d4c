"""
Streamlit application orchestrator for the Parquet viewer.

This module plays the viewer-panel role of the host protocol: it asks
pqview.host.messages.MessageHandler for data through a session-state panel and
renders the resulting events.

Responsibilities:
    - Configure the Streamlit page and sidebar settings (file, display formats).
    - Request data via a ``getData`` message and render loading/error/notification events.
    - Render the records grid (global and per-column filters, sort, pagination) and
      the schema tree with file-level metadata.
    - Offer CSV / JSON downloads of the loaded records.

Notes:
    - Decoded results are cached per file in a process-wide ResultCache and reused
      until the file's mtime or size changes.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import polars as pl
import streamlit as st

from pqview.core.typing import JsonDict
from pqview.host import HandlerContext, MessageHandler, records_to_csv, records_to_json
from pqview.io import ResultCache, ViewerSettings

from .helpers import (
    filter_columns,
    filter_records,
    format_count,
    page_count,
    page_slice,
    records_frame,
    schema_rows,
    sort_records,
)
from .panel import SessionPanel

logger = logging.getLogger(__name__)


@st.cache_resource
def _result_cache(max_entries: int) -> ResultCache:
    return ResultCache(max_entries=max_entries)


def _notify(level: str, message: str) -> None:
    if level == "error":
        st.error(message)
    elif level == "warning":
        st.warning(message)
    else:
        st.info(message)


def _render_events(events: list[JsonDict]) -> JsonDict | None:
    """Render non-data events; return the last data event, if any."""
    data: JsonDict | None = None
    for event in events:
        kind = event.get("type")
        if kind == "data":
            data = event
        elif kind == "error":
            st.error(event.get("message", ""))
        elif kind == "showNotification":
            _notify(str(event.get("level", "info")), str(event.get("message", "")))
    return data


def streamlit_app(default_file: str | None = None, default_page_size: int = 100) -> None:
    """Render the Parquet viewer.

    Args:
        default_file (str | None): Optional file path preselected in the sidebar.
        default_page_size (int): Initial rows per page.

    Returns:
        None
    """
    st.set_page_config(page_title="Parquet Viewer", layout="wide")
    base = ViewerSettings.load()

    with st.sidebar:
        st.header("File")
        file_path = st.text_input("Parquet file path", value=default_file or "", key="pq_file")
        st.header("Display")
        ts_fmt = st.text_input("Timestamp format", value=base.timestamp_format, key="pq_ts_fmt")
        date_fmt = st.text_input("Date format", value=base.date_format, key="pq_date_fmt")
        page_size = int(
            st.number_input(
                "Rows per page",
                min_value=10,
                max_value=1000,
                value=max(10, min(1000, int(default_page_size))),
                step=10,
                key="pq_page_size",
            )
        )

    settings = replace(
        base,
        timestamp_format=ts_fmt or base.timestamp_format,
        date_format=date_fmt or base.date_format,
    )

    panel = SessionPanel(st.session_state)
    panel.drain()
    context = HandlerContext(
        panel=panel,
        file_path=file_path.strip() or None,
        settings=settings,
        cache=_result_cache(settings.cache_entries),
        notify=_notify,
    )
    with st.spinner("Reading Parquet file..."):
        MessageHandler().handle({"type": "getData"}, context)
    data = _render_events(panel.drain())
    if data is None:
        return

    records = data["records"]
    header = data["header"]
    total = int(data["total"])
    st.caption(
        f"{format_count(len(records))} of {format_count(total)} rows loaded, "
        f"{len(header)} columns"
    )

    tab_records, tab_schema = st.tabs(["Records", "Schema"])

    with tab_records:
        grid = records_frame(records, header)
        c1, c2, c3 = st.columns([3, 2, 1])
        with c1:
            query = st.text_input("Filter", value="", key="pq_filter")
        with c2:
            sort_col = st.selectbox("Sort by", options=["(none)"] + grid.columns, key="pq_sort")
        with c3:
            descending = st.checkbox("Descending", value=False, key="pq_desc")

        with st.expander("Column filters", expanded=False):
            column_filters = {
                name: st.text_input(f"Filter {name}", value="", key=f"pq_col_filter_{i}")
                for i, name in enumerate(grid.columns)
            }

        view = filter_records(grid, query)
        view = filter_columns(view, column_filters)
        view = sort_records(view, None if sort_col == "(none)" else sort_col, descending)
        pages = page_count(view.height, page_size)
        page = int(
            st.number_input("Page", min_value=1, max_value=pages, value=1, step=1, key="pq_page")
        )
        st.dataframe(page_slice(view, page, page_size), width="stretch", hide_index=True)
        st.text(f"Showing page {page} of {pages} ({format_count(view.height)} matching rows)")

        d1, d2 = st.columns(2)
        with d1:
            st.download_button(
                "Export CSV",
                data=records_to_csv(view.to_dicts()),
                file_name="export.csv",
                mime="text/csv",
            )
        with d2:
            st.download_button(
                "Export JSON",
                data=records_to_json(view.to_dicts()),
                file_name="export.json",
                mime="application/json",
            )

    with tab_schema:
        row_groups = int(data.get("rowGroups", 0))
        st.caption(
            f"Rows: {format_count(total)} | Row groups: {format_count(row_groups)} | "
            f"Compression: {data.get('compression') or 'none'}"
        )
        try:
            st.dataframe(pl.DataFrame(schema_rows(data["schema"])), width="stretch")
        except Exception as e:  # pragma: no cover - defensive UX
            logger.warning("failed to render schema tree: %s", e)
            st.error(f"Failed to render schema: {e}")
