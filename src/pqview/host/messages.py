"""
Viewer host message protocol.

The viewer UI and the host exchange small JSON-able dicts tagged by ``type``. This
module defines the outbound events as pydantic models and the MessageHandler that
dispatches inbound requests.

Inbound requests (``{"type": ..., "data": ...}``)
- getData: decode the current file and post ``loading`` then ``data`` (or ``error``).
- exportCSV / exportJSON: serialize ``data`` (a list of records) to a chosen path.
- copyToClipboard: hand ``data`` (text) to the host clipboard.
- showNotification: forward ``level`` / ``message`` to the host notifier.

Outbound events
- loading, data, error, showNotification, exportComplete, exportError,
  copyComplete, copyError.

Notes
- Every handler catches its own failures and reports them as events; nothing raised
  by the pipeline escapes handle().
- Unknown request types are logged and ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

from pqview.core.typing import JsonDict, Record
from pqview.io.cache import ResultCache
from pqview.io.config import ViewerSettings
from pqview.io.pipeline import process_file

from .export import records_to_csv, records_to_json

logger = logging.getLogger(__name__)

__all__ = [
    "NO_FILE_MESSAGE",
    "Panel",
    "HandlerContext",
    "LoadingEvent",
    "DataEvent",
    "ErrorEvent",
    "NotificationEvent",
    "ExportCompleteEvent",
    "ExportErrorEvent",
    "CopyCompleteEvent",
    "CopyErrorEvent",
    "truncation_notice",
    "MessageHandler",
]

NO_FILE_MESSAGE = "No file path available. Please open a Parquet file first."

Level = Literal["info", "warning", "error"]


class Panel(Protocol):
    """Receiver of outbound events (a webview, a session-state buffer, a test double)."""

    def post_message(self, message: JsonDict) -> None: ...


def _no_save_path(default_name: str) -> str | None:
    return None


_LOG_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


def _log_notification(level: str, message: str) -> None:
    logger.log(_LOG_LEVELS.get(level, logging.INFO), "%s", message)


@dataclass
class HandlerContext:
    """
    Per-panel collaborators for MessageHandler.

    Attributes:
        panel (Panel): Destination for outbound events.
        file_path (str | None): File shown by the panel; None before one is opened.
        settings (ViewerSettings): Pipeline settings.
        cache (ResultCache | None): Optional result cache; None decodes every time.
        choose_save_path (Callable[[str], str | None]): Asked for an export destination
            given a default file name; None means the user cancelled.
        clipboard (Callable[[str], None] | None): Clipboard writer; None reports a
            copyError.
        notify (Callable[[str, str], None]): Host notifier taking (level, message).
    """

    panel: Panel
    file_path: str | None = None
    settings: ViewerSettings = field(default_factory=ViewerSettings)
    cache: ResultCache | None = None
    choose_save_path: Callable[[str], str | None] = _no_save_path
    clipboard: Callable[[str], None] | None = None
    notify: Callable[[str, str], None] = _log_notification


class _Event(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    def to_message(self) -> JsonDict:
        return self.model_dump(mode="json", by_alias=True)


class LoadingEvent(_Event):
    type: Literal["loading"] = "loading"
    stage: str
    message: str


class DataEvent(_Event):
    """Decoded file payload: schema tree, records, header (column names), file counts."""

    type: Literal["data"] = "data"
    schema_tree: JsonDict = Field(alias="schema")
    records: list[Record]
    header: list[str]
    total: int
    row_groups: int = Field(default=0, alias="rowGroups")
    compression: str | None = None


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    message: str


class NotificationEvent(_Event):
    type: Literal["showNotification"] = "showNotification"
    level: Level = "info"
    message: str


class ExportCompleteEvent(_Event):
    type: Literal["exportComplete"] = "exportComplete"
    format: str
    message: str


class ExportErrorEvent(_Event):
    type: Literal["exportError"] = "exportError"
    format: str
    message: str


class CopyCompleteEvent(_Event):
    type: Literal["copyComplete"] = "copyComplete"
    message: str = "Copied to clipboard"


class CopyErrorEvent(_Event):
    type: Literal["copyError"] = "copyError"
    message: str


def truncation_notice(shown: int, total: int) -> str:
    """
    Warning text for a capped load.

    Examples:
        >>> truncation_notice(20000, 25000)
        'Loaded 20,000 of 25,000 rows for performance. Use export to get full data.'
    """
    return f"Loaded {shown:,} of {total:,} rows for performance. Use export to get full data."


_EXPORTERS: dict[str, tuple[str, Callable[[list[Record]], str]]] = {
    "CSV": ("export.csv", records_to_csv),
    "JSON": ("export.json", records_to_json),
}


class MessageHandler:
    """
    Dispatch inbound viewer requests to handlers.

    Examples:
        >>> class Sink:
        ...     def __init__(self):
        ...         self.sent = []
        ...     def post_message(self, message):
        ...         self.sent.append(message)
        >>> sink = Sink()
        >>> MessageHandler().handle({"type": "getData"}, HandlerContext(panel=sink))
        >>> sink.sent[0]["type"]
        'error'
    """

    def handle(self, message: Mapping[str, Any], context: HandlerContext) -> None:
        kind = message.get("type")
        data = message.get("data")
        logger.debug("received %s message (file=%s)", kind, context.file_path)

        if kind == "getData":
            self.get_data(context)
        elif kind == "exportCSV":
            self.export(data, "CSV", context)
        elif kind == "exportJSON":
            self.export(data, "JSON", context)
        elif kind == "copyToClipboard":
            self.copy_to_clipboard(data, context)
        elif kind == "showNotification":
            self.show_notification(message, context)
        else:
            logger.info("unknown message type %r ignored", kind)

    @staticmethod
    def _post(context: HandlerContext, event: _Event) -> None:
        context.panel.post_message(event.to_message())

    def get_data(self, context: HandlerContext) -> None:
        path = context.file_path
        if not path:
            self._post(context, ErrorEvent(message=NO_FILE_MESSAGE))
            return

        self._post(context, LoadingEvent(stage="reading", message="Reading Parquet file..."))
        try:
            if context.cache is not None:
                result = context.cache.load(path, context.settings)
            else:
                result = process_file(path, context.settings)
        except Exception as exc:
            logger.error("failed to load %s: %s", path, exc)
            self._post(context, ErrorEvent(message=str(exc) or "Failed to load Parquet file"))
            return

        payload = result.to_payload()
        self._post(
            context,
            DataEvent(
                schema=payload["schema"],
                records=payload["records"],
                header=payload["header"],
                total=payload["total"],
                rowGroups=payload["rowGroups"],
                compression=payload["compression"],
            ),
        )
        if result.truncated:
            self._post(
                context,
                NotificationEvent(
                    level="warning",
                    message=truncation_notice(len(result.records), result.num_rows),
                ),
            )

    def export(self, data: Any, fmt: str, context: HandlerContext) -> None:
        default_name, serialize = _EXPORTERS[fmt]
        try:
            content = serialize(list(data or []))
            target = context.choose_save_path(default_name)
            if target is None:
                logger.debug("%s export cancelled", fmt)
                return
            Path(target).write_text(content, encoding="utf-8")
        except Exception as exc:
            logger.warning("%s export failed: %s", fmt, exc)
            self._post(context, ExportErrorEvent(format=fmt, message=str(exc)))
            return
        context.notify("info", f"{fmt} exported successfully to {target}")
        self._post(
            context, ExportCompleteEvent(format=fmt, message=f"{fmt} exported successfully")
        )

    def copy_to_clipboard(self, data: Any, context: HandlerContext) -> None:
        try:
            if context.clipboard is None:
                raise RuntimeError("Clipboard is not available")
            context.clipboard("" if data is None else str(data))
        except Exception as exc:
            self._post(context, CopyErrorEvent(message=str(exc)))
            return
        self._post(context, CopyCompleteEvent())

    def show_notification(self, message: Mapping[str, Any], context: HandlerContext) -> None:
        level = message.get("level")
        text = str(message.get("message") or "")
        context.notify(level if level in ("warning", "error") else "info", text)
