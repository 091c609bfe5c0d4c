from __future__ import annotations

from app.ui.panel import SessionPanel
from pqview.host.messages import HandlerContext, MessageHandler


def test_session_panel_buffers_and_drains() -> None:
    state: dict = {}
    panel = SessionPanel(state)
    panel.post_message({"type": "loading", "stage": "reading", "message": "..."})
    panel.post_message({"type": "error", "message": "x"})

    assert [e["type"] for e in state["pqview_events"]] == ["loading", "error"]
    assert [e["type"] for e in panel.drain()] == ["loading", "error"]
    assert panel.drain() == []


def test_session_panel_survives_reconstruction() -> None:
    state: dict = {}
    SessionPanel(state).post_message({"type": "error", "message": "x"})
    # a rerun builds a new panel over the same session state
    assert SessionPanel(state).drain() == [{"type": "error", "message": "x"}]


def test_session_panel_receives_handler_events() -> None:
    state: dict = {}
    panel = SessionPanel(state, key="events")
    MessageHandler().handle({"type": "getData"}, HandlerContext(panel=panel))
    assert state["events"][0]["type"] == "error"
