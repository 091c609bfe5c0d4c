"""
Session-state backed panel for the viewer host protocol.

SessionPanel implements pqview.host.messages.Panel by buffering outbound events in a
mutable mapping (Streamlit's st.session_state in the app, a dict in tests). The page
drains the buffer after each MessageHandler call and renders what it finds.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from pqview.core.typing import JsonDict


class SessionPanel:
    """Buffer outbound viewer events in a session mapping.

    Args:
        state (MutableMapping[str, Any]): Session storage.
        key (str): Storage key for the event buffer.
    """

    def __init__(self, state: MutableMapping[str, Any], key: str = "pqview_events") -> None:
        self._state = state
        self._key = key
        if key not in state:
            state[key] = []

    def post_message(self, message: JsonDict) -> None:
        self._state[self._key].append(dict(message))

    def drain(self) -> list[JsonDict]:
        """Return and clear buffered events, oldest first."""
        events = list(self._state[self._key])
        self._state[self._key] = []
        return events
